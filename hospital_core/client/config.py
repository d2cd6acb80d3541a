# hospital_core/client/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_API_URL = "http://localhost:8000/api/v1"


@dataclass(frozen=True)
class ClientConfig:
    base_url: str = DEFAULT_API_URL
    timeout: float = 10.0
    token_file: Path = Path.home() / ".hospital_admin" / "token.json"

    @classmethod
    def from_env(cls, dotenv_path: str | os.PathLike | None = None) -> "ClientConfig":
        """
        HOSPITAL_API_URL, HOSPITAL_API_TIMEOUT, HOSPITAL_TOKEN_FILE (optionally from a .env file).
        """
        load_dotenv(dotenv_path)
        token_file = os.getenv("HOSPITAL_TOKEN_FILE")
        return cls(
            base_url=os.getenv("HOSPITAL_API_URL", DEFAULT_API_URL).rstrip("/"),
            timeout=float(os.getenv("HOSPITAL_API_TIMEOUT", "10")),
            token_file=Path(token_file) if token_file else cls.token_file,
        )

# hospital_core/client/session.py
from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthUser:
    id: str
    username: str
    name: str


@dataclass(frozen=True)
class Session:
    """
    Who is logged in. Immutable: login builds a new one, logout drops it.
    """
    token: str
    user: Optional[AuthUser] = None

    @property
    def authorization(self) -> str:
        return f"Bearer {self.token}"

    @classmethod
    def from_auth_response(cls, payload: dict[str, Any]) -> "Session":
        user = payload.get("user")
        return cls(
            token=payload["token"],
            user=AuthUser(
                id=str(user.get("id", "")),
                username=user.get("username", ""),
                name=user.get("name") or user.get("username", ""),
            )
            if user
            else None,
        )


class TokenStore:
    """
    Persists the current session to one JSON file so it survives restarts.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def save(self, session: Session) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(asdict(session)), encoding="utf-8")

    def load(self) -> Session | None:
        if not self.path.exists():
            return None
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable token file %s", self.path)
            return None
        if not raw.get("token"):
            return None
        return Session.from_auth_response(raw)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)

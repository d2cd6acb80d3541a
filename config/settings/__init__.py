# config/settings/__init__.py
# DJANGO_ENV picks the profile: "prod", or "local" (default; pytest runs on it too).
import os

_profile = os.getenv("DJANGO_ENV", "local").lower()

if _profile == "prod":
    from .prod import *  # noqa
else:
    from .local import *  # noqa

from __future__ import annotations


def actor_user_id(request) -> int | None:
    """
    Authenticated user id for audit/ledger rows, None for anonymous callers.
    """
    user = getattr(request, "user", None)
    if user is not None and user.is_authenticated:
        return user.id
    return None

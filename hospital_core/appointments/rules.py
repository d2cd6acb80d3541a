# hospital_core/appointments/rules.py
"""
Scheduling rules shared by the API and the client.

Pure functions only: importable without Django settings.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Callable, Iterable, TypeVar

T = TypeVar("T")


class AppointmentStatus:
    """
    Keep strings aligned with Appointment.status values.
    """
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    ALL = (SCHEDULED, COMPLETED, CANCELLED)
    TERMINAL = frozenset({COMPLETED, CANCELLED})


# current status -> statuses it may move to (staying put is always listed)
ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    AppointmentStatus.SCHEDULED: frozenset(
        {AppointmentStatus.SCHEDULED, AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED}
    ),
    AppointmentStatus.COMPLETED: frozenset({AppointmentStatus.COMPLETED}),
    AppointmentStatus.CANCELLED: frozenset({AppointmentStatus.CANCELLED}),
}


def transition_error(current: str, new: str) -> str | None:
    """
    None when current -> new is legal, otherwise a message fit for the user.
    """
    if new not in ALLOWED_TRANSITIONS:
        return f"Unknown appointment status {new!r}."
    allowed = ALLOWED_TRANSITIONS.get(current)
    if allowed is None:
        return f"Unknown appointment status {current!r}."
    if new in allowed:
        return None
    if current in AppointmentStatus.TERMINAL:
        return f"Appointment is {current} and can no longer change status."
    return f"Cannot move appointment from {current} to {new}."


def is_future(when: datetime, *, now: datetime) -> bool:
    return when > now


def conflict_window(when: datetime, *, slot_minutes: int) -> tuple[datetime, datetime] | None:
    """
    Open interval of start times that overlap a booking starting at `when`.

    Every booking lasts `slot_minutes`, so another booking starting at t
    overlaps iff when - slot < t < when + slot. A slot of 0 means only the
    identical timestamp conflicts (returns None).
    """
    if slot_minutes <= 0:
        return None
    slot = timedelta(minutes=slot_minutes)
    return when - slot, when + slot


def group_by_date(items: Iterable[T], *, time_of: Callable[[T], datetime]) -> dict[date, list[T]]:
    """
    Group by the calendar date of each item's timestamp.
    Dates come out ascending; items within a date are ordered by time ascending.
    """
    grouped: dict[date, list[T]] = {}
    for item in sorted(items, key=time_of):
        grouped.setdefault(time_of(item).date(), []).append(item)
    return dict(sorted(grouped.items()))


def matches_search(term: str | None, *fields: str | None) -> bool:
    """
    Case-insensitive substring match against any of the given fields.
    An empty term matches everything.
    """
    needle = (term or "").strip().lower()
    if not needle:
        return True
    return any(needle in (f or "").lower() for f in fields)

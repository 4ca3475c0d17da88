from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class Clock(Protocol):
    """Source of the current instant used for default time claims."""

    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock frozen at a given instant, advanced manually in tests."""

    def __init__(self, instant: datetime) -> None:
        self._instant = ensure_aware(instant)

    def now(self) -> datetime:
        return self._instant

    def advance(self, delta: timedelta) -> None:
        self._instant = self._instant + delta


def ensure_aware(instant: datetime) -> datetime:
    """Return ``instant`` as an aware datetime, treating naive values as UTC."""

    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant


def to_epoch_seconds(instant: datetime) -> int:
    """Whole seconds since the epoch, truncated to the floor second."""

    return (ensure_aware(instant) - EPOCH) // timedelta(seconds=1)


def from_epoch_seconds(seconds: int) -> datetime:
    return EPOCH + timedelta(seconds=seconds)


def to_millis(instant: datetime) -> int:
    return (ensure_aware(instant) - EPOCH) // timedelta(milliseconds=1)


def from_millis(millis: int) -> datetime:
    return EPOCH + timedelta(milliseconds=millis)


__all__ = [
    "EPOCH",
    "Clock",
    "SystemClock",
    "FixedClock",
    "ensure_aware",
    "to_epoch_seconds",
    "from_epoch_seconds",
    "to_millis",
    "from_millis",
]

"""Snapshot update periods of dimension table storages."""

from enum import Enum

__all__ = ["UpdatePeriod"]


class UpdatePeriod(str, Enum):
    """Cadence at which a storage refreshes an incremental snapshot.

    Members are persisted by name, see ``UpdatePeriod.from_name``.
    """

    SECONDLY = "secondly"
    MINUTELY = "minutely"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"

    @classmethod
    def from_name(cls, name: str) -> "UpdatePeriod":
        """Returns the period for a persisted member name such as ``DAILY``.
        Raises `KeyError` for unknown names."""
        return cls[name.strip().upper()]

    def __str__(self) -> str:
        return self.name

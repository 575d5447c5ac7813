"""Time range of a cube query."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

from ..errors import InvalidTimeRangeError, InvertedRangeError

__all__ = ["TimeRange", "TimeRangeBuilder"]


class TimeRange(BaseModel):
    """Partition time window of a query, ``[from_date, to_date]`` over
    `partition_column`.

    Ranges are created with `TimeRange.builder()` and are not validated on
    creation; call `validate()` before using one.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    partition_column: str | None = None
    from_date: datetime | None = None
    to_date: datetime | None = None
    ast_node: Any = None

    @classmethod
    def builder(cls) -> TimeRangeBuilder:
        return TimeRangeBuilder()

    def validate(self) -> None:
        """Raises `InvalidTimeRangeError` if the column or a bound is not
        set, `InvertedRangeError` if the range starts after it ends."""
        if not self.partition_column or self.from_date is None or self.to_date is None:
            raise InvalidTimeRangeError(f"Invalid time range: {self}")

        try:
            inverted = self.from_date > self.to_date
        except TypeError as e:
            # naive and aware bounds are not comparable
            raise InvalidTimeRangeError(f"Invalid time range {self}: {e}") from e

        if inverted:
            raise InvertedRangeError(self.from_date, self.to_date)

    def __str__(self) -> str:
        return f"{self.partition_column} [{self.from_date}:{self.to_date}]"


class TimeRangeBuilder:
    """Collects the parts of a `TimeRange`.

    Example::

        TimeRange.builder().partition_column("dt").from_date(start).to_date(end).build()
    """

    def __init__(self):
        self._fields: dict[str, Any] = {}

    def partition_column(self, column: str) -> TimeRangeBuilder:
        self._fields["partition_column"] = column
        return self

    def from_date(self, date: datetime) -> TimeRangeBuilder:
        self._fields["from_date"] = date
        return self

    def to_date(self, date: datetime) -> TimeRangeBuilder:
        self._fields["to_date"] = date
        return self

    def ast_node(self, node: Any) -> TimeRangeBuilder:
        self._fields["ast_node"] = node
        return self

    def build(self) -> TimeRange:
        return TimeRange(**self._fields)

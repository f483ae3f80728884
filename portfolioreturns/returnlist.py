"""Single returns and lists of returns ordered from the most recent to the oldest.

Investing carries risk, including the loss of principal; the calculations here
are informational only and are not financial advice.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from portfolioreturns.timeindex import indexes_within_times


class NoReturnsError(ValueError):
    """Raised when an operation needs at least one return."""

    def __init__(self, message: str = "no returns") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class Return:
    """A return value observed at a point in time."""

    time: Any
    value: float = 0.0

    def __post_init__(self) -> None:
        if isinstance(self.value, float) and math.isnan(self.value):
            raise ValueError("return value must be a number")


def _time_of(item: Return) -> Any:
    return item.time


class ReturnList(list):
    """A list of returns kept with the most recent return first."""

    def __init__(self, items: Iterable[Return] = ()) -> None:
        super().__init__(items)

    def __getitem__(self, index):
        result = super().__getitem__(index)
        if isinstance(index, slice):
            return ReturnList(result)
        return result

    def sort(self) -> None:  # type: ignore[override]
        """Order the returns in place, newest first."""
        super().sort(key=_time_of, reverse=True)

    def first(self) -> Optional[Return]:
        """The oldest return, or None when the list is empty."""
        return self[-1] if self else None

    def last(self) -> Optional[Return]:
        """The most recent return, or None when the list is empty."""
        return self[0] if self else None

    def first_time(self) -> Any:
        """The time of the oldest return, or None when the list is empty."""
        oldest = self.first()
        return oldest.time if oldest is not None else None

    def last_time(self) -> Any:
        """The time of the most recent return, or None when the list is empty."""
        newest = self.last()
        return newest.time if newest is not None else None

    def values(self) -> list[float]:
        return [item.value for item in self]

    def times(self) -> list[Any]:
        return [item.time for item in self]

    def between(self, last: Any, first: Any) -> "ReturnList":
        """Return the returns whose times lie within ``[first, last]``."""
        low, high = indexes_within_times(self, last, first, _time_of)
        return self[low:high]

    def insert_return(self, new_return: Return) -> "ReturnList":
        """Place ``new_return`` in order, overwriting a return at the same time.

        The list is changed in place and returned.
        """
        for position, existing in enumerate(self):
            if new_return.time == existing.time:
                self[position] = Return(existing.time, new_return.value)
                return self
            if new_return.time > existing.time:
                self.insert(position, new_return)
                return self
        self.append(new_return)
        return self

    def value(self, when: Any) -> Optional[float]:
        """Return the value at ``when``, or None when there is no such return."""
        low, high = 0, len(self)
        while low < high:
            mid = (low + high) // 2
            if self[mid].time > when:
                low = mid + 1
            else:
                high = mid
        if low < len(self) and self[low].time == when:
            return self[low].value
        return None

    def excess(self, other: Iterable[Return]) -> "ReturnList":
        """Return this list minus ``other`` over the times they share.

        The result spans the overlap of both lists using this list's times;
        a time missing from ``other`` inside that span subtracts zero.
        """
        mine = ReturnList(self)
        mine.sort()
        theirs = ReturnList(other)
        theirs.sort()
        if not mine:
            return ReturnList()
        clipped = theirs.between(mine.last_time(), mine.first_time())
        if not clipped:
            return ReturnList()
        window = mine.between(clipped.last_time(), clipped.first_time())
        benchmark = {item.time: item.value for item in clipped}
        return ReturnList(
            Return(item.time, item.value - benchmark.get(item.time, 0.0))
            for item in window
        )

    def end_and_start_date(self) -> tuple[Any, Any]:
        """Return the most recent and the oldest time.

        Raises NoReturnsError when the list is empty.
        """
        if not self:
            raise NoReturnsError()
        return self.last_time(), self.first_time()
"""Date-aligned tables of returns.

A table holds several columns of return values that share one list of times,
ordered from the most recent time to the oldest.  Adding a column keeps only
the times that the table and the new column have in common.
"""

from __future__ import annotations

import csv
import json
import math
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, Optional, Sequence, TextIO

from portfolioreturns.returnlist import NoReturnsError, Return, ReturnList
from portfolioreturns.timeindex import index_of_closest, indexes_within_times


def _find_descending(times: Sequence[Any], when: Any) -> Optional[int]:
    """Return the index of ``when`` in newest-first ``times``, or None."""
    low, high = 0, len(times)
    while low < high:
        mid = (low + high) // 2
        if times[mid] > when:
            low = mid + 1
        else:
            high = mid
    if low < len(times) and times[low] == when:
        return low
    return None


def _format_time(value: Any) -> str:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def _parse_time(text: str) -> Any:
    if len(text) == 10:
        return date.fromisoformat(text)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def _format_csv_value(value: float) -> str:
    """Format a number rounded to six places in plain decimal notation."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    text = format(Decimal(repr(round(value, 6))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _date_only(value: Any) -> str:
    if isinstance(value, (date, datetime)):
        return value.strftime("%Y-%m-%d")
    return str(value)


@dataclass(frozen=True)
class ColumnGroup:
    """A contiguous run of columns within a table."""

    index: int = 0
    length: int = 0

    def to_dict(self) -> dict[str, int]:
        return {"index": self.index, "length": self.length}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ColumnGroup":
        return cls(index=int(data.get("index", 0)), length=int(data.get("length", 0)))


class Table:
    """Columns of returns aligned on a shared, newest-first list of times."""

    def __init__(
        self, times: Iterable[Any] = (), values: Iterable[Iterable[float]] = ()
    ) -> None:
        self._times: list[Any] = list(times)
        self._values: list[list[float]] = [list(column) for column in values]

    @classmethod
    def from_lists(cls, lists: Optional[Iterable[Iterable[Return]]]) -> "Table":
        """Build a table by adding each list as a column."""
        table = cls()
        for returns in lists or ():
            table = table.add_column(returns)
        return table

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Table):
            return NotImplemented
        return self._times == other._times and self._values == other._values

    def __repr__(self) -> str:
        return f"Table(times={self._times!r}, values={self._values!r})"

    def _closest_index(self, when: Any) -> int:
        """Index of the row closest to ``when`` as found by the time search."""
        return index_of_closest(range(len(self._times)), self._times.__getitem__, when)

    def times(self) -> list[Any]:
        return list(self._times)

    def list(self, column_index: int) -> ReturnList:
        """Return one column as a list of returns."""
        column = self._values[column_index]
        return ReturnList(Return(t, v) for t, v in zip(self._times, column))

    def lists(self) -> "list[ReturnList]":
        return [self.list(i) for i in range(len(self._values))]

    def column_values(self) -> list[list[float]]:
        return [list(column) for column in self._values]

    def number_of_columns(self) -> int:
        return len(self._values)

    def number_of_rows(self) -> int:
        return len(self._times)

    def row(self, when: Any) -> Optional[list[float]]:
        """Return the values of every column at ``when``, or None if absent."""
        index = _find_descending(self._times, when)
        if index is None:
            return None
        return [column[index] for column in self._values]

    def has_row(self, when: Any) -> bool:
        return _find_descending(self._times, when) is not None

    def add_column(self, returns: Iterable[Return]) -> "Table":
        """Return a new table with ``returns`` added as a column.

        The rows of the result are limited to the times both share.
        """
        ordered = ReturnList(returns)
        ordered.sort()
        if not self._values:
            return Table(
                self._times + ordered.times(),
                [*self._values, ordered.values()],
            )
        return self._add_additional_column(ordered)

    def _add_additional_column(self, ordered: ReturnList) -> "Table":
        if self._times:
            clipped = ordered.between(self.last_time(), self.first_time())
        else:
            clipped = ReturnList()
        if clipped:
            updated = self.between(clipped.last_time(), clipped.first_time())
        else:
            updated = Table((), [[] for _ in self._values])
        new_values = [0.0] * len(updated._times)
        for item in clipped:
            index = _find_descending(updated._times, item.time)
            if index is not None:
                new_values[index] = item.value
        updated._values.append(new_values)
        return updated

    def add_columns(self, lists: Iterable[Iterable[Return]]) -> "Table":
        updated = self
        for returns in lists:
            updated = updated.add_column(returns)
        return updated

    def join(self, other: "Table") -> "Table":
        """Return a new table with every column of ``other`` added."""
        return self.add_columns(other.lists())

    def between(self, last: Any, first: Any) -> "Table":
        """Return the rows whose times lie within ``[first, last]``."""
        low, high = self.range_indexes(last, first)
        return Table(
            self._times[low:high], [column[low:high] for column in self._values]
        )

    def range_indexes(self, last: Any, first: Any) -> tuple[int, int]:
        """Return the slice bounds of the rows within ``[first, last]``."""
        return indexes_within_times(
            range(len(self._times)), last, first, self._times.__getitem__
        )

    def first_time(self) -> Any:
        """The oldest time, or None for a table without rows."""
        return self._times[-1] if self._times else None

    def last_time(self) -> Any:
        """The most recent time, or None for a table without rows."""
        return self._times[0] if self._times else None

    def time_after(self, when: Any) -> Any:
        """Return the next time after ``when``, or None if there is none."""
        if not self._times:
            return None
        if when < self.first_time():
            return self.first_time()
        if when > self.last_time():
            return None
        index = self._closest_index(when) - 1
        if 0 <= index < len(self._times):
            return self._times[index]
        return None

    def time_before(self, when: Any) -> Any:
        """Return the time before ``when``, or None if there is none."""
        if not self._times:
            return None
        if when > self.last_time():
            return self.last_time()
        if when < self.first_time():
            return None
        index = self._closest_index(when) + 1
        if 0 <= index < len(self._times):
            return self._times[index]
        return None

    def closest_time_on_or_before(self, when: Any) -> Any:
        """Return the latest time on or before ``when``, or None."""
        index = self._closest_index(when)
        if 0 <= index < len(self._times):
            return self._times[index]
        return None

    def end_and_start_dates(self) -> tuple[Any, Any]:
        """Return the most recent and the oldest time.

        Raises NoReturnsError when the table has no columns.
        """
        if not self._values:
            raise NoReturnsError()
        return self.last_time(), self.first_time()

    def write_csv(
        self, stream: TextIO, column_names: Optional[Sequence[str]] = None
    ) -> None:
        """Write the table as CSV with a leading Date column."""
        if column_names is None:
            column_names = [str(i) for i in range(self.number_of_columns())]
        if len(column_names) != self.number_of_columns():
            raise ValueError("incorrect number of column names provided")
        writer = csv.writer(stream, lineterminator="\n")
        writer.writerow(["Date", *column_names])
        for index, when in enumerate(self._times):
            writer.writerow(
                [
                    _date_only(when),
                    *(_format_csv_value(column[index]) for column in self._values),
                ]
            )

    def column_group(self) -> ColumnGroup:
        """A group spanning every column."""
        return ColumnGroup(0, len(self._values))

    def add_column_group(
        self, lists: Sequence[Iterable[Return]]
    ) -> tuple[ColumnGroup, "Table"]:
        """Add ``lists`` as columns and return their group with the new table."""
        start = self.number_of_columns()
        updated = self.add_columns(lists)
        return ColumnGroup(start, len(lists)), updated

    def add_table(self, other: "Table") -> tuple["Table", ColumnGroup]:
        """Add every column of ``other`` and return the new table and their group."""
        if not self._values:
            return other, ColumnGroup(0, len(other._values))
        updated = self.add_columns(other.lists())
        return updated, ColumnGroup(len(self._values), len(other._values))

    def column_group_column_index(self, group: ColumnGroup, group_index: int) -> int:
        column_index = group.index + group_index
        if column_index >= len(self._values):
            raise IndexError("column index out of bounds")
        return column_index

    def column_group_as_table(self, group: ColumnGroup) -> "Table":
        return Table(self._times, self.column_group_values(group))

    def column_group_lists(self, group: ColumnGroup) -> "list[ReturnList]":
        return [
            ReturnList(Return(t, v) for t, v in zip(self._times, column))
            for column in self._values[group.index : group.index + group.length]
        ]

    def column_group_values(self, group: ColumnGroup) -> list[list[float]]:
        return [
            list(column)
            for column in self._values[group.index : group.index + group.length]
        ]

    def to_json(self) -> str:
        """Encode the table as JSON with values rounded to six places."""
        return json.dumps(
            {
                "times": [_format_time(t) for t in self._times],
                "values": [[round(v, 6) for v in column] for column in self._values],
            }
        )

    @classmethod
    def from_json(cls, text: str) -> "Table":
        data = json.loads(text)
        times = [_parse_time(t) for t in data.get("times") or []]
        values = [[float(v) for v in column] for column in data.get("values") or []]
        return cls(times, values)


def align_tables(*args: Table) -> tuple[list[Table], Any, Any]:
    """Date-align several tables.

    Returns the aligned tables along with the shared end and start times.
    """
    table = Table()
    groups = []
    for other in args:
        table, group = table.add_table(other)
        groups.append(group)
    aligned = [table.column_group_as_table(group) for group in groups]
    return aligned, table.last_time(), table.first_time()
"""Index searches over sequences ordered from the most recent time to the oldest.

Every sequence handled here is sorted newest first: index 0 holds the latest
time and the final index holds the earliest one.
"""

from __future__ import annotations

from typing import Any, Callable, Sequence, TypeVar

T = TypeVar("T")


def index_of_closest(items: Sequence[T], key: Callable[[T], Any], target: Any) -> int:
    """Return the index of ``target`` or the position just after where it would sit.

    ``items`` must be ordered newest first.  When ``target`` is present its
    index is returned; otherwise the search narrows towards the slot between
    the neighbouring times.
    """
    start, end = 0, len(items)
    while start < end:
        mid = start + (end - start) // 2
        current = key(items[mid])
        if target == current:
            return mid
        if target < current:
            if end - start == 1:
                return start + 1
            start = mid
        else:
            end = mid
    return start


def indexes_within_times(
    items: Sequence[T], last: Any, first: Any, key: Callable[[T], Any]
) -> tuple[int, int]:
    """Return the slice bounds of ``items`` whose times lie within ``[first, last]``.

    The first index points at the most recent item on or before ``last``; the
    second is one past the oldest item on or after ``first``.  ``(0, 0)`` is
    returned for an empty sequence, for ``last`` before ``first`` and for a
    range that lies entirely outside the sequence.
    """
    count = len(items)
    if count == 1 and first == key(items[0]) and last == key(items[0]):
        return 0, 1
    if (
        count == 0
        or last < first
        or last < key(items[-1])
        or first > key(items[0])
    ):
        return 0, 0
    index_final = index_of_closest(items, key, last)
    index_initial = index_of_closest(items, key, first)
    if 0 < index_initial < count and key(items[index_initial]) < first:
        index_initial -= 1
    return index_final, min(index_initial + 1, count)
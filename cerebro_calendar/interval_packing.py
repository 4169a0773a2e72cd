"""Minimum column assignment for a set of half-open time intervals.

Greedy interval graph colouring: visiting intervals by start time and giving
each one the lowest column that is already free uses exactly as many columns
as the maximum number of intervals active at any instant.

Intervals are ``(start, end)`` pairs of comparable numbers, treated as
half-open ``[start, end)`` so back-to-back intervals never conflict.
"""

from collections.abc import Sequence
from dataclasses import dataclass

Interval = tuple[int, int]


@dataclass(frozen=True)
class PackedInterval:
    """An input interval with its column assignment."""

    index: int  # position in the caller's sequence
    start: int
    end: int
    column: int
    group_size: int


def visit_order(intervals: Sequence[Interval]) -> list[int]:
    """Return input indices sorted by start, then longest first, then input order."""
    return sorted(
        range(len(intervals)),
        key=lambda i: (intervals[i][0], -(intervals[i][1] - intervals[i][0]), i),
    )


def assign_columns(intervals: Sequence[Interval]) -> list[int]:
    """Assign each interval the lowest column free at its start.

    Args:
        intervals: ``(start, end)`` pairs

    Returns:
        Column index per interval, aligned with the input order
    """
    columns = [0] * len(intervals)
    column_ends: list[int] = []

    for i in visit_order(intervals):
        start, end = intervals[i]
        for column, column_end in enumerate(column_ends):
            if column_end <= start:
                column_ends[column] = end
                columns[i] = column
                break
        else:
            columns[i] = len(column_ends)
            column_ends.append(end)

    return columns


def overlaps(a: Interval, b: Interval) -> bool:
    """Strict half-open overlap test."""
    return a[0] < b[1] and b[0] < a[1]


def overlap_group_sizes(intervals: Sequence[Interval], columns: Sequence[int]) -> list[int]:
    """Return ``1 + max column`` among the intervals intersecting each interval.

    An interval always counts itself, including zero-length ones.
    """
    sizes = []
    for i, interval in enumerate(intervals):
        highest = columns[i]
        for j, other in enumerate(intervals):
            if j != i and overlaps(interval, other):
                highest = max(highest, columns[j])
        sizes.append(highest + 1)
    return sizes


def max_concurrency(intervals: Sequence[Interval]) -> int:
    """Return the maximum number of intervals active at any instant."""
    # Ends sort before starts at the same instant (False < True).
    points = []
    for start, end in intervals:
        if end > start:
            points.append((start, True))
            points.append((end, False))
    points.sort()

    active = highest = 0
    for _, is_start in points:
        active += 1 if is_start else -1
        highest = max(highest, active)
    return highest


def pack_intervals(intervals: Sequence[Interval]) -> list[PackedInterval]:
    """Assign columns and overlap group sizes, returned in visit order."""
    columns = assign_columns(intervals)
    sizes = overlap_group_sizes(intervals, columns)
    return [
        PackedInterval(
            index=i,
            start=intervals[i][0],
            end=intervals[i][1],
            column=columns[i],
            group_size=sizes[i],
        )
        for i in visit_order(intervals)
    ]

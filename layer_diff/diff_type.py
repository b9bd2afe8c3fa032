"""
Comparison result of a single path, or of a whole subtree, between two layers.
"""

from __future__ import annotations

from enum import IntEnum
from functools import reduce
from typing import Iterable


class DiffType(IntEnum):
    """
    Enumeration that describes the possible difference states of a path between two layers.
    """

    UNCHANGED = 0
    CHANGED = 1
    ADDED = 2
    REMOVED = 3

    def __str__(self):
        return _LABELS[self]

    def merge(self, other: DiffType) -> DiffType:
        """
        Merges two diff types into a single result. The value is returned unchanged if both values
        are equal, otherwise the only thing known is that there is "a change".

        :param other: Diff type to merge with.
        :return: Merged diff type.
        """
        if self == other:
            return self
        return DiffType.CHANGED


_LABELS = {
    DiffType.UNCHANGED: 'Unchanged',
    DiffType.CHANGED: 'Changed',
    DiffType.ADDED: 'Added',
    DiffType.REMOVED: 'Removed',
}


def merge_all(diff_types: Iterable[DiffType]) -> DiffType:
    """
    Folds a collection of diff types, e.g. the states of all children of a directory, into one.
    The result does not depend on the iteration order.

    :param diff_types: Diff types to merge.
    :return: Merged diff type, `DiffType.UNCHANGED` if the collection is empty.
    """
    iterator = iter(diff_types)
    first = next(iterator, DiffType.UNCHANGED)
    return reduce(DiffType.merge, iterator, DiffType(first))


def diff_type_label(value: int) -> str:
    """
    Human-readable label of a diff type. Values outside of the enumeration are rendered as
    numbers.

    :param value: Diff type or its integer value.
    :return: Label of the value.
    """
    try:
        return str(DiffType(value))
    except ValueError:
        return str(int(value))

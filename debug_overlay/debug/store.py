"""
Per-Request Capture Store.

Holds the four categorized buckets of captured events for the lifetime
of a single request. New events are prepended, so every bucket reads
most-recent-first.
"""

from __future__ import annotations

from typing import Dict, List, Union

from .events import CapturedEvent, Category


class CaptureStore:
    """
    Buffer of captured events, one ordered list per category.

    Example:
        store = CaptureStore()
        store.record(Category.ERRORS, event)

        store.counts()  # {Category.ERRORS: 1, Category.WARNINGS: 0, ...}
        errors, warnings, notices, dumps = store.all()
    """

    def __init__(self):
        """Initialize empty buckets for every category."""
        self._buckets: Dict[Category, List[CapturedEvent]] = {
            category: [] for category in Category
        }

    def record(
        self,
        category: Union[Category, str],
        event: CapturedEvent,
    ) -> CapturedEvent:
        """
        Insert an event at the front of a bucket.

        Args:
            category: Bucket to store the event in
            event: The captured event

        Returns:
            The recorded event

        Raises:
            ValueError: If the category is unknown
        """
        self._buckets[Category.parse(category)].insert(0, event)
        return event

    def get(self, category: Union[Category, str]) -> List[CapturedEvent]:
        """Get a copy of one bucket, most recent first."""
        return list(self._buckets[Category.parse(category)])

    def counts(self) -> Dict[Category, int]:
        """Get the size of every bucket, in enumeration order."""
        return {category: len(self._buckets[category]) for category in Category}

    def all(self) -> List[List[CapturedEvent]]:
        """Get all buckets in the order errors, warnings, notices, dumps."""
        return [list(self._buckets[category]) for category in Category]

    def items(self):
        """Iterate (category, events) pairs in fixed order."""
        for category in Category:
            yield category, list(self._buckets[category])

    def total(self) -> int:
        return sum(len(bucket) for bucket in self._buckets.values())

    def is_empty(self) -> bool:
        return self.total() == 0

    def clear(self) -> None:
        """Discard every captured event."""
        for bucket in self._buckets.values():
            bucket.clear()

    def __len__(self) -> int:
        return self.total()

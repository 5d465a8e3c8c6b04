from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from .models import LabelRecord

HISTORY_CAPACITY = 10


class LabelHistory:
    """Printed labels, newest first, bounded to ``capacity`` entries."""

    def __init__(self, capacity: int = HISTORY_CAPACITY):
        if capacity < 1:
            raise ValueError("history capacity must be at least 1")
        self.capacity = capacity
        self._records: List[LabelRecord] = []

    def insert(self, record: LabelRecord) -> Optional[LabelRecord]:
        """Prepend ``record``; returns the evicted oldest record, if any."""
        self._records.insert(0, record)
        if len(self._records) > self.capacity:
            return self._records.pop()
        return None

    def get(self, label_id: str) -> Optional[LabelRecord]:
        for rec in self._records:
            if rec.id == label_id:
                return rec
        return None

    def remove(self, label_id: str) -> bool:
        before = len(self._records)
        self._records = [r for r in self._records if r.id != label_id]
        return len(self._records) != before

    def snapshot(self) -> Tuple[LabelRecord, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[LabelRecord]:
        return iter(self.snapshot())

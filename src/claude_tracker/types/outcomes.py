"""Counters for records and sources dropped during a run."""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum


class SkipKind(str, Enum):
    UNREADABLE_SOURCE = "unreadable_source"
    MALFORMED_RECORD = "malformed_record"
    UNRESOLVABLE_TIMESTAMP = "unresolvable_timestamp"
    UNRESOLVABLE_PROJECT_PATH = "unresolvable_project_path"


@dataclass
class SkipReport:
    """Per-kind counts of what a run left out.

    Each worker fills its own report; reports are only combined with
    ``merge`` after the workers of a stage have finished.
    """
    counts: Counter = field(default_factory=Counter)

    def record(self, kind: SkipKind, n: int = 1):
        if n:
            self.counts[kind] += n

    def merge(self, other: "SkipReport") -> "SkipReport":
        self.counts.update(other.counts)
        return self

    def get(self, kind: SkipKind) -> int:
        return self.counts.get(kind, 0)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def as_dict(self) -> dict[str, int]:
        return {kind.value: self.get(kind) for kind in SkipKind}

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Any, List

from ..trace.event import Operation
from .engine import Outcome


@dataclass
class SetStats:
    hits: int = 0
    misses: int = 0
    evictions: int = 0


@dataclass
class StatisticsCollector:
    """Accumulates hit, miss and eviction totals from per-event outcomes."""
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    accesses: int = 0
    op_counts: Dict[str, int] = field(default_factory=dict)
    per_set: Dict[int, SetStats] = field(default_factory=dict)
    occupancy: List[int] = field(default_factory=list)

    def record(self, outcome: Outcome):
        self.hits += outcome.hits
        self.misses += int(outcome.miss)
        self.evictions += int(outcome.eviction)
        self.accesses += 1

        op = outcome.op.name.lower()
        self.op_counts[op] = self.op_counts.get(op, 0) + 1

        set_stats = self.per_set.setdefault(outcome.set_index, SetStats())
        set_stats.hits += outcome.hits
        set_stats.misses += int(outcome.miss)
        set_stats.evictions += int(outcome.eviction)

    @property
    def hit_rate(self) -> float:
        """Fraction of hit events among all hits and misses."""
        total = self.hits + self.misses
        return self.hits / total if total else 0.0

    def summary(self) -> str:
        return f"hits:{self.hits} misses:{self.misses} evictions:{self.evictions}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "accesses": self.accesses,
            "hit_rate": self.hit_rate,
            "op_counts": {op.name.lower(): self.op_counts.get(op.name.lower(), 0)
                          for op in Operation if op.is_data},
        }

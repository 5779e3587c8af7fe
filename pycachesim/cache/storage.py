from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional

from ..config import CacheGeometry

# Every set starts out with line 1 recorded as the most recently touched one.
INITIAL_LAST_TOUCHED = 1


@dataclass
class CacheLine:
    """Represents a single line in a cache set."""
    valid: bool = False
    tag: int = 0
    recency: int = 0
    block: int = 0


class CacheSet:
    """A fixed group of lines plus the index of the line touched last."""
    def __init__(self, lines_per_set: int):
        self.lines = [CacheLine() for _ in range(lines_per_set)]
        self.last_touched = INITIAL_LAST_TOUCHED

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self):
        return iter(self.lines)

    def __getitem__(self, line_index: int) -> CacheLine:
        return self.lines[line_index]


class CacheStorage:
    """
    State container for every set and line of the simulated cache.
    Holds no replacement logic; the engine and policy drive all mutations.
    """
    def __init__(self, geometry: CacheGeometry):
        self.geometry = geometry
        self.sets = [CacheSet(geometry.lines_per_set) for _ in range(geometry.num_sets)]

    def get_set(self, set_index: int) -> CacheSet:
        return self.sets[set_index]

    def get_line(self, set_index: int, line_index: int) -> CacheLine:
        return self.sets[set_index][line_index]

    def mutate_line(self, set_index: int, line_index: int, new_tag: int,
                    mark_valid: bool = True, block: Optional[int] = None):
        """Overwrites a line's tag (and optionally its block placeholder)."""
        line = self.get_line(set_index, line_index)
        line.tag = new_tag
        if mark_valid:
            line.valid = True
        if block is not None:
            line.block = block

    def refresh_block(self, set_index: int, line_index: int, block: int):
        self.get_line(set_index, line_index).block = block

    def touch(self, set_index: int, line_index: int):
        """Bumps the line's recency counter and records it as last touched."""
        self.get_line(set_index, line_index).recency += 1
        self.mark(set_index, line_index)

    def mark(self, set_index: int, line_index: int):
        self.sets[set_index].last_touched = line_index

    def occupancy(self) -> List[int]:
        """Number of valid lines in each set."""
        return [sum(1 for line in cache_set if line.valid) for cache_set in self.sets]

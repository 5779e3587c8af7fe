from __future__ import annotations

from ..errors import ConfigurationError
from .storage import CacheSet


class LRUReplacementPolicy:
    """
    Least-recently-used victim selection over per-line recency counters.

    The line recorded as last touched in the set is never picked by the scan.
    Only a strictly smaller counter displaces the current candidate, so among
    lines sharing the minimum the one found first keeps the slot.
    """
    name = "lru"

    def select_victim(self, cache_set: CacheSet) -> int:
        victim = 0
        min_recency = cache_set[0].recency

        if len(cache_set) > 1:
            if cache_set.last_touched == 0:
                victim = 1
            for index, line in enumerate(cache_set):
                if line.recency < min_recency and index != cache_set.last_touched:
                    victim = index
                    min_recency = line.recency

        return victim


_POLICIES = {
    LRUReplacementPolicy.name: LRUReplacementPolicy,
}


def get_policy(name: str):
    """Returns a replacement policy instance for the given name."""
    if name not in _POLICIES:
        raise ConfigurationError(f"Unknown or unsupported replacement policy: {name}")
    return _POLICIES[name]()


def available_policies():
    return sorted(_POLICIES)

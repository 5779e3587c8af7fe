from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from ..config import CacheGeometry
from ..cache.decoder import AddressDecoder, DecodedAddress
from ..cache.policy import LRUReplacementPolicy
from ..cache.storage import CacheStorage
from ..trace.event import Operation, TraceEvent


@dataclass(frozen=True)
class Outcome:
    """Result of applying one data access to the cache."""
    event: TraceEvent
    hits: int
    miss: bool
    eviction: bool
    set_index: int
    line_index: int
    tag: int
    evicted_address: Optional[int] = None

    @property
    def op(self) -> Operation:
        return self.event.op


class SimulationEngine:
    """
    Applies trace events to a set-associative cache one at a time.

    Only the engine mutates the storage. Instruction fetches are ignored;
    loads, stores and modifies are classified as a hit, a miss into an
    empty line, or a miss that evicts the policy's victim. A modify is a
    load followed by a store, so it always earns one extra hit.
    """

    def __init__(self, geometry: CacheGeometry, policy=None):
        self.geometry = geometry
        self.decoder = AddressDecoder(geometry)
        self.storage = CacheStorage(geometry)
        self.policy = policy if policy is not None else LRUReplacementPolicy()

    def access(self, event: TraceEvent) -> Optional[Outcome]:
        """Applies one event. Returns None for instruction fetches."""
        if not event.op.is_data:
            return None

        decoded = self.decoder.decode(event.address)
        set_index = decoded.set_index
        cache_set = self.storage.get_set(set_index)
        is_modify = event.op is Operation.MODIFY

        # Only used when no line is free or matching.
        victim = self.policy.select_victim(cache_set)

        for line_index, line in enumerate(cache_set):
            if not line.valid:
                self.storage.mutate_line(set_index, line_index, decoded.tag,
                                         mark_valid=True, block=decoded.block_offset)
                self.storage.touch(set_index, line_index)
                return self._outcome(event, decoded, line_index,
                                     hits=1 if is_modify else 0, miss=True)

            if line.tag == decoded.tag:
                if event.op is not Operation.STORE:
                    self.storage.refresh_block(set_index, line_index, decoded.block_offset)
                # Hits leave the recency counter alone.
                self.storage.mark(set_index, line_index)
                return self._outcome(event, decoded, line_index,
                                     hits=2 if is_modify else 1, miss=False)

        evicted_tag = cache_set[victim].tag
        self.storage.mutate_line(set_index, victim, decoded.tag,
                                 mark_valid=True, block=decoded.block_offset)
        self.storage.touch(set_index, victim)
        return self._outcome(event, decoded, victim,
                             hits=1 if is_modify else 0, miss=True,
                             evicted_address=self.decoder.reconstruct_address(evicted_tag, set_index))

    def _outcome(self, event: TraceEvent, decoded: DecodedAddress, line_index: int,
                 hits: int, miss: bool, evicted_address: Optional[int] = None) -> Outcome:
        return Outcome(
            event=event,
            hits=hits,
            miss=miss,
            eviction=evicted_address is not None,
            set_index=decoded.set_index,
            line_index=line_index,
            tag=decoded.tag,
            evicted_address=evicted_address,
        )

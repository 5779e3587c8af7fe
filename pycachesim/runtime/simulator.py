from __future__ import annotations
from typing import Callable, Iterable, List, Optional, Tuple

from ..config import SimConfig
from ..cache.policy import get_policy
from ..trace.event import TraceEvent
from ..utils.logging import get_logger
from .engine import Outcome, SimulationEngine
from .stats import StatisticsCollector

logger = get_logger(__name__)


def run(events: Iterable[TraceEvent], config: SimConfig,
        on_outcome: Optional[Callable[[Outcome], None]] = None) -> Tuple[List[Outcome], StatisticsCollector]:
    """
    Replays a trace against a freshly allocated cache.

    The geometry and policy are validated before the first event is consumed,
    so a ConfigurationError never leaves a partial run behind. Each data
    access outcome is recorded, passed to `on_outcome` if given, and
    returned together with the final statistics.
    """
    geometry = config.geometry
    policy = get_policy(config.replacement_policy)
    engine = SimulationEngine(geometry, policy)
    stats = StatisticsCollector()
    outcomes: List[Outcome] = []

    logger.info("Simulating s=%d E=%d b=%d (%d sets, policy=%s)",
                geometry.set_index_bits, geometry.lines_per_set, geometry.block_offset_bits,
                geometry.num_sets, policy.name)

    for event in events:
        outcome = engine.access(event)
        if outcome is None:
            continue
        stats.record(outcome)
        outcomes.append(outcome)
        logger.debug("%s -> set %d line %d hits=%d miss=%s eviction=%s", event.label,
                     outcome.set_index, outcome.line_index, outcome.hits, outcome.miss, outcome.eviction)
        if on_outcome is not None:
            on_outcome(outcome)

    stats.occupancy = engine.storage.occupancy()
    logger.info("Simulation finished: %s", stats.summary())
    return outcomes, stats

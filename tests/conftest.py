import pytest
from pathlib import Path

from pycachesim.config import CacheGeometry
from pycachesim.runtime.engine import SimulationEngine
from pycachesim.trace.event import Operation, TraceEvent

TRACES_DIR = Path(__file__).resolve().parent.parent / "traces"


@pytest.fixture
def traces_dir() -> Path:
    """Directory holding the sample traces shipped with the repo."""
    return TRACES_DIR


@pytest.fixture
def write_trace(tmp_path: Path):
    """Writes trace lines to a temporary file and returns its path."""
    def _write(lines, name="test.trace"):
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n")
        return path
    return _write


@pytest.fixture
def make_engine():
    def _make(s=0, E=1, b=0):
        return SimulationEngine(CacheGeometry(set_index_bits=s, lines_per_set=E, block_offset_bits=b))
    return _make


@pytest.fixture
def event():
    """Builds a data-access event from its trace letter, e.g. event("L", 0x10)."""
    def _event(kind: str, address: int, size: int = 1) -> TraceEvent:
        return TraceEvent(Operation(kind), address, size)
    return _event

from __future__ import annotations
import re
from typing import Iterable, Iterator, Optional

from ..config import ADDRESS_WIDTH
from ..errors import MalformedTraceEvent
from ..utils.logging import get_logger
from .event import Operation, TraceEvent

logger = get_logger(__name__)

_OPERATIONS = {op.value: op for op in Operation}

_HEX_ADDRESS = re.compile(r"(0[xX])?[0-9a-fA-F]+")


def parse_hex_address(text: str) -> int:
    """Parses a bare hex address below 2**64, raising ValueError otherwise."""
    if not _HEX_ADDRESS.fullmatch(text):
        raise ValueError(f"Invalid hex address '{text}'")
    address = int(text, 16)
    if address >= 1 << ADDRESS_WIDTH:
        raise ValueError(f"Address {text} does not fit in {ADDRESS_WIDTH} bits")
    return address


def parse_trace_line(line: str) -> Optional[TraceEvent]:
    """
    Parses one `<kind> <hex-address>,<length>` trace line.
    Returns None for blank lines and raises MalformedTraceEvent otherwise.
    """
    text = line.rstrip("\r\n")
    stripped = text.strip()
    if not stripped:
        return None

    parts = stripped.split(None, 1)
    if len(parts) != 2:
        raise MalformedTraceEvent(f"Expected '<kind> <address>,<size>', got '{stripped}'", line)
    kind, operand = parts

    op = _OPERATIONS.get(kind)
    if op is None:
        raise MalformedTraceEvent(f"Unknown operation kind '{kind}'", line)

    address_str, sep, size_str = operand.partition(",")
    if not sep:
        raise MalformedTraceEvent(f"Missing access size in '{stripped}'", line)

    try:
        address = parse_hex_address(address_str.strip())
    except ValueError as e:
        raise MalformedTraceEvent(str(e), line) from None

    try:
        size = int(size_str.strip())
    except ValueError:
        raise MalformedTraceEvent(f"Invalid access size '{size_str.strip()}'", line) from None
    if size < 0:
        raise MalformedTraceEvent(f"Access size must be non-negative, got {size}", line)

    return TraceEvent(op=op, address=address, size=size, text=text)


def iter_trace(lines: Iterable[str]) -> Iterator[TraceEvent]:
    """Yields well-formed events, skipping blank and malformed lines."""
    for lineno, line in enumerate(lines, start=1):
        try:
            event = parse_trace_line(line)
        except MalformedTraceEvent as e:
            logger.warning("Skipping trace line %d: %s", lineno, e)
            continue
        if event is not None:
            yield event


def read_trace(path: str) -> Iterator[TraceEvent]:
    """Lazily reads the trace file at `path`."""
    with open(path, 'r') as f:
        yield from iter_trace(f)

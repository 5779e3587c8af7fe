from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class Operation(str, Enum):
    """Trace operation kinds, keyed by their trace letter."""

    INSTRUCTION = "I"
    LOAD = "L"
    STORE = "S"
    MODIFY = "M"

    @property
    def is_data(self) -> bool:
        return self is not Operation.INSTRUCTION

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TraceEvent:
    """A single tokenized trace entry."""
    op: Operation
    address: int
    size: int = 0
    text: str = ""

    @property
    def label(self) -> str:
        """The event as it appears in the trace, without indentation."""
        if self.text:
            return self.text.strip()
        return f"{self.op} {self.address:x},{self.size}"

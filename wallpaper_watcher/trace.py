"""Per-invocation diagnostic trace.

Every intermediate value of a decision (scale factors, chosen mode, histogram
winners) is appended here with the elapsed time since the trace started, so a
caller can show exactly why a given placement and color were picked.
"""

import logging
import time
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TraceEntry:
    elapsed_ms: int
    message: str

    def __str__(self):
        return f"{self.elapsed_ms}: {self.message}"


class TraceLog:
    """Ordered list of timestamped diagnostic lines, mirrored to DEBUG logging."""

    def __init__(self):
        self._start = time.perf_counter()
        self.entries: list[TraceEntry] = []

    def write(self, message: str):
        elapsed_ms = int((time.perf_counter() - self._start) * 1000)
        self.entries.append(TraceEntry(elapsed_ms, message))
        logger.debug(f"[trace] {message}")

    @property
    def lines(self) -> list[str]:
        return [str(e) for e in self.entries]

    @property
    def messages(self) -> list[str]:
        return [e.message for e in self.entries]

    def __len__(self):
        return len(self.entries)

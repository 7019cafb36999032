"""MMU event log.

Admissions, grants, refusals, page faults, allocations, and releases
are all written here as structured records tagged with the component
that raised them and, usually, the pid concerned.  The core only
writes; the console report and the web API read.

An entry prints as ``[LEVEL] source: message``, for example::

    [INFO] allocator: Allocated frames 0-1 to process 0; 992 bytes remaining
"""

from collections.abc import Iterator
from dataclasses import dataclass
from enum import IntEnum


class LogLevel(IntEnum):
    """How serious an MMU event is; higher is worse."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """One MMU event.

    Attributes:
        level: Severity of the event.
        message: What happened, in words.
        source: Component that raised it: ``process``, ``request``,
            ``mmu``, ``allocator``, or ``simulation``.
        pid: The process concerned, or None for system-wide events.

    """

    level: LogLevel
    message: str
    source: str
    pid: int | None = None

    def matches(
        self,
        *,
        min_level: LogLevel | None,
        source: str | None,
        pid: int | None,
    ) -> bool:
        """Return True if this entry passes every criterion that is set."""
        if min_level is not None and self.level < min_level:
            return False
        if source is not None and self.source != source:
            return False
        return pid is None or self.pid == pid

    def __str__(self) -> str:
        """Format as ``[LEVEL] source: message``."""
        return f"[{self.level.name}] {self.source}: {self.message}"


class Logger:
    """Chronological, append-only record of MMU events."""

    def __init__(self) -> None:
        """Create an empty log."""
        self._records: list[LogEntry] = []

    def __len__(self) -> int:
        """Return the number of recorded events."""
        return len(self._records)

    def __iter__(self) -> Iterator[LogEntry]:
        """Iterate over events, oldest first."""
        return iter(self._records)

    @property
    def entries(self) -> list[LogEntry]:
        """Return a copy of every event, oldest first."""
        return self._records.copy()

    def log(
        self,
        level: LogLevel,
        message: str,
        *,
        source: str,
        pid: int | None = None,
    ) -> None:
        """Record an event.

        Args:
            level: Severity of the event.
            message: What happened.
            source: Component raising the event.
            pid: Process the event concerns, if any.

        """
        self._records.append(LogEntry(level=level, message=message, source=source, pid=pid))

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
        pid: int | None = None,
    ) -> list[LogEntry]:
        """Return the events that match every criterion given.

        Args:
            min_level: Keep only events at or above this severity.
            source: Keep only events from this component.
            pid: Keep only events about this process.

        Returns:
            Matching events, oldest first.

        """
        return [
            record
            for record in self._records
            if record.matches(min_level=min_level, source=source, pid=pid)
        ]

    def lines(self, *, min_level: LogLevel = LogLevel.DEBUG) -> list[str]:
        """Return events at or above *min_level*, formatted for display."""
        return [str(record) for record in self.filter(min_level=min_level)]

    def clear(self) -> None:
        """Forget every recorded event."""
        self._records.clear()

"""Process descriptor — the simulator's Process Control Block (PCB).

The PCB holds what the MMU needs to know about a process: its pid, how
much memory it declared, how much it was granted, and its private
two-level page table.

Processes follow a small state machine.  Each transition method
(grant, map, unmap, terminate) checks the source state before moving::

    NEW → GRANTED ⇄ MAPPED
     ↓       ↓        ↓
        TERMINATED

- NEW: admitted, no memory granted yet.
- GRANTED: a memory request succeeded; frames are reserved lazily on
  the first page fault.
- MAPPED: the process holds a contiguous run of frames and pages.
- TERMINATED: gone; its memory has been released.

The PCB never touches the global memory maps.  The memory manager
drives every transition.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mmu_sim.memory.page_table import PageTable


class ProcessState(StrEnum):
    """Lifecycle states of a process as seen by the MMU."""

    NEW = "new"
    GRANTED = "granted"
    MAPPED = "mapped"
    TERMINATED = "terminated"


class Process:
    """A simulated process and its page table."""

    def __init__(
        self,
        *,
        pid: int,
        declared_size: int,
        page_table: PageTable,
    ) -> None:
        """Create a process in the NEW state.

        Args:
            pid: Unique process identifier.
            declared_size: Bytes the process claims to need.
            page_table: The process's own (all-invalid) page table.

        Raises:
            ValueError: If *declared_size* is not positive.

        """
        if declared_size <= 0:
            msg = f"Process size must be positive, got {declared_size}"
            raise ValueError(msg)
        self._pid = pid
        self._declared_size = declared_size
        self._granted_size = 0
        self._state = ProcessState.NEW
        self._page_faults = 0
        self._page_table = page_table

    @property
    def pid(self) -> int:
        """Return the unique process identifier."""
        return self._pid

    @property
    def declared_size(self) -> int:
        """Return the bytes the process declared at creation."""
        return self._declared_size

    @property
    def granted_size(self) -> int:
        """Return the bytes granted by the last successful request (0 if none)."""
        return self._granted_size

    @property
    def state(self) -> ProcessState:
        """Return the current process state."""
        return self._state

    @property
    def page_table(self) -> PageTable:
        """Return the process's page table."""
        return self._page_table

    @property
    def page_faults(self) -> int:
        """Return how many page faults this process has taken."""
        return self._page_faults

    def record_fault(self) -> None:
        """Count one page fault against this process."""
        self._page_faults += 1

    def grant(self, size: int) -> None:
        """Record a granted memory request and move to GRANTED.

        Allowed from NEW, or from GRANTED to replace an earlier grant
        that has not been mapped yet.

        Raises:
            ValueError: If *size* is not within ``1..declared_size``.
            RuntimeError: If the process is MAPPED or TERMINATED.

        """
        if not 1 <= size <= self._declared_size:
            msg = (
                f"Request of {size} bytes is outside 1-{self._declared_size} "
                f"for process {self._pid}"
            )
            raise ValueError(msg)
        if self._state not in (ProcessState.NEW, ProcessState.GRANTED):
            msg = f"Cannot grant: process {self._pid} is {self._state}"
            raise RuntimeError(msg)
        self._granted_size = size
        self._state = ProcessState.GRANTED

    def _transition(self, action: str, expected: ProcessState, target: ProcessState) -> None:
        """Enforce a state transition.

        Raises:
            RuntimeError: If the process is not in the expected state.

        """
        if self._state is not expected:
            msg = f"Cannot {action}: process {self._pid} is {self._state}, expected {expected}"
            raise RuntimeError(msg)
        self._state = target

    def map(self) -> None:
        """Transition GRANTED → MAPPED. Frames have been committed."""
        self._transition("map", ProcessState.GRANTED, ProcessState.MAPPED)

    def unmap(self) -> None:
        """Transition MAPPED → GRANTED. Frames have been released."""
        self._transition("unmap", ProcessState.MAPPED, ProcessState.GRANTED)

    def terminate(self) -> None:
        """Move to TERMINATED from any live state.

        Raises:
            RuntimeError: If the process is already terminated.

        """
        if self._state is ProcessState.TERMINATED:
            msg = f"Cannot terminate: process {self._pid} is already terminated"
            raise RuntimeError(msg)
        self._state = ProcessState.TERMINATED

    def __repr__(self) -> str:
        """Return a debug-friendly representation."""
        return (
            f"Process(pid={self._pid}, declared={self._declared_size}, "
            f"granted={self._granted_size}, state={self._state})"
        )

"""Simulation driver — feed generated processes through the MMU.

For each process the driver:

1. Draws a declared size and admits the process.
2. Draws a request size and asks for memory.
3. Draws a logical address and translates it (the first touch faults
   and reserves frames).

Refusals are part of the simulation, not failures of it.  A denied
request, a failed allocation, or an out-of-range address is recorded
against that process and the driver moves on.  Only
``CapacityExceededError`` stops the run, since no further process can
be admitted.

Deallocation is a separate pass (``release_all``) so a front end can
show the full memory picture before it is torn down.
"""

from dataclasses import dataclass
from enum import StrEnum

from mmu_sim.errors import (
    AddressOutOfRangeError,
    AllocationFailureError,
    CapacityExceededError,
    RequestDeniedError,
)
from mmu_sim.generators import AddressGenerator, SizeGenerator
from mmu_sim.logging import LogLevel
from mmu_sim.memory.manager import MemoryManager, Translation


class Outcome(StrEnum):
    """What happened to one simulated process."""

    MAPPED = "mapped"
    DENIED = "denied"
    ALLOCATION_FAILED = "allocation_failed"
    OUT_OF_RANGE = "out_of_range"


@dataclass(frozen=True)
class ProcessRun:
    """The record of one process's trip through the MMU."""

    pid: int
    declared_size: int
    requested_size: int
    outcome: Outcome
    translation: Translation | None = None
    reason: str = ""


@dataclass(frozen=True)
class SimulationReport:
    """Everything a run produced.

    Attributes:
        runs: One record per admitted process, in admission order.
        halted: True if admission stopped at the process limit.

    """

    runs: tuple[ProcessRun, ...]
    halted: bool = False

    def count(self, outcome: Outcome) -> int:
        """Return how many processes ended with *outcome*."""
        return sum(1 for r in self.runs if r.outcome is outcome)

    @property
    def mapped_pids(self) -> list[int]:
        """Return the pids that ended up with committed memory."""
        return [r.pid for r in self.runs if r.outcome is Outcome.MAPPED]


class Simulation:
    """Drive a memory manager with generated processes and addresses."""

    def __init__(
        self,
        *,
        manager: MemoryManager,
        addresses: AddressGenerator,
        sizes: SizeGenerator,
    ) -> None:
        """Create a simulation over an existing memory manager.

        Args:
            manager: The MMU under simulation.
            addresses: Source of logical addresses.
            sizes: Source of declared and requested sizes.

        """
        self._manager = manager
        self._addresses = addresses
        self._sizes = sizes

    @property
    def manager(self) -> MemoryManager:
        """Return the memory manager being driven."""
        return self._manager

    def step(self) -> ProcessRun:
        """Admit, grant, and translate one process.

        Raises:
            CapacityExceededError: If no more processes can be admitted.

        """
        declared = self._sizes.process_size()
        process = self._manager.create_process(declared_size=declared)
        requested = self._sizes.request_size(declared)

        try:
            self._manager.memory_request(process.pid, requested)
        except RequestDeniedError as e:
            return ProcessRun(process.pid, declared, requested, Outcome.DENIED, reason=str(e))

        address = self._addresses.next_address()
        try:
            translation = self._manager.translate(process.pid, address)
        except AllocationFailureError as e:
            return ProcessRun(
                process.pid, declared, requested, Outcome.ALLOCATION_FAILED, reason=str(e)
            )
        except AddressOutOfRangeError as e:
            return ProcessRun(process.pid, declared, requested, Outcome.OUT_OF_RANGE, reason=str(e))
        return ProcessRun(process.pid, declared, requested, Outcome.MAPPED, translation)

    def run(self, num_processes: int) -> SimulationReport:
        """Run *num_processes* steps, stopping early at the process limit.

        Raises:
            ValueError: If *num_processes* is negative.

        """
        if num_processes < 0:
            msg = f"Process count must be non-negative, got {num_processes}"
            raise ValueError(msg)
        runs: list[ProcessRun] = []
        for _ in range(num_processes):
            try:
                runs.append(self.step())
            except CapacityExceededError:
                self._manager.logger.log(
                    LogLevel.WARNING, "Process creation halted", source="simulation"
                )
                return SimulationReport(runs=tuple(runs), halted=True)
        return SimulationReport(runs=tuple(runs))

    def release_all(self) -> int:
        """Terminate every live process and return the frames released."""
        return sum(self._manager.terminate(process.pid) for process in self._manager.processes())

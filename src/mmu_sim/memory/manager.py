"""Memory manager — translation, first-fit allocation, and reclamation.

The memory manager is the only thing allowed to change memory.  It
owns:

- the **process table** (pid → ``Process``),
- the **physical memory map** (frame → owner) and its first-fit
  **frame allocator**,
- the **virtual memory map** (page → owner),
- the **remaining capacity** counter and the global **page-fault**
  counter.

Life of a process::

    create_process(declared_size)    admission, bounded by max_process_count
    memory_request(pid, size)        arbitration against remaining capacity
    translate(pid, address)          first touch faults → first fit → map
    translate(pid, address)          already mapped → same frame, no fault
    deallocate(pid) / terminate(pid) release frames, pages, and entries

Reservation is lazy: a granted request reserves nothing until the
first translation faults.  Arbitration compares against *remaining*
capacity, not the longest free run, so a granted request may still fail
to find a contiguous run.  That shows up as ``AllocationFailureError``,
a different condition from ``RequestDeniedError``.

Every refusal is raised to the caller; nothing is retried here.
"""

from dataclasses import dataclass
from itertools import count

from mmu_sim.config import DEFAULT_CONFIG, MmuConfig
from mmu_sim.errors import (
    AddressOutOfRangeError,
    AllocationFailureError,
    CapacityExceededError,
    RequestDeniedError,
)
from mmu_sim.logging import Logger, LogLevel
from mmu_sim.memory.allocator import FrameAllocator, required_frames
from mmu_sim.memory.maps import Owner, PhysicalMemoryMap, VirtualMemoryMap
from mmu_sim.memory.page_table import EntryView, PageTable, join_address, split_address
from mmu_sim.process.pcb import Process, ProcessState


@dataclass(frozen=True)
class Translation:
    """The outcome of translating one logical address.

    Attributes:
        pid: The process that issued the address.
        logical_address: The address as the process sees it.
        page_number: Virtual page number.
        offset: Byte offset within the page (and the frame).
        outer_index: Index into the outer page table.
        inner_index: Index into the selected inner table.
        frame_number: Physical frame the page maps to.
        physical_address: ``frame_number * frame_size + offset``.
        fault: True if this translation took a page fault.

    """

    pid: int
    logical_address: int
    page_number: int
    offset: int
    outer_index: int
    inner_index: int
    frame_number: int
    physical_address: int
    fault: bool


@dataclass(frozen=True)
class MemoryStats:
    """A point-in-time summary of memory usage."""

    total_frames: int
    free_frames: int
    remaining_capacity: int
    page_faults: int
    live_processes: int


class MemoryManager:
    """Coordinate page tables, memory maps, and the frame allocator."""

    def __init__(self, *, config: MmuConfig = DEFAULT_CONFIG, logger: Logger | None = None) -> None:
        """Create a memory manager with empty memory and no processes.

        Args:
            config: The machine's fixed sizes and limits.
            logger: Where to record events (a fresh log if omitted).

        """
        self._config = config
        self._logger = logger if logger is not None else Logger()
        self._physical = PhysicalMemoryMap(units=config.num_frames, slot_count=config.frame_size)
        self._virtual = VirtualMemoryMap(units=config.num_pages, slot_count=config.page_size)
        self._allocator = FrameAllocator(self._physical)
        self._processes: dict[int, Process] = {}
        self._pid_counter = count(start=0)
        self._remaining_capacity = config.physical_memory_size
        self._page_faults = 0

    # -- Accessors ----------------------------------------------------------

    @property
    def config(self) -> MmuConfig:
        """Return the machine configuration."""
        return self._config

    @property
    def logger(self) -> Logger:
        """Return the event log."""
        return self._logger

    @property
    def remaining_capacity(self) -> int:
        """Return the bytes of physical memory not yet charged to a process."""
        return self._remaining_capacity

    @property
    def page_faults(self) -> int:
        """Return the total number of page faults taken so far."""
        return self._page_faults

    @property
    def free_frames(self) -> int:
        """Return the number of completely free frames."""
        return self._physical.free_count()

    def process(self, pid: int) -> Process:
        """Return a live process by pid.

        Raises:
            ValueError: If no live process has this pid.

        """
        process = self._processes.get(pid)
        if process is None:
            msg = f"Process {pid} not found"
            raise ValueError(msg)
        return process

    def processes(self) -> list[Process]:
        """Return all live processes, lowest pid first."""
        return [self._processes[pid] for pid in sorted(self._processes)]

    def stats(self) -> MemoryStats:
        """Return a summary of the current memory state."""
        return MemoryStats(
            total_frames=self._config.num_frames,
            free_frames=self.free_frames,
            remaining_capacity=self._remaining_capacity,
            page_faults=self._page_faults,
            live_processes=len(self._processes),
        )

    # -- Read-only snapshots --------------------------------------------------

    def physical_snapshot(self) -> tuple[Owner, ...]:
        """Return the owner of each frame (None for free)."""
        return self._physical.snapshot()

    def virtual_snapshot(self) -> tuple[Owner, ...]:
        """Return the owner of each virtual page (None for free)."""
        return self._virtual.snapshot()

    def physical_slots(self) -> tuple[tuple[Owner, ...], ...]:
        """Return the per-byte ownership grid of physical memory."""
        return self._physical.slots()

    def virtual_slots(self) -> tuple[tuple[Owner, ...], ...]:
        """Return the per-byte ownership grid of virtual memory."""
        return self._virtual.slots()

    def page_table_snapshot(self, pid: int) -> tuple[tuple[EntryView, ...], ...]:
        """Return a process's page table as rows of ``(frame_number, valid)``."""
        return self.process(pid).page_table.snapshot()

    # -- Admission -----------------------------------------------------------

    def create_process(self, *, declared_size: int) -> Process:
        """Admit a new process with the next sequential pid.

        Args:
            declared_size: Bytes the process claims to need.

        Returns:
            The new process, in the NEW state.

        Raises:
            CapacityExceededError: If the live process limit is reached.
            ValueError: If *declared_size* is not positive.

        """
        if len(self._processes) >= self._config.max_process_count:
            msg = f"Cannot create process: limit of {self._config.max_process_count} reached"
            self._logger.log(LogLevel.ERROR, msg, source="process")
            raise CapacityExceededError(msg)
        if declared_size <= 0:
            msg = f"Process size must be positive, got {declared_size}"
            raise ValueError(msg)

        pid = next(self._pid_counter)
        page_table = PageTable(
            outer_entries=self._config.outer_entries,
            entries_per_page=self._config.entries_per_page,
        )
        process = Process(pid=pid, declared_size=declared_size, page_table=page_table)
        self._processes[pid] = process
        self._logger.log(
            LogLevel.INFO,
            f"Process {pid} created ({declared_size} bytes)",
            source="process",
            pid=pid,
        )
        return process

    # -- Arbitration ----------------------------------------------------------

    def memory_request(self, pid: int, size: int) -> int:
        """Grant *size* bytes to a process if remaining capacity allows.

        The comparison is strict: a request equal to the remaining
        capacity is denied.  No frames are reserved here.

        Args:
            pid: The requesting process.
            size: Bytes requested, ``1 <= size <= declared_size``.

        Returns:
            The granted size.

        Raises:
            ValueError: If the process is unknown or *size* is out of range.
            RequestDeniedError: If *size* is not below remaining capacity,
                or the process already holds committed memory.

        """
        process = self.process(pid)
        if not 1 <= size <= process.declared_size:
            msg = f"Request of {size} bytes is outside 1-{process.declared_size} for process {pid}"
            raise ValueError(msg)
        if process.state is ProcessState.MAPPED:
            msg = f"Request denied: process {pid} already holds committed memory"
            self._logger.log(LogLevel.WARNING, msg, source="request", pid=pid)
            raise RequestDeniedError(msg)
        if size >= self._remaining_capacity:
            msg = (
                f"Request of {size} bytes for process {pid} denied: "
                f"{self._remaining_capacity} bytes remaining"
            )
            self._logger.log(LogLevel.WARNING, msg, source="request", pid=pid)
            raise RequestDeniedError(msg)

        process.grant(size)
        self._logger.log(
            LogLevel.INFO,
            f"Request of {size} bytes granted to process {pid}",
            source="request",
            pid=pid,
        )
        return size

    # -- Translation ----------------------------------------------------------

    def _split_logical(self, logical_address: int) -> tuple[int, int]:
        """Return ``(page_number, offset)`` for an in-range logical address."""
        if not 0 <= logical_address < self._config.virtual_memory_size:
            msg = (
                f"Logical address {logical_address} is outside "
                f"0-{self._config.virtual_memory_size - 1}"
            )
            raise AddressOutOfRangeError(msg)
        return split_address(logical_address, page_size=self._config.page_size)

    def translate(self, pid: int, logical_address: int) -> Translation:
        """Translate a logical address, faulting in memory on first touch.

        Args:
            pid: The process issuing the address.
            logical_address: The address to translate.

        Returns:
            The translation, with ``fault`` set if a page fault occurred.

        Raises:
            ValueError: If the process is unknown or has no granted memory.
            AddressOutOfRangeError: If the address or the run it needs falls
                outside the tables, or outside the process's committed region.
            AllocationFailureError: If no contiguous run of pages or frames
                is available.  Nothing is committed in that case.

        """
        process = self.process(pid)
        if process.state is ProcessState.NEW:
            msg = f"Process {pid} has no granted memory to translate into"
            raise ValueError(msg)

        page_number, offset = self._split_logical(logical_address)
        outer_index, inner_index = process.page_table.split(page_number)
        entry = process.page_table.lookup(outer_index, inner_index)

        fault = not entry.valid
        if fault:
            self._handle_fault(process, logical_address, page_number)
        else:
            self._logger.log(
                LogLevel.DEBUG,
                f"Page {page_number} already mapped to frame {entry.frame_number}",
                source="mmu",
                pid=pid,
            )

        frame_number = entry.frame_number
        assert frame_number is not None  # noqa: S101
        return Translation(
            pid=pid,
            logical_address=logical_address,
            page_number=page_number,
            offset=offset,
            outer_index=outer_index,
            inner_index=inner_index,
            frame_number=frame_number,
            physical_address=join_address(frame_number, offset, page_size=self._config.frame_size),
            fault=fault,
        )

    def _handle_fault(self, process: Process, logical_address: int, page_number: int) -> None:
        """Service a page fault: reserve a run of pages and frames, then map it."""
        pid = process.pid
        self._page_faults += 1
        process.record_fault()
        self._logger.log(
            LogLevel.INFO,
            f"Page fault on page {page_number} (address {logical_address})",
            source="mmu",
            pid=pid,
        )

        if process.state is ProcessState.MAPPED:
            msg = (
                f"Logical address {logical_address} is outside the committed region "
                f"of process {pid}"
            )
            self._logger.log(LogLevel.ERROR, msg, source="mmu", pid=pid)
            raise AddressOutOfRangeError(msg)

        num_pages = required_frames(process.granted_size, frame_size=self._config.page_size)
        last_page = page_number + num_pages
        if last_page > self._config.num_pages:
            msg = (
                f"Process {pid} needs pages {page_number}-{last_page - 1}, "
                f"beyond the last page {self._config.num_pages - 1}"
            )
            self._logger.log(LogLevel.ERROR, msg, source="mmu", pid=pid)
            raise AddressOutOfRangeError(msg)

        for page in range(page_number, last_page):
            owner = self._virtual.owner(page)
            if owner is not None and owner != pid:
                msg = f"Virtual page {page} is already held by process {owner}"
                self._logger.log(LogLevel.WARNING, msg, source="allocator", pid=pid)
                raise AllocationFailureError(msg)

        start_frame = self._allocator.first_fit(pid, num_frames=num_pages)
        if start_frame is None:
            msg = f"No run of {num_pages} free frames for process {pid}"
            self._logger.log(LogLevel.WARNING, msg, source="allocator", pid=pid)
            raise AllocationFailureError(msg)

        self._remaining_capacity -= process.declared_size
        for page in range(page_number, last_page):
            self._virtual.claim(page, pid)
        self.update_mapping(pid, logical_address, start_frame)
        process.map()
        self._logger.log(
            LogLevel.INFO,
            f"Allocated frames {start_frame}-{start_frame + num_pages - 1} to process {pid}; "
            f"{self._remaining_capacity} bytes remaining",
            source="allocator",
            pid=pid,
        )

    def update_mapping(self, pid: int, logical_address: int, start_frame: int) -> None:
        """Map the page of *logical_address* to *start_frame* and mark it valid.

        The rest of the process's run follows on consecutive frames:
        page ``p + i`` maps to frame ``start_frame + i``.

        Raises:
            ValueError: If the process is unknown.
            AddressOutOfRangeError: If the run does not fit in the page table.

        """
        process = self.process(pid)
        page_number, _offset = self._split_logical(logical_address)
        num_pages = max(1, required_frames(process.granted_size, frame_size=self._config.page_size))
        # Bounds-check the whole run before touching any entry.
        process.page_table.split(page_number + num_pages - 1)
        for i in range(num_pages):
            process.page_table.map(virtual_page=page_number + i, physical_frame=start_frame + i)

    # -- Reclamation ----------------------------------------------------------

    def deallocate(self, pid: int) -> int:
        """Release every frame, page, and mapping a process holds.

        A process that holds nothing is left alone.

        Args:
            pid: The process whose memory to release.

        Returns:
            The number of frames released (0 for a no-op).

        Raises:
            ValueError: If the process is unknown.

        """
        process = self.process(pid)
        start_page = self._virtual.first_owned_by(pid)
        if start_page is None:
            msg = f"Process {pid} holds no memory"
            self._logger.log(LogLevel.DEBUG, msg, source="mmu", pid=pid)
            return 0
        entry = process.page_table.entry(start_page)
        if not entry.valid or entry.frame_number is None:
            return 0

        start_frame = entry.frame_number
        num_frames = required_frames(process.granted_size, frame_size=self._config.frame_size)
        self._allocator.release(start_frame, num_frames=num_frames)
        self._remaining_capacity += process.declared_size
        for page in range(start_page, start_page + num_frames):
            self._virtual.release(page)
            process.page_table.unmap(virtual_page=page)
        process.unmap()
        self._logger.log(
            LogLevel.INFO,
            f"Released frames {start_frame}-{start_frame + num_frames - 1} from process {pid}; "
            f"{self._remaining_capacity} bytes remaining",
            source="allocator",
            pid=pid,
        )
        return num_frames

    def terminate(self, pid: int) -> int:
        """Deallocate a process and remove it from the process table.

        Returns:
            The number of frames released.

        Raises:
            ValueError: If the process is unknown.

        """
        process = self.process(pid)
        released = self.deallocate(pid)
        process.terminate()
        del self._processes[pid]
        self._logger.log(LogLevel.INFO, f"Process {pid} terminated", source="process", pid=pid)
        return released

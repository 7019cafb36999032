"""Physical and virtual memory maps — who owns which frame or page.

Both maps are a fixed grid of *units* (frames or pages) by *slots*
(the bytes inside one unit).  Each slot records the pid of the process
that owns it, or ``None`` when free.  Payload bytes are never stored;
the simulator only cares about ownership.

Allocation always works on whole units, but ownership is kept per slot
so a unit is free only when *every* slot in it is free.  This mirrors a
byte-addressable memory where a frame is usable only if nothing at all
lives in it.

The maps are passive bookkeeping.  They do not know about first fit,
capacity, or page tables — the memory manager and frame allocator drive
them.
"""

Owner = int | None


class OwnershipMap:
    """A grid of ``units x slot_count`` ownership slots."""

    kind = "unit"

    def __init__(self, *, units: int, slot_count: int) -> None:
        """Create a map with every slot free.

        Args:
            units: Number of frames or pages.
            slot_count: Bytes (slots) per frame or page.

        """
        self._slot_count = slot_count
        self._slots: list[list[Owner]] = [[None] * slot_count for _ in range(units)]

    def __len__(self) -> int:
        """Return the number of units."""
        return len(self._slots)

    @property
    def slot_count(self) -> int:
        """Return the number of slots per unit."""
        return self._slot_count

    def _check(self, index: int) -> None:
        if not 0 <= index < len(self._slots):
            msg = f"{self.kind.capitalize()} {index} is out of range (0-{len(self._slots) - 1})"
            raise IndexError(msg)

    def is_free(self, index: int) -> bool:
        """Return True if no slot of the unit has an owner."""
        self._check(index)
        return all(owner is None for owner in self._slots[index])

    def owner(self, index: int) -> Owner:
        """Return the pid owning the unit, or None if it is free.

        Allocation claims whole units, so the first owned slot speaks
        for the whole unit.
        """
        self._check(index)
        return next((o for o in self._slots[index] if o is not None), None)

    def claim(self, index: int, pid: int) -> None:
        """Mark every slot of a free unit as owned by *pid*.

        Raises:
            ValueError: If another process already owns any slot.

        """
        self._check(index)
        current = self.owner(index)
        if current is not None and current != pid:
            msg = f"{self.kind.capitalize()} {index} is already owned by process {current}"
            raise ValueError(msg)
        self._slots[index] = [pid] * self._slot_count

    def release(self, index: int) -> None:
        """Clear every slot of a unit."""
        self._check(index)
        self._slots[index] = [None] * self._slot_count

    def owned_by(self, pid: int) -> list[int]:
        """Return the unit indices owned by *pid*, lowest first."""
        return [i for i in range(len(self._slots)) if self.owner(i) == pid]

    def first_owned_by(self, pid: int) -> int | None:
        """Return the lowest unit index owned by *pid*, or None."""
        return next((i for i in range(len(self._slots)) if self.owner(i) == pid), None)

    def free_count(self) -> int:
        """Return the number of completely free units."""
        return sum(1 for i in range(len(self._slots)) if self.is_free(i))

    def snapshot(self) -> tuple[Owner, ...]:
        """Return the owner of each unit (None for free)."""
        return tuple(self.owner(i) for i in range(len(self._slots)))

    def slots(self) -> tuple[tuple[Owner, ...], ...]:
        """Return the full slot grid, one row per unit."""
        return tuple(tuple(row) for row in self._slots)


class PhysicalMemoryMap(OwnershipMap):
    """Ownership of physical frames."""

    kind = "frame"


class VirtualMemoryMap(OwnershipMap):
    """Ownership of virtual pages."""

    kind = "page"

"""Two-level (hierarchical) page table.

A flat page table needs one entry per virtual page, even for pages a
process never touches.  A **two-level** table splits the page number
in two::

    logical address  →  (page number, offset)        divmod by page size
    page number      →  (outer index, inner index)   divmod by entries/page

The outer index picks an *inner table* (one page worth of entries) and
the inner index picks the entry within it.  With the default machine
(256 pages, 4 entries per page) that is a 64 x 4 table.

Each entry holds an optional frame number and a valid bit.  An entry
is valid iff it has a frame and the mapping is in force; an invalid
entry means the next access is a page fault.

The table itself never decides *when* an entry becomes valid — that is
the memory manager's job.  The table only stores, looks up, and
bounds-checks.
"""

from dataclasses import dataclass

from mmu_sim.errors import AddressOutOfRangeError

# (frame_number, valid) — the read-only view of one entry.
EntryView = tuple[int | None, bool]


def split_address(address: int, *, page_size: int) -> tuple[int, int]:
    """Split an address into ``(page_or_frame_number, offset)``.

    The same arithmetic serves logical addresses (page, offset) and
    physical addresses (frame, offset) since pages and frames are the
    same size.
    """
    return divmod(address, page_size)


def join_address(number: int, offset: int, *, page_size: int) -> int:
    """Compose an address from a page/frame number and an offset."""
    return number * page_size + offset


@dataclass
class PageTableEntry:
    """One virtual page → physical frame mapping.

    Attributes:
        frame_number: The mapped frame, or None when unmapped.
        valid: True iff the mapping is currently in force.

    """

    frame_number: int | None = None
    valid: bool = False

    def view(self) -> EntryView:
        """Return the entry as a ``(frame_number, valid)`` pair."""
        return (self.frame_number, self.valid)


class PageTable:
    """A fixed-size outer table of inner tables of page table entries.

    Dimensions never change after construction, so every valid page
    number has exactly one entry and anything beyond is rejected with
    ``AddressOutOfRangeError`` instead of indexing past the end.
    """

    def __init__(self, *, outer_entries: int, entries_per_page: int) -> None:
        """Create a table with every entry invalid.

        Args:
            outer_entries: Number of inner tables.
            entries_per_page: Entries in each inner table.

        """
        self._outer_entries = outer_entries
        self._entries_per_page = entries_per_page
        self._tables: list[list[PageTableEntry]] = [
            [PageTableEntry() for _ in range(entries_per_page)] for _ in range(outer_entries)
        ]

    @property
    def outer_entries(self) -> int:
        """Return the number of inner tables."""
        return self._outer_entries

    @property
    def entries_per_page(self) -> int:
        """Return the number of entries per inner table."""
        return self._entries_per_page

    @property
    def max_page_number(self) -> int:
        """Return one past the highest page number the table can hold."""
        return self._outer_entries * self._entries_per_page

    def split(self, page_number: int) -> tuple[int, int]:
        """Split a page number into ``(outer_index, inner_index)``.

        Raises:
            AddressOutOfRangeError: If the page number is negative or
                not representable in this table.

        """
        if not 0 <= page_number < self.max_page_number:
            msg = (
                f"Page number {page_number} is outside the page table "
                f"(0-{self.max_page_number - 1})"
            )
            raise AddressOutOfRangeError(msg)
        return divmod(page_number, self._entries_per_page)

    def entry(self, page_number: int) -> PageTableEntry:
        """Return the entry for a virtual page number."""
        outer, inner = self.split(page_number)
        return self._tables[outer][inner]

    def lookup(self, outer_index: int, inner_index: int) -> PageTableEntry:
        """Return the entry at ``[outer_index][inner_index]``.

        Raises:
            AddressOutOfRangeError: If either index is out of bounds.

        """
        in_outer = 0 <= outer_index < self._outer_entries
        if not (in_outer and 0 <= inner_index < self._entries_per_page):
            msg = f"Page table index [{outer_index}][{inner_index}] is out of range"
            raise AddressOutOfRangeError(msg)
        return self._tables[outer_index][inner_index]

    def map(self, *, virtual_page: int, physical_frame: int) -> None:
        """Point a virtual page at a frame and mark the entry valid."""
        entry = self.entry(virtual_page)
        entry.frame_number = physical_frame
        entry.valid = True

    def unmap(self, *, virtual_page: int) -> None:
        """Invalidate a virtual page (no-op if not mapped)."""
        entry = self.entry(virtual_page)
        entry.frame_number = None
        entry.valid = False

    def mappings(self) -> dict[int, int]:
        """Return all valid virtual page → frame mappings."""
        result: dict[int, int] = {}
        for outer, table in enumerate(self._tables):
            for inner, entry in enumerate(table):
                if entry.valid and entry.frame_number is not None:
                    result[outer * self._entries_per_page + inner] = entry.frame_number
        return result

    def snapshot(self) -> tuple[tuple[EntryView, ...], ...]:
        """Return every entry as ``(frame_number, valid)``, row by row."""
        return tuple(tuple(entry.view() for entry in table) for table in self._tables)

    def __len__(self) -> int:
        """Return the number of valid entries."""
        return len(self.mappings())

"""Tests for the two-level page table.

A page number splits into an outer index (which inner table) and an
inner index (which entry).  Every entry starts invalid; mapping makes
it valid, unmapping makes it invalid again.  Anything outside the
table's fixed dimensions is rejected rather than indexed.
"""

import pytest

from mmu_sim.errors import AddressOutOfRangeError
from mmu_sim.memory.page_table import PageTable, PageTableEntry, join_address, split_address

OUTER_ENTRIES = 64
ENTRIES_PER_PAGE = 4
PAGE_SIZE = 16
MAX_PAGE = OUTER_ENTRIES * ENTRIES_PER_PAGE


def _table() -> PageTable:
    return PageTable(outer_entries=OUTER_ENTRIES, entries_per_page=ENTRIES_PER_PAGE)


class TestAddressArithmetic:
    """Verify address decomposition and composition."""

    def test_split_logical_address(self) -> None:
        """Address 100 with 16-byte pages is page 6, offset 4."""
        assert split_address(100, page_size=PAGE_SIZE) == (6, 4)

    def test_split_page_boundary(self) -> None:
        """An address on a page boundary has offset 0."""
        assert split_address(PAGE_SIZE * 3, page_size=PAGE_SIZE) == (3, 0)

    def test_join_address(self) -> None:
        """Frame 5, offset 7 is physical address 87."""
        expected = 5 * PAGE_SIZE + 7
        assert join_address(5, 7, page_size=PAGE_SIZE) == expected


class TestPageTableEntry:
    """Verify the default entry state."""

    def test_new_entry_is_invalid(self) -> None:
        """A fresh entry has no frame and is not valid."""
        entry = PageTableEntry()
        assert entry.frame_number is None
        assert entry.valid is False

    def test_view(self) -> None:
        """view() returns the (frame_number, valid) pair."""
        assert PageTableEntry(frame_number=3, valid=True).view() == (3, True)


class TestPageTableShape:
    """Verify dimensions and splitting."""

    def test_dimensions(self) -> None:
        """The table exposes its outer and inner sizes."""
        pt = _table()
        assert pt.outer_entries == OUTER_ENTRIES
        assert pt.entries_per_page == ENTRIES_PER_PAGE
        assert pt.max_page_number == MAX_PAGE

    def test_split_page_number(self) -> None:
        """Page 6 with 4 entries per page is [1][2]."""
        assert _table().split(6) == (1, 2)

    def test_split_last_page(self) -> None:
        """The last page lands in the last slot of the last inner table."""
        assert _table().split(MAX_PAGE - 1) == (OUTER_ENTRIES - 1, ENTRIES_PER_PAGE - 1)

    def test_split_beyond_table_raises(self) -> None:
        """A page number equal to the maximum is out of range."""
        with pytest.raises(AddressOutOfRangeError, match="outside the page table"):
            _table().split(MAX_PAGE)

    def test_split_negative_raises(self) -> None:
        """Negative page numbers are out of range."""
        with pytest.raises(AddressOutOfRangeError):
            _table().split(-1)

    def test_lookup_out_of_range_raises(self) -> None:
        """Direct lookups are bounds-checked too."""
        with pytest.raises(AddressOutOfRangeError, match="out of range"):
            _table().lookup(OUTER_ENTRIES, 0)
        with pytest.raises(AddressOutOfRangeError):
            _table().lookup(0, ENTRIES_PER_PAGE)

    def test_all_entries_start_invalid(self) -> None:
        """A new table has no valid entries."""
        pt = _table()
        assert len(pt) == 0
        assert all(not valid for row in pt.snapshot() for _frame, valid in row)


class TestPageTableMapping:
    """Verify mapping and unmapping."""

    def test_map_makes_entry_valid(self) -> None:
        """Mapping a page sets its frame and valid bit."""
        pt = _table()
        pt.map(virtual_page=6, physical_frame=42)
        entry = pt.lookup(1, 2)
        assert entry.valid is True
        assert entry.frame_number == 42

    def test_entry_and_lookup_agree(self) -> None:
        """entry(page) and lookup(outer, inner) return the same object."""
        pt = _table()
        assert pt.entry(6) is pt.lookup(1, 2)

    def test_unmap_invalidates(self) -> None:
        """Unmapping clears the frame and the valid bit."""
        pt = _table()
        pt.map(virtual_page=9, physical_frame=1)
        pt.unmap(virtual_page=9)
        assert pt.entry(9).view() == (None, False)

    def test_unmap_unmapped_is_noop(self) -> None:
        """Unmapping an invalid entry leaves it invalid."""
        pt = _table()
        pt.unmap(virtual_page=0)
        assert pt.entry(0).view() == (None, False)

    def test_mappings(self) -> None:
        """mappings() lists only valid entries by page number."""
        pt = _table()
        pt.map(virtual_page=0, physical_frame=10)
        pt.map(virtual_page=255, physical_frame=20)
        assert pt.mappings() == {0: 10, 255: 20}
        expected_count = 2
        assert len(pt) == expected_count

    def test_snapshot_shape_and_content(self) -> None:
        """snapshot() is outer x inner (frame, valid) pairs."""
        pt = _table()
        pt.map(virtual_page=5, physical_frame=7)
        snap = pt.snapshot()
        assert len(snap) == OUTER_ENTRIES
        assert all(len(row) == ENTRIES_PER_PAGE for row in snap)
        assert snap[1][1] == (7, True)
        assert snap[0][0] == (None, False)

    def test_map_out_of_range_raises(self) -> None:
        """Mapping beyond the table raises instead of growing it."""
        with pytest.raises(AddressOutOfRangeError):
            _table().map(virtual_page=MAX_PAGE, physical_frame=0)

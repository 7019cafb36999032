"""Text rendering of memory maps, page tables, and translations.

All functions here are pure: they take snapshots from the memory
manager and return strings.  Nothing reads live state or prints, so
every picture can be tested by comparing text.

Grids print one row per frame (or page) and one column per byte slot.
Owned slots show the owning pid; free slots show ``-``::

    Physical Memory
      0 |  0  0  0  0 ...
      1 |  -  -  -  - ...
"""

from collections.abc import Sequence

from mmu_sim.memory.manager import MemoryStats, Translation
from mmu_sim.memory.maps import Owner
from mmu_sim.memory.page_table import EntryView

_EMPTY = "-"


def _cell(owner: Owner, width: int) -> str:
    return (_EMPTY if owner is None else str(owner)).rjust(width)


def render_grid(
    title: str,
    rows: Sequence[Sequence[Owner]],
    *,
    occupied_only: bool = False,
) -> str:
    """Render an ownership grid, one row per frame or page.

    Args:
        title: Heading printed above the grid.
        rows: Slot owners, one sequence per frame/page.
        occupied_only: Skip rows where every slot is free.

    Returns:
        The grid as a multi-line string.

    """
    owners = [o for row in rows for o in row if o is not None]
    width = max([2, *(len(str(o)) for o in owners)])
    label_width = len(str(max(len(rows) - 1, 0)))
    lines = [title]
    for index, row in enumerate(rows):
        if occupied_only and all(o is None for o in row):
            continue
        cells = " ".join(_cell(o, width) for o in row)
        lines.append(f"  {str(index).rjust(label_width)} | {cells}")
    if len(lines) == 1:
        lines.append("  (empty)")
    return "\n".join(lines)


def render_physical_memory(
    slots: Sequence[Sequence[Owner]], *, occupied_only: bool = False
) -> str:
    """Render the physical memory grid (frames x bytes)."""
    return render_grid("Physical Memory", slots, occupied_only=occupied_only)


def render_virtual_memory(
    slots: Sequence[Sequence[Owner]], *, occupied_only: bool = False
) -> str:
    """Render the virtual memory grid (pages x bytes)."""
    return render_grid("Virtual Memory", slots, occupied_only=occupied_only)


def render_page_table(
    pid: int,
    snapshot: Sequence[Sequence[EntryView]],
    *,
    valid_only: bool = True,
) -> str:
    """Render a process's two-level page table.

    Each entry prints as ``[outer][inner] page P -> frame F``.  Unmapped
    entries print ``frame -`` and are skipped unless *valid_only* is off.
    """
    lines = [f"Page Table of Process {pid}"]
    entries_per_page = len(snapshot[0]) if snapshot else 0
    for outer, table in enumerate(snapshot):
        for inner, (frame, valid) in enumerate(table):
            if valid_only and not valid:
                continue
            page = outer * entries_per_page + inner
            shown = _EMPTY if frame is None else str(frame)
            flag = "valid" if valid else "invalid"
            lines.append(f"  [{outer}][{inner}] page {page} -> frame {shown} ({flag})")
    if len(lines) == 1:
        lines.append("  (no valid entries)")
    return "\n".join(lines)


def render_translation(translation: Translation) -> str:
    """Describe one translation step by step."""
    t = translation
    outcome = "Page fault, frames allocated" if t.fault else "Page already mapped"
    return "\n".join(
        [
            f"Logical address generated by process {t.pid}: {t.logical_address}",
            f"  Page number: {t.page_number}  Offset: {t.offset}",
            f"  Outer index: {t.outer_index}  Inner index: {t.inner_index}",
            f"  {outcome}",
            f"  Frame: {t.frame_number}  Physical address: {t.physical_address}",
        ]
    )


def render_stats(stats: MemoryStats) -> str:
    """Summarise memory usage on a single line."""
    return (
        f"frames free: {stats.free_frames}/{stats.total_frames}  "
        f"capacity remaining: {stats.remaining_capacity} bytes  "
        f"page faults: {stats.page_faults}  "
        f"processes: {stats.live_processes}"
    )

"""Machine configuration — the fixed sizes the MMU is built around.

Every size in the simulator is in bytes.  The defaults describe a tiny
machine that is easy to print on one screen::

    physical memory  1024 B  →  64 frames of 16 B
    virtual memory   4096 B  → 256 pages  of 16 B
    page table entry    4 B  →   4 entries per page-table page
    outer table             →  64 inner tables (256 / 4)

The outer table therefore has one slot per inner table, and every
virtual page number splits cleanly into ``(outer_index, inner_index)``.

Configuration is fixed at startup.  ``MmuConfig`` is a frozen
dataclass that validates itself on construction, so an inconsistent
machine can never be built.  ``load_config`` reads the same fields
from a JSON file.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class ConfigError(ValueError):
    """Raise when a configuration is inconsistent or cannot be loaded."""


@dataclass(frozen=True)
class MmuConfig:
    """Sizes and limits of the simulated machine.

    Attributes:
        frame_size: Bytes per physical frame (and per virtual page).
        physical_memory_size: Total physical memory in bytes.
        virtual_memory_size: Total virtual address space in bytes.
        page_table_entry_size: Bytes occupied by one page table entry.
        max_process_count: Maximum number of live processes.
        min_process_size: Smallest declared process size.
        max_process_size: Largest declared process size.

    """

    frame_size: int = 16
    physical_memory_size: int = 1024
    virtual_memory_size: int = 4096
    page_table_entry_size: int = 4
    max_process_count: int = 64
    min_process_size: int = 16
    max_process_size: int = 64

    def __post_init__(self) -> None:
        """Reject sizes that do not fit together."""
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                msg = f"{f.name} must be a positive integer, got {value!r}"
                raise ConfigError(msg)
        if self.physical_memory_size % self.frame_size:
            msg = "physical_memory_size must be a multiple of frame_size"
            raise ConfigError(msg)
        if self.virtual_memory_size % self.frame_size:
            msg = "virtual_memory_size must be a multiple of the page size"
            raise ConfigError(msg)
        if self.frame_size % self.page_table_entry_size:
            msg = "page_table_entry_size must divide the page size"
            raise ConfigError(msg)
        if self.num_pages % self.entries_per_page:
            msg = "the page count must be a multiple of entries per page"
            raise ConfigError(msg)
        if self.min_process_size > self.max_process_size:
            msg = "min_process_size cannot exceed max_process_size"
            raise ConfigError(msg)

    @property
    def page_size(self) -> int:
        """Return the page size (always equal to the frame size)."""
        return self.frame_size

    @property
    def num_frames(self) -> int:
        """Return the number of physical frames."""
        return self.physical_memory_size // self.frame_size

    @property
    def num_pages(self) -> int:
        """Return the number of virtual pages."""
        return self.virtual_memory_size // self.page_size

    @property
    def entries_per_page(self) -> int:
        """Return how many page table entries fit in one page."""
        return self.page_size // self.page_table_entry_size

    @property
    def outer_entries(self) -> int:
        """Return the number of inner tables the outer table indexes."""
        return self.num_pages // self.entries_per_page

    def describe(self) -> list[str]:
        """Return the configuration as human-readable lines."""
        return [
            f"PHYSICAL MEMORY SIZE: {self.physical_memory_size} bytes",
            f"NO OF FRAMES IN PHYSICAL MEMORY: {self.num_frames}",
            f"FRAME SIZE: {self.frame_size} bytes",
            f"VIRTUAL MEMORY SIZE: {self.virtual_memory_size} bytes",
            f"NO OF PAGES IN VIRTUAL MEMORY: {self.num_pages}",
            f"PAGE SIZE: {self.page_size} bytes",
            f"PAGE TABLE: {self.outer_entries} x {self.entries_per_page} entries",
        ]


DEFAULT_CONFIG = MmuConfig()


def load_config(path: Path) -> MmuConfig:
    """Load a configuration from a JSON object file.

    Missing keys fall back to the defaults; unknown keys are ignored.

    Args:
        path: Path to the JSON file.

    Returns:
        The validated configuration.

    Raises:
        ConfigError: If the file cannot be read, is not a JSON object,
            or describes an inconsistent machine.

    """
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        msg = f"Cannot load configuration: {e}"
        raise ConfigError(msg) from e
    if not isinstance(data, dict):
        msg = "Configuration file must contain a JSON object"
        raise ConfigError(msg)
    known = {f.name for f in fields(MmuConfig)}
    return MmuConfig(**{k: v for k, v in data.items() if k in known})

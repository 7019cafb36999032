"""Memory subsystem — page tables, memory maps, first fit, and the manager.

Re-exports public symbols so callers can write::

    from mmu_sim.memory import MemoryManager, PageTable
"""

from mmu_sim.memory.allocator import FrameAllocator, required_frames
from mmu_sim.memory.manager import MemoryManager, MemoryStats, Translation
from mmu_sim.memory.maps import OwnershipMap, PhysicalMemoryMap, VirtualMemoryMap
from mmu_sim.memory.page_table import PageTable, PageTableEntry, join_address, split_address

__all__ = [
    "FrameAllocator",
    "MemoryManager",
    "MemoryStats",
    "OwnershipMap",
    "PageTable",
    "PageTableEntry",
    "PhysicalMemoryMap",
    "Translation",
    "VirtualMemoryMap",
    "join_address",
    "required_frames",
    "split_address",
]

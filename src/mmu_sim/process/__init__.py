"""Process subsystem — the process descriptor (PCB).

Re-exports public symbols so callers can write::

    from mmu_sim.process import Process, ProcessState
"""

from mmu_sim.process.pcb import Process, ProcessState

__all__ = [
    "Process",
    "ProcessState",
]

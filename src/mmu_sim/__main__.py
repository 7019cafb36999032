"""Allow ``python -m mmu_sim`` to start the console simulation."""

from mmu_sim.repl import run

run()

"""Console front end — ask how many processes, run, and show memory.

The flow mirrors the classic MMU demo:

    1. Print the machine's sizes.
    2. Ask "How many processes?" (re-asking on bad input).
    3. Run the simulation and print each translation.
    4. Print the memory grids, each mapped page table, and the event log.
    5. Deallocate everything and print the final (empty) maps.

The helpers (``format_banner``, ``parse_process_count``,
``format_report``) are pure and testable.  ``run()`` is the I/O
entrypoint behind the ``mmu-sim`` console script.
"""

import argparse
from collections.abc import Callable
from pathlib import Path

from mmu_sim.config import DEFAULT_CONFIG, ConfigError, MmuConfig, load_config
from mmu_sim.generators import RandomAddressGenerator, RandomSizeGenerator
from mmu_sim.logging import LogLevel
from mmu_sim.memory.manager import MemoryManager
from mmu_sim.simulation import Outcome, Simulation, SimulationReport
from mmu_sim.visualize import (
    render_page_table,
    render_physical_memory,
    render_stats,
    render_translation,
    render_virtual_memory,
)

_BANNER_WIDTH = 38


def format_banner(config: MmuConfig) -> str:
    """Format the machine description shown at startup."""
    border = "=" * _BANNER_WIDTH
    header = f"\n  {border}\n             MMU Simulator\n  {border}\n\n"
    body = "\n".join(f"  {line}" for line in config.describe())
    footer = "\n\nIn the memory grids, '-' marks an empty byte.\n"
    return header + body + footer


def parse_process_count(text: str, *, limit: int) -> int | None:
    """Parse a process count in ``1..limit``, or return None if invalid."""
    try:
        value = int(text.strip())
    except ValueError:
        return None
    if not 1 <= value <= limit:
        return None
    return value


def prompt_process_count(
    limit: int,
    *,
    read: Callable[[str], str] | None = None,
    write: Callable[[str], None] | None = None,
) -> int | None:
    """Ask until a valid count is entered; return None on end of input.

    *read* and *write* default to ``input`` and ``print``, looked up at
    call time.
    """
    read = read if read is not None else input
    write = write if write is not None else print
    while True:
        try:
            text = read(f"How many processes? (1-{limit}): ")
        except EOFError:
            return None
        count = parse_process_count(text, limit=limit)
        if count is not None:
            return count
        write(f"Please enter a whole number between 1 and {limit}.")


def format_report(manager: MemoryManager, report: SimulationReport) -> str:
    """Format a finished run: translations, grids, page tables, and log."""
    sections: list[str] = []
    for run in report.runs:
        header = (
            f"Process {run.pid}: declared {run.declared_size} bytes, "
            f"requested {run.requested_size} bytes"
        )
        if run.outcome is Outcome.MAPPED and run.translation is not None:
            sections.append(f"{header}\n{render_translation(run.translation)}")
        else:
            sections.append(f"{header}\n  {run.outcome}: {run.reason}")
    if report.halted:
        sections.append("Process limit reached; no more processes created.")

    sections.append(render_physical_memory(manager.physical_slots(), occupied_only=True))
    sections.append(render_virtual_memory(manager.virtual_slots(), occupied_only=True))
    sections.extend(
        render_page_table(pid, manager.page_table_snapshot(pid)) for pid in report.mapped_pids
    )
    sections.append(render_stats(manager.stats()))
    log_lines = manager.logger.lines(min_level=LogLevel.INFO)
    sections.append("Event Log\n" + "\n".join(f"  {line}" for line in log_lines))
    return "\n\n".join(sections)


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser for ``mmu-sim``."""
    parser = argparse.ArgumentParser(prog="mmu-sim", description="Simulate a paged MMU.")
    parser.add_argument("--seed", type=int, default=None, help="seed for reproducible runs")
    parser.add_argument("--config", type=Path, default=None, help="JSON machine configuration")
    parser.add_argument(
        "--processes", type=int, default=None, help="process count (skips the prompt)"
    )
    return parser


def run(argv: list[str] | None = None) -> None:
    """Run the interactive MMU simulation.

    Handles argument parsing, the process-count prompt, the simulation,
    deallocation, and Ctrl+C.
    """
    args = build_parser().parse_args(argv)
    try:
        config = load_config(args.config) if args.config is not None else DEFAULT_CONFIG
    except ConfigError as e:
        print(f"Error: {e}")  # noqa: T201
        return

    print(format_banner(config))  # noqa: T201
    try:
        count = args.processes
        if count is None or parse_process_count(str(count), limit=config.max_process_count) is None:
            count = prompt_process_count(config.max_process_count)
        if count is None:
            print()  # noqa: T201
            return

        manager = MemoryManager(config=config)
        sizes_seed = None if args.seed is None else args.seed + 1
        simulation = Simulation(
            manager=manager,
            addresses=RandomAddressGenerator(config, seed=args.seed),
            sizes=RandomSizeGenerator(config, seed=sizes_seed),
        )
        report = simulation.run(count)
        print(format_report(manager, report))  # noqa: T201

        released = simulation.release_all()
        print(f"\nDeallocated {released} frames.")  # noqa: T201
        print(render_physical_memory(manager.physical_slots(), occupied_only=True))  # noqa: T201
        print(render_stats(manager.stats()))  # noqa: T201

    except KeyboardInterrupt:
        print("\nInterrupted.")  # noqa: T201

"""Tests for the console front end.

Since the front end is mostly I/O, we test its pure helpers directly
and drive ``run()`` with patched input and captured output.
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from mmu_sim.config import DEFAULT_CONFIG
from mmu_sim.generators import ScriptedAddressGenerator, ScriptedSizeGenerator
from mmu_sim.memory.manager import MemoryManager
from mmu_sim.repl import (
    build_parser,
    format_banner,
    format_report,
    parse_process_count,
    prompt_process_count,
    run,
)
from mmu_sim.simulation import Simulation

LIMIT = 64


class TestParseProcessCount:
    """Verify process count parsing."""

    @pytest.mark.parametrize(("text", "expected"), [("5", 5), (" 64 ", 64), ("1", 1)])
    def test_valid(self, text: str, expected: int) -> None:
        """Whole numbers in range are accepted."""
        assert parse_process_count(text, limit=LIMIT) == expected

    @pytest.mark.parametrize("text", ["", "abc", "0", "-3", "65", "2.5"])
    def test_invalid(self, text: str) -> None:
        """Anything else is rejected."""
        assert parse_process_count(text, limit=LIMIT) is None


class TestPromptProcessCount:
    """Verify the re-prompting loop."""

    def test_reprompts_until_valid(self) -> None:
        """Bad answers produce a hint and another question."""
        answers = iter(["nope", "99", "3"])
        hints: list[str] = []
        count = prompt_process_count(LIMIT, read=lambda _prompt: next(answers), write=hints.append)
        assert count == 3
        assert len(hints) == 2

    def test_end_of_input_returns_none(self) -> None:
        """Ctrl+D ends the prompt."""

        def _eof(_prompt: str) -> str:
            raise EOFError

        assert prompt_process_count(LIMIT, read=_eof) is None

    def test_defaults_use_current_input_and_print(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Without read/write, input() and print() are looked up per call."""
        with patch("builtins.input", side_effect=["zero", "4"]):
            assert prompt_process_count(LIMIT) == 4
        assert "Please enter a whole number between 1 and 64." in capsys.readouterr().out


class TestFormatting:
    """Verify banner and report text."""

    def test_banner(self) -> None:
        """The banner names the simulator and lists the sizes."""
        banner = format_banner(DEFAULT_CONFIG)
        assert "MMU Simulator" in banner
        assert "FRAME SIZE: 16 bytes" in banner

    def test_report(self) -> None:
        """The report covers translations, grids, page tables, and the log."""
        mm = MemoryManager()
        sim = Simulation(
            manager=mm,
            addresses=ScriptedAddressGenerator([100, 4095]),
            sizes=ScriptedSizeGenerator([32, 48]),
        )
        report = sim.run(2)
        text = format_report(mm, report)
        assert "Process 0: declared 32 bytes, requested 32 bytes" in text
        assert "Page number: 6  Offset: 4" in text
        assert "out_of_range" in text
        assert "Physical Memory" in text
        assert "Virtual Memory" in text
        assert "Page Table of Process 0" in text
        assert "Page Table of Process 1" not in text
        assert "Event Log" in text


class TestRun:
    """Verify the console entry point end to end."""

    def test_parser_defaults(self) -> None:
        """No arguments means no seed, config, or preset count."""
        args = build_parser().parse_args([])
        assert args.seed is None
        assert args.config is None
        assert args.processes is None

    def test_run_with_count_argument(self, capsys: pytest.CaptureFixture[str]) -> None:
        """--processes skips the prompt and the run ends with memory released."""
        run(["--seed", "3", "--processes", "5"])
        out = capsys.readouterr().out
        assert "MMU Simulator" in out
        assert "Event Log" in out
        assert "Deallocated" in out
        assert "frames free: 64/64" in out

    def test_run_prompts_for_count(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Without --processes the user is asked."""
        with patch("builtins.input", return_value="2"):
            run(["--seed", "1"])
        assert "Process 1:" in capsys.readouterr().out

    def test_run_eof_at_prompt(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Ctrl+D at the prompt exits quietly."""
        with patch("builtins.input", side_effect=EOFError):
            run([])
        assert "Event Log" not in capsys.readouterr().out

    def test_run_with_bad_config(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """An invalid configuration file is reported, not raised."""
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"frame_size": 7}))
        run(["--config", str(path), "--processes", "1"])
        assert "Error:" in capsys.readouterr().out

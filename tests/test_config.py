"""Tests for the machine configuration.

The defaults describe the classic tiny machine: 64 frames of 16 bytes,
256 virtual pages, and a 64 x 4 two-level page table.  Inconsistent
sizes are rejected at construction and when loading from JSON.
"""

import json
from pathlib import Path

import pytest

from mmu_sim.config import DEFAULT_CONFIG, ConfigError, MmuConfig, load_config

DEFAULT_FRAMES = 64
DEFAULT_PAGES = 256
DEFAULT_ENTRIES_PER_PAGE = 4
DEFAULT_OUTER = 64


class TestDefaults:
    """Verify the default machine and derived sizes."""

    def test_derived_sizes(self) -> None:
        """Frames, pages, and page table dimensions follow from the sizes."""
        c = DEFAULT_CONFIG
        assert c.page_size == c.frame_size
        assert c.num_frames == DEFAULT_FRAMES
        assert c.num_pages == DEFAULT_PAGES
        assert c.entries_per_page == DEFAULT_ENTRIES_PER_PAGE
        assert c.outer_entries == DEFAULT_OUTER

    def test_frozen(self) -> None:
        """Configuration cannot change after startup."""
        with pytest.raises(AttributeError):
            DEFAULT_CONFIG.frame_size = 32  # type: ignore[misc]

    def test_describe(self) -> None:
        """describe() lists the sizes for the banner."""
        text = "\n".join(DEFAULT_CONFIG.describe())
        assert "PHYSICAL MEMORY SIZE: 1024 bytes" in text
        assert "NO OF PAGES IN VIRTUAL MEMORY: 256" in text
        assert "64 x 4" in text


class TestValidation:
    """Verify inconsistent machines are rejected."""

    @pytest.mark.parametrize(
        ("kwargs", "message"),
        [
            ({"frame_size": 0}, "positive"),
            ({"physical_memory_size": 1000}, "physical_memory_size"),
            ({"virtual_memory_size": 4100}, "virtual_memory_size"),
            ({"page_table_entry_size": 3}, "page_table_entry_size"),
            ({"virtual_memory_size": 48}, "multiple of entries per page"),
            ({"min_process_size": 100}, "min_process_size"),
        ],
    )
    def test_rejects(self, kwargs: dict[str, int], message: str) -> None:
        """Each inconsistency raises ConfigError with a specific message."""
        with pytest.raises(ConfigError, match=message):
            MmuConfig(**kwargs)

    @pytest.mark.parametrize("field", ["page_table_entry_size", "max_process_count"])
    def test_rejects_booleans(self, field: str) -> None:
        """True is not a size, even though bool subclasses int."""
        with pytest.raises(ConfigError, match=f"{field} must be a positive integer"):
            MmuConfig(**{field: True})

    def test_config_error_is_value_error(self) -> None:
        """ConfigError can be caught as ValueError."""
        assert issubclass(ConfigError, ValueError)


class TestLoadConfig:
    """Verify loading from JSON."""

    def test_load_overrides_and_defaults(self, tmp_path: Path) -> None:
        """Given keys override defaults; unknown keys are ignored."""
        path = tmp_path / "mmu.json"
        path.write_text(json.dumps({"physical_memory_size": 512, "comment": "small"}))
        config = load_config(path)
        assert config.physical_memory_size == 512
        assert config.num_frames == 32
        assert config.virtual_memory_size == DEFAULT_CONFIG.virtual_memory_size

    def test_missing_file(self, tmp_path: Path) -> None:
        """An unreadable file raises ConfigError."""
        with pytest.raises(ConfigError, match="Cannot load configuration"):
            load_config(tmp_path / "missing.json")

    def test_bad_json(self, tmp_path: Path) -> None:
        """Malformed JSON raises ConfigError."""
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_non_object(self, tmp_path: Path) -> None:
        """A JSON array is not a configuration."""
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigError, match="JSON object"):
            load_config(path)

    def test_inconsistent_file(self, tmp_path: Path) -> None:
        """Values from a file are validated like keyword arguments."""
        path = tmp_path / "odd.json"
        path.write_text(json.dumps({"frame_size": 10}))
        with pytest.raises(ConfigError):
            load_config(path)

    def test_boolean_in_file(self, tmp_path: Path) -> None:
        """A JSON true is rejected rather than read as 1."""
        path = tmp_path / "bool.json"
        path.write_text(json.dumps({"page_table_entry_size": True}))
        with pytest.raises(ConfigError, match="positive integer"):
            load_config(path)

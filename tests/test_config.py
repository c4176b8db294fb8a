from __future__ import annotations

import pytest

from contracts.profiles import get_profile
from project_config import get_config, get_section


def test_config_sections_are_present() -> None:
    config = get_config()
    for section in ("engine", "generator", "difficulty", "storage", "journal", "pdf"):
        assert section in config


def test_get_section_walks_dotted_paths() -> None:
    assert get_section("engine.max_history") == 50
    assert get_section("difficulty.hard.total_target") == 25
    assert get_section("pdf.layout.rows") == 2


def test_get_section_falls_back_to_default() -> None:
    assert get_section("engine.not_there", 7) == 7
    with pytest.raises(KeyError, match="engine.not_there"):
        get_section("engine.not_there")
    with pytest.raises(KeyError):
        get_section("engine.max_history.deeper")


def test_configured_tiers_match_profiles() -> None:
    for tier in ("easy", "medium", "hard"):
        block = get_section(f"difficulty.{tier}")
        profile = get_profile(tier)
        assert profile.min_clues == block["min_clues"]
        assert profile.max_clues == block["max_clues"]
        assert profile.total_target == block["total_target"]
        assert profile.distribution == block["distribution"]

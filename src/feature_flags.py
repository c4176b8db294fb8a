"""Runtime feature flag helpers."""

from __future__ import annotations

import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

__all__ = ["get_carver_feature", "is_uniqueness_check_enabled", "reload"]

_FEATURES_FILENAME = "config/features.toml"


def _features_path() -> Path:
    return Path(__file__).resolve().parents[1] / _FEATURES_FILENAME


@lru_cache(maxsize=1)
def _load_features() -> dict[str, Any]:
    path = _features_path()
    if not path.exists():
        return {}
    with path.open("rb") as handle:
        return tomllib.load(handle)


def reload() -> None:
    """Clear the cached feature configuration."""

    _load_features.cache_clear()


def _coerce_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalised = value.strip().lower()
        if normalised in {"1", "true", "yes", "on"}:
            return True
        if normalised in {"0", "false", "no", "off"}:
            return False
    return None


def get_carver_feature(difficulty: str | None = None) -> dict[str, Any]:
    """Return the merged carver feature block for the given difficulty tier."""

    features = _load_features()
    entry = features.get("carver")
    merged: dict[str, Any] = {}
    if isinstance(entry, dict):
        for key, value in entry.items():
            if key == "by_profile":
                continue
            merged[key] = value

        if difficulty:
            by_profile = entry.get("by_profile")
            if isinstance(by_profile, dict):
                profile_block = by_profile.get(difficulty.lower())
                if isinstance(profile_block, dict):
                    for key, value in profile_block.items():
                        merged[key] = value
    return merged


def is_uniqueness_check_enabled(
    env: Mapping[str, str] | None = None, *, difficulty: str | None = None
) -> bool:
    """Return ``True`` when carved puzzles must have a single solution."""

    feature_block = get_carver_feature(difficulty)
    enabled = bool(_coerce_bool(feature_block.get("ensure_unique", False)))

    if env:
        override_keys = (
            "CLI_SUDOKU_ENSURE_UNIQUE",
            "SUDOKU_ENSURE_UNIQUE",
        )
        for key in override_keys:
            override = _coerce_bool(env.get(key))
            if override is not None:
                enabled = override
                break

    return enabled

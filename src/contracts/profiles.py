"""Difficulty profiles (easy/medium/hard) that drive puzzle carving."""

from __future__ import annotations


from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping

from project_config import get_config

DISTRIBUTION_SCATTERED = "scattered"
DISTRIBUTION_BALANCED = "balanced"
DISTRIBUTION_MINIMAL = "minimal"

DISTRIBUTIONS = frozenset({DISTRIBUTION_SCATTERED, DISTRIBUTION_BALANCED, DISTRIBUTION_MINIMAL})


@dataclass(frozen=True)
class DifficultyProfile:
    """Per-box clue bounds, global clue target and box distribution strategy."""

    name: str
    min_clues: int
    max_clues: int
    total_target: int
    distribution: str

    def __post_init__(self) -> None:
        if not 0 <= self.min_clues <= self.max_clues <= 9:
            raise ValueError(
                f"Profile {self.name!r}: clue bounds must satisfy 0 <= min <= max <= 9"
            )
        if not 0 <= self.total_target <= 81:
            raise ValueError(f"Profile {self.name!r}: total_target must be within 0..81")
        if self.distribution not in DISTRIBUTIONS:
            raise ValueError(
                f"Profile {self.name!r}: unknown distribution {self.distribution!r}"
            )


_PROFILES: Dict[str, DifficultyProfile] = {
    "easy": DifficultyProfile(
        name="easy",
        min_clues=5,
        max_clues=7,
        total_target=45,
        distribution=DISTRIBUTION_SCATTERED,
    ),
    "medium": DifficultyProfile(
        name="medium",
        min_clues=3,
        max_clues=5,
        total_target=35,
        distribution=DISTRIBUTION_BALANCED,
    ),
    "hard": DifficultyProfile(
        name="hard",
        min_clues=2,
        max_clues=4,
        total_target=25,
        distribution=DISTRIBUTION_MINIMAL,
    ),
}

DIFFICULTIES = tuple(_PROFILES)

_OVERRIDABLE = ("min_clues", "max_clues", "total_target", "distribution")


def _apply_overrides(profile: DifficultyProfile, overrides: Mapping[str, Any]) -> DifficultyProfile:
    changes: Dict[str, Any] = {}
    for key in _OVERRIDABLE:
        if key not in overrides:
            continue
        value = overrides[key]
        changes[key] = str(value) if key == "distribution" else int(value)
    if not changes:
        return profile
    return replace(profile, **changes)


def get_profile(name: str | None) -> DifficultyProfile:
    """Return the profile matching *name* (defaults to ``easy``).

    Values from the ``[difficulty.<name>]`` section of ``config.toml`` take
    precedence over the built-in table.
    """

    if not name:
        name = "easy"
    key = name.lower()
    if key not in _PROFILES:
        raise ValueError(f"Unknown difficulty: {name}")

    section = get_config().get("difficulty", {})
    overrides = section.get(key) if isinstance(section, dict) else None
    if isinstance(overrides, dict):
        return _apply_overrides(_PROFILES[key], overrides)
    return _PROFILES[key]


__all__ = [
    "DIFFICULTIES",
    "DISTRIBUTIONS",
    "DISTRIBUTION_BALANCED",
    "DISTRIBUTION_MINIMAL",
    "DISTRIBUTION_SCATTERED",
    "DifficultyProfile",
    "get_profile",
]

"""Read ``config.toml`` from the repository root.

Engine limits, difficulty tiers, storage and journal paths and PDF layout
all live in that one file. Lookups go through :func:`get_section` with dotted
paths such as ``"engine.max_history"``.
"""

from __future__ import annotations

import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict


CONFIG_FILENAME = "config.toml"


def config_path() -> Path:
    return Path(__file__).resolve().parents[1] / CONFIG_FILENAME


@lru_cache(maxsize=1)
def get_config() -> Dict[str, Any]:
    """Return the parsed settings; the file is read once per process."""
    path = config_path()
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except FileNotFoundError as exc:  # pragma: no cover - broken checkout
        raise RuntimeError(f"sudoku-play settings file is missing: {path}") from exc


def get_section(path: str, default: Any = None) -> Any:
    """Return the value at dotted ``path``.

    ``default`` is returned when any segment is absent; without a default a
    missing path raises :class:`KeyError` naming the full path.
    """

    node: Any = get_config()
    for key in path.split("."):
        if not isinstance(node, dict) or key not in node:
            if default is not None:
                return default
            raise KeyError(f"no setting at '{path}' in {CONFIG_FILENAME}")
        node = node[key]
    return node


def reload() -> None:
    """Forget the parsed settings so the next lookup reads the file again."""

    get_config.cache_clear()


__all__ = ["CONFIG_FILENAME", "config_path", "get_config", "get_section", "reload"]

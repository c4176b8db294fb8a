"""Host-side persistence for saved sessions."""

from __future__ import annotations

from .save_store import SaveStore, default_store_path

__all__ = ["SaveStore", "default_store_path"]

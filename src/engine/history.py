"""Undo/redo history of single-cell edits."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional

DEFAULT_MAX_HISTORY = 50


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Operation:
    """One atomic cell edit.

    ``old_hint_mark`` is ``None`` only for records restored from saves that
    did not capture it; undo then leaves the hint mark as it is.
    """

    row: int
    col: int
    old_value: int
    new_value: int
    old_hint_mark: Optional[bool] = False
    timestamp: int = field(default_factory=_now_ms)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "row": self.row,
            "col": self.col,
            "oldValue": self.old_value,
            "newValue": self.new_value,
            "timestamp": self.timestamp,
        }
        if self.old_hint_mark is not None:
            payload["oldHintMark"] = self.old_hint_mark
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Operation":
        hint = data.get("oldHintMark", data.get("oldHintStatus"))
        return cls(
            row=int(data["row"]),
            col=int(data["col"]),
            old_value=int(data["oldValue"]),
            new_value=int(data["newValue"]),
            old_hint_mark=None if hint is None else bool(hint),
            timestamp=int(data.get("timestamp", 0)),
        )


class History:
    """Bounded operation list with a cursor.

    ``index`` points at the most recently applied operation; entries after it
    form the redo tail. ``-1`` means nothing can be undone.
    """

    def __init__(self, max_size: int = DEFAULT_MAX_HISTORY) -> None:
        if max_size < 1:
            raise ValueError("max_size must be positive")
        self.max_size = max_size
        self._ops: List[Operation] = []
        self.index = -1

    def __len__(self) -> int:
        return len(self._ops)

    def __iter__(self) -> Iterator[Operation]:
        return iter(self._ops)

    def __getitem__(self, position: int) -> Operation:
        return self._ops[position]

    @property
    def can_undo(self) -> bool:
        return self.index >= 0

    @property
    def can_redo(self) -> bool:
        return self.index < len(self._ops) - 1

    def record(self, op: Operation) -> None:
        """Drop the redo tail, append ``op`` and advance the cursor.

        When the bound is exceeded the oldest entry is evicted instead of
        advancing, so the cursor keeps pointing at ``op``.
        """

        del self._ops[self.index + 1:]
        self._ops.append(op)
        if len(self._ops) > self.max_size:
            self._ops.pop(0)
        else:
            self.index += 1

    def step_back(self) -> Optional[Operation]:
        if not self.can_undo:
            return None
        op = self._ops[self.index]
        self.index -= 1
        return op

    def step_forward(self) -> Optional[Operation]:
        if not self.can_redo:
            return None
        self.index += 1
        return self._ops[self.index]

    def clear(self) -> None:
        self._ops.clear()
        self.index = -1

    def load(self, ops: List[Operation], index: int) -> None:
        """Replace the contents; ``index`` is clamped into ``[-1, len-1]``.

        Lists longer than ``max_size`` lose their oldest entries, shifting the
        cursor with them.
        """

        ops = list(ops)
        excess = len(ops) - self.max_size
        if excess > 0:
            ops = ops[excess:]
            index -= excess
        self._ops = ops
        self.index = max(-1, min(index, len(self._ops) - 1))

    def to_list(self) -> List[Dict[str, Any]]:
        return [op.to_dict() for op in self._ops]


__all__ = ["DEFAULT_MAX_HISTORY", "History", "Operation"]

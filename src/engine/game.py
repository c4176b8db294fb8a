"""Game session: the move engine that hosts drive.

A :class:`GameSession` owns the three grids (``solution``, ``initial_grid``,
``grid``), the hint marks, the undo/redo history and the timer counter. It
holds no UI handles; hosts read state through the query methods and follow
changes through :attr:`GameSession.events`.

Completion is split in two. :meth:`GameSession.is_complete` is a pure query,
and :meth:`GameSession.complete` is the transition a host invokes once that
query turns true.
"""

from __future__ import annotations

import logging
import random
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple

from contracts.errors import ValidationReport, make_error
from contracts.profiles import DIFFICULTIES, get_profile
from contracts.session_schema import validate_session_record
from project_config import get_section

from . import events as ev
from . import validator
from .carver import carve
from .generator import generate_solution
from .grid import (
    CELLS,
    Cell,
    Grid,
    check_cell,
    check_value,
    count_filled,
    empty_grid,
    empty_marks,
    grid_copy,
    iter_cells,
)
from .history import DEFAULT_MAX_HISTORY, History, Operation

_LOGGER = logging.getLogger(__name__)

REASON_GIVEN = "given"
REASON_CONFLICT = "conflict"
REASON_PAUSED = "paused"
REASON_COMPLETE = "complete"
REASON_NOT_EMPTY = "not_empty"


@dataclass(frozen=True)
class EditResult:
    """Outcome of an edit request.

    ``conflicts`` is only populated for rejected placements; hosts use it to
    highlight the clashing cells for as long as they see fit.
    """

    applied: bool
    conflicts: FrozenSet[Cell] = field(default_factory=frozenset)
    reason: Optional[str] = None


def format_time(seconds: int) -> str:
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"


def _configured_max_history() -> int:
    return int(get_section("engine.max_history", DEFAULT_MAX_HISTORY))


class GameSession:
    def __init__(
        self,
        *,
        rng: Optional[random.Random] = None,
        max_history: Optional[int] = None,
        events: Optional[ev.EventChannel] = None,
    ) -> None:
        self.rng = rng or random.Random()
        self.events = events or ev.EventChannel()
        self.history = History(max_history or _configured_max_history())

        self.solution: Grid = empty_grid()
        self.initial_grid: Grid = empty_grid()
        self.grid: Grid = empty_grid()
        self.hint_numbers: List[List[bool]] = empty_marks()
        self.difficulty = "easy"
        self.timer = 0
        self.hint_count = 0
        self.paused = False
        self.completed = False

    # ---------- Lifecycle ----------

    def new_game(self, difficulty: str = "easy", *, seed: Optional[int] = None) -> None:
        """Generate a solution, carve a puzzle from it and reset play state."""

        profile = get_profile(difficulty)
        rng = random.Random(seed) if seed is not None else self.rng
        solution = generate_solution(rng=rng)
        puzzle = carve(solution, profile, rng=rng)

        self.solution = solution
        self.initial_grid = grid_copy(puzzle)
        self.grid = grid_copy(puzzle)
        self.hint_numbers = empty_marks()
        self.difficulty = profile.name
        self.timer = 0
        self.hint_count = 0
        self.paused = False
        self.completed = False
        self.history.clear()

        _LOGGER.info("new %s game with %d clues", profile.name, count_filled(puzzle))
        self.events.emit(ev.NEW_GAME, difficulty=profile.name, clues=count_filled(puzzle))
        self.events.emit(ev.HISTORY_CHANGED, can_undo=False, can_redo=False)

    def is_given(self, row: int, col: int) -> bool:
        return self.initial_grid[row][col] != 0

    # ---------- Edits ----------

    def _gate(self) -> Optional[str]:
        if self.completed:
            return REASON_COMPLETE
        if self.paused:
            return REASON_PAUSED
        return None

    def record_operation(self, op: Operation) -> None:
        self.history.record(op)
        self.events.emit(
            ev.HISTORY_CHANGED, can_undo=self.history.can_undo, can_redo=self.history.can_redo
        )

    def _set_cell(self, row: int, col: int, value: int, hint: bool) -> None:
        self.grid[row][col] = value
        self.hint_numbers[row][col] = hint
        self.events.emit(ev.CELL_CHANGED, row=row, col=col, value=value, hint=hint)

    def apply_edit(self, row: int, col: int, value: int) -> EditResult:
        """Place ``value`` (or clear with 0) at ``(row, col)``.

        A non-zero value that clashes with a peer is rejected and the clashing
        cells are returned; nothing is recorded in that case. Accepted edits
        always record an operation, even when the value is unchanged.
        """

        check_cell(row, col)
        check_value(value)
        if self.is_given(row, col):
            return EditResult(applied=False, reason=REASON_GIVEN)
        blocked = self._gate()
        if blocked:
            return EditResult(applied=False, reason=blocked)

        if value != 0:
            conflicts = validator.find_conflicts(self.grid, row, col, value)
            if conflicts:
                self.events.emit(
                    ev.EDIT_REJECTED, row=row, col=col, value=value, conflicts=sorted(conflicts)
                )
                return EditResult(
                    applied=False, conflicts=frozenset(conflicts), reason=REASON_CONFLICT
                )

        self.record_operation(
            Operation(
                row=row,
                col=col,
                old_value=self.grid[row][col],
                new_value=value,
                old_hint_mark=self.hint_numbers[row][col],
            )
        )
        self._set_cell(row, col, value, hint=False)
        return EditResult(applied=True)

    def hint_targets(self) -> List[Cell]:
        """Cells a hint may fill: empty now and not part of the puzzle."""

        return [
            (r, c)
            for r, c in iter_cells()
            if self.grid[r][c] == 0 and self.initial_grid[r][c] == 0
        ]

    def reveal_hint(self, row: int, col: int) -> EditResult:
        """Fill an empty cell with its solution value and mark it as a hint."""

        check_cell(row, col)
        blocked = self._gate()
        if blocked:
            return EditResult(applied=False, reason=blocked)
        if self.grid[row][col] != 0 or self.initial_grid[row][col] != 0:
            return EditResult(applied=False, reason=REASON_NOT_EMPTY)

        value = self.solution[row][col]
        self.record_operation(
            Operation(
                row=row,
                col=col,
                old_value=self.grid[row][col],
                new_value=value,
                old_hint_mark=self.hint_numbers[row][col],
            )
        )
        self._set_cell(row, col, value, hint=True)
        self.hint_count += 1
        self.events.emit(ev.HINT_REVEALED, row=row, col=col, value=value, hint_count=self.hint_count)
        return EditResult(applied=True)

    # ---------- Undo / redo ----------

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def undo(self) -> bool:
        op = self.history.step_back()
        if op is None:
            return False
        hint = self.hint_numbers[op.row][op.col] if op.old_hint_mark is None else op.old_hint_mark
        self._set_cell(op.row, op.col, op.old_value, hint=hint)
        self.events.emit(ev.HISTORY_CHANGED, can_undo=self.can_undo, can_redo=self.can_redo)
        return True

    def redo(self) -> bool:
        op = self.history.step_forward()
        if op is None:
            return False
        # A redo that fills an empty cell with the solution value is taken to
        # be a hint fill; the operation itself does not say.
        hint = (
            op.new_value != 0
            and op.new_value == self.solution[op.row][op.col]
            and op.old_value == 0
        )
        self._set_cell(op.row, op.col, op.new_value, hint=hint)
        self.events.emit(ev.HISTORY_CHANGED, can_undo=self.can_undo, can_redo=self.can_redo)
        return True

    # ---------- Completion / checks ----------

    def is_complete(self) -> bool:
        return validator.is_complete(self.grid)

    def complete(self) -> None:
        """Enter the finished state; hosts call this once ``is_complete()`` holds."""

        if self.completed:
            return
        self.completed = True
        _LOGGER.info(
            "%s game completed in %s with %d hint(s)",
            self.difficulty,
            format_time(self.timer),
            self.hint_count,
        )
        self.events.emit(
            ev.COMPLETED, timer=self.timer, difficulty=self.difficulty, hint_count=self.hint_count
        )

    def check_errors(self) -> ValidationReport:
        """Report every filled cell that clashes with a peer."""

        issues = [
            make_error(
                "cell.conflict",
                f"{self.grid[r][c]} repeats in row, column or box",
                f"r{r}c{c}",
            )
            for r, c in validator.find_errors(self.grid)
        ]
        return ValidationReport(ok=not issues, errors=issues, warnings=[])

    def reveal_solution(self) -> None:
        """Show the full answer and end the game without a win."""

        self.grid = grid_copy(self.solution)
        self.completed = True
        self.events.emit(ev.SOLUTION_REVEALED, difficulty=self.difficulty)

    def progress(self) -> Tuple[int, int]:
        return count_filled(self.grid), CELLS

    # ---------- Timer / pause ----------

    def pause(self) -> None:
        if not self.paused:
            self.paused = True
            self.events.emit(ev.PAUSED, timer=self.timer)

    def resume(self) -> None:
        if self.paused:
            self.paused = False
            self.events.emit(ev.RESUMED, timer=self.timer)

    def toggle_pause(self) -> bool:
        if self.paused:
            self.resume()
        else:
            self.pause()
        return self.paused

    def tick(self, seconds: int = 1) -> int:
        """Advance the elapsed-time counter unless paused or finished."""

        if not self.paused and not self.completed:
            self.timer += seconds
        return self.timer

    # ---------- Session records ----------

    def serialize(self, name: str) -> Dict[str, Any]:
        if not name or not name.strip():
            raise ValueError("save name must not be blank")
        return {
            "name": name.strip(),
            "grid": grid_copy(self.grid),
            "solution": grid_copy(self.solution),
            "initialGrid": grid_copy(self.initial_grid),
            "hintNumbers": [row[:] for row in self.hint_numbers],
            "timer": self.timer,
            "hintCount": self.hint_count,
            "difficulty": self.difficulty,
            "history": self.history.to_list(),
            "historyIndex": self.history.index,
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "id": f"save-{uuid.uuid4().hex[:12]}",
        }

    def deserialize(self, record: Mapping[str, Any]) -> None:
        """Replace the whole session with ``record``.

        The record is validated first; a malformed one raises
        :class:`contracts.errors.MalformedSessionRecord` and leaves the current
        state untouched.
        """

        validate_session_record(record)

        marks = record.get("hintNumbers")
        ops = [Operation.from_dict(item) for item in record.get("history") or []]

        self.grid = grid_copy(record["grid"])
        self.solution = grid_copy(record["solution"])
        self.initial_grid = grid_copy(record["initialGrid"])
        self.hint_numbers = [list(row) for row in marks] if marks else empty_marks()
        self.timer = int(record["timer"])
        self.hint_count = int(record["hintCount"])
        self.difficulty = record["difficulty"] if record["difficulty"] in DIFFICULTIES else "easy"
        self.history.load(ops, int(record.get("historyIndex", -1)))
        self.paused = False
        self.completed = self.is_complete()

        _LOGGER.info("loaded session %r (%s)", record.get("name"), record.get("id"))
        self.events.emit(ev.LOADED, name=record.get("name"), id=record.get("id"))
        self.events.emit(ev.HISTORY_CHANGED, can_undo=self.can_undo, can_redo=self.can_redo)


__all__ = [
    "EditResult",
    "GameSession",
    "REASON_COMPLETE",
    "REASON_CONFLICT",
    "REASON_GIVEN",
    "REASON_NOT_EMPTY",
    "REASON_PAUSED",
    "format_time",
]

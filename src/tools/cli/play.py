"""Command line host for playing saved Sudoku sessions.

Every command loads a record from the save store, drives a
:class:`engine.game.GameSession` and writes the record back. Rows, columns
and values are given 1-based, the way players count them.
"""

from __future__ import annotations

import argparse
import json
import logging
import random
from datetime import datetime
from typing import Any, Dict, List

from contracts.errors import EngineError
from contracts.profiles import DIFFICULTIES, get_profile
from engine.carver import carve
from engine.events import EventChannel
from engine.game import GameSession, format_time
from engine.generator import generate_solution
from engine.grid import print_grid, to_string
from journal import log as journal
from printer import pdf
from project_config import get_section
from storage.save_store import SaveStore


def _session(args: argparse.Namespace) -> GameSession:
    channel = EventChannel()
    if args.journal:
        journal.configure(args.journal)
        journal.attach(channel)
    return GameSession(events=channel)


def _load(args: argparse.Namespace) -> tuple[SaveStore, GameSession, Dict[str, Any]]:
    store = SaveStore(args.store)
    record = store.get(args.id)
    session = _session(args)
    session.deserialize(record)
    return store, session, record


def _persist(store: SaveStore, session: GameSession, record: Dict[str, Any]) -> None:
    updated = session.serialize(record["name"])
    updated["id"] = record["id"]
    store.update(updated)


def _cell(args: argparse.Namespace) -> tuple[int, int]:
    return args.row - 1, args.col - 1


def _finish_if_solved(session: GameSession) -> None:
    if not session.completed and session.is_complete():
        session.complete()
        print(f"Solved in {format_time(session.timer)} with {session.hint_count} hint(s)!")


def _print_board(session: GameSession) -> None:
    filled, total = session.progress()
    print(print_grid(session.grid))
    print(
        f"difficulty={session.difficulty} time={format_time(session.timer)} "
        f"hints={session.hint_count} progress={filled}/{total}"
    )


def cmd_new(args: argparse.Namespace) -> int:
    store = SaveStore(args.store)
    session = _session(args)
    session.new_game(args.difficulty, seed=args.seed)
    name = args.name or f"Saved at {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}"
    record = session.serialize(name)
    store.save(record)
    print(record["id"])
    _print_board(session)
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    records = SaveStore(args.store).list_records()
    if not records:
        print("No saved games.")
        return 0
    for record in records:
        print(
            f"{record.get('id')}  {record.get('name')}  "
            f"difficulty={record.get('difficulty')}  time={format_time(record.get('timer', 0))}  "
            f"hints={record.get('hintCount', 0)}  saved={record.get('timestamp')}"
        )
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    _, session, _ = _load(args)
    _print_board(session)
    return 0


def cmd_move(args: argparse.Namespace) -> int:
    store, session, record = _load(args)
    row, col = _cell(args)
    result = session.apply_edit(row, col, args.value)
    if not result.applied:
        if result.conflicts:
            cells = ", ".join(f"r{r + 1}c{c + 1}" for r, c in sorted(result.conflicts))
            print(f"Conflict with {cells}")
        else:
            print(f"Edit refused: {result.reason}")
        return 1
    _finish_if_solved(session)
    _persist(store, session, record)
    _print_board(session)
    return 0


def cmd_hint(args: argparse.Namespace) -> int:
    store, session, record = _load(args)
    if args.row is None or args.col is None:
        targets = session.hint_targets()
        if not targets:
            print("No empty cell left to reveal.")
            return 1
        row, col = targets[0]
    else:
        row, col = _cell(args)
    result = session.reveal_hint(row, col)
    if not result.applied:
        print(f"Hint refused: {result.reason}")
        return 1
    print(f"Hint: r{row + 1}c{col + 1} is {session.grid[row][col]}")
    _finish_if_solved(session)
    _persist(store, session, record)
    _print_board(session)
    return 0


def cmd_undo(args: argparse.Namespace) -> int:
    store, session, record = _load(args)
    if not session.undo():
        print("Nothing to undo.")
        return 1
    _persist(store, session, record)
    _print_board(session)
    return 0


def cmd_redo(args: argparse.Namespace) -> int:
    store, session, record = _load(args)
    if not session.redo():
        print("Nothing to redo.")
        return 1
    _finish_if_solved(session)
    _persist(store, session, record)
    _print_board(session)
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    _, session, _ = _load(args)
    report = session.check_errors()
    if report.ok:
        print("No errors found.")
        return 0
    print(f"Found {len(report.errors)} error(s):")
    for issue in report.errors:
        print(f"  {issue.path}: {issue.msg}")
    return 1


def cmd_solve(args: argparse.Namespace) -> int:
    store, session, record = _load(args)
    session.reveal_solution()
    _persist(store, session, record)
    _print_board(session)
    return 0


def cmd_delete(args: argparse.Namespace) -> int:
    SaveStore(args.store).delete(args.id)
    print(f"Deleted {args.id}")
    return 0


def cmd_export_pdf(args: argparse.Namespace) -> int:
    _, session, _ = _load(args)
    out = pdf.render_session(session, args.out or pdf.default_output_path())
    print(out)
    return 0


def cmd_pack(args: argparse.Namespace) -> int:
    rng = random.Random(args.seed)
    profile = get_profile(args.difficulty)
    puzzles: List[list] = []
    titles: List[str] = []
    bundle = []
    for i in range(args.count):
        solution = generate_solution(rng=rng)
        puzzle = carve(solution, profile, rng=rng)
        puzzles.append(puzzle)
        titles.append(f"#{i + 1} {profile.name}")
        bundle.append({"puzzle": to_string(puzzle), "solution": to_string(solution)})
    out = pdf.render_grids(puzzles, args.out or pdf.default_output_path(), titles=titles)
    if args.json:
        print(json.dumps(bundle, indent=2, sort_keys=True))
    print(out)
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play Sudoku sessions stored in a save file")
    parser.add_argument("--store", default=None, help="Save store path (default from config.toml)")
    parser.add_argument("--journal", default=None, help="Directory for the JSONL event journal")
    parser.add_argument("--log-level", default="WARNING")
    sub = parser.add_subparsers(dest="command", required=True)

    default_difficulty = str(get_section("engine.default_difficulty", "easy"))
    new = sub.add_parser("new", help="Generate a puzzle and save it as a new session")
    new.add_argument("--difficulty", choices=DIFFICULTIES, default=default_difficulty)
    new.add_argument("--seed", type=int, default=None)
    new.add_argument("--name", default=None)
    new.set_defaults(func=cmd_new)

    sub.add_parser("list", help="List saved sessions").set_defaults(func=cmd_list)

    for name, func, help_text in (
        ("show", cmd_show, "Print a saved board"),
        ("undo", cmd_undo, "Undo the last edit"),
        ("redo", cmd_redo, "Redo the last undone edit"),
        ("check", cmd_check, "Report conflicting cells"),
        ("solve", cmd_solve, "Reveal the full solution and end the game"),
        ("delete", cmd_delete, "Delete a saved session"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("id")
        cmd.set_defaults(func=func)

    move = sub.add_parser("move", help="Place a value (0 clears) at ROW COL, 1-based")
    move.add_argument("id")
    move.add_argument("row", type=int, choices=range(1, 10))
    move.add_argument("col", type=int, choices=range(1, 10))
    move.add_argument("value", type=int, choices=range(0, 10))
    move.set_defaults(func=cmd_move)

    hint = sub.add_parser("hint", help="Reveal the answer of an empty cell")
    hint.add_argument("id")
    hint.add_argument("row", type=int, nargs="?", choices=range(1, 10))
    hint.add_argument("col", type=int, nargs="?", choices=range(1, 10))
    hint.set_defaults(func=cmd_hint)

    export = sub.add_parser("export-pdf", help="Render a saved board to PDF")
    export.add_argument("id")
    export.add_argument("--out", default=None)
    export.set_defaults(func=cmd_export_pdf)

    pack = sub.add_parser("pack", help="Render a printable pack of fresh puzzles")
    pack.add_argument("--count", type=int, default=4)
    pack.add_argument("--difficulty", choices=DIFFICULTIES, default=default_difficulty)
    pack.add_argument("--seed", type=int, default=None)
    pack.add_argument("--out", default=None)
    pack.add_argument("--json", action="store_true", help="Also print puzzles and solutions as JSON")
    pack.set_defaults(func=cmd_pack)

    return parser


def main(argv: List[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    try:
        return args.func(args)
    except EngineError as exc:
        print(f"error: {exc}")
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

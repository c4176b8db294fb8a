from __future__ import annotations

import json

import pytest

from storage.save_store import SaveStore
from tools.cli import play


@pytest.fixture
def store_path(tmp_path, session_record):
    path = tmp_path / "saves.json"
    SaveStore(path).save(session_record)
    return path


def _run(store_path, *argv) -> int:
    return play.main(["--store", str(store_path), *argv])


def test_new_saves_a_session(tmp_path, capsys) -> None:
    path = tmp_path / "saves.json"
    assert _run(path, "new", "--difficulty", "medium", "--seed", "3", "--name", "cli") == 0
    out = capsys.readouterr().out
    records = SaveStore(path).list_records()
    assert len(records) == 1
    assert records[0]["name"] == "cli"
    assert records[0]["difficulty"] == "medium"
    assert out.splitlines()[0] == records[0]["id"]


def test_list_shows_saved_sessions(store_path, capsys) -> None:
    assert _run(store_path, "list") == 0
    out = capsys.readouterr().out
    assert "save-fixture" in out
    assert "difficulty=easy" in out


def test_list_empty_store(tmp_path, capsys) -> None:
    assert _run(tmp_path / "none.json", "list") == 0
    assert "No saved games." in capsys.readouterr().out


def test_move_undo_and_redo_persist(store_path, capsys) -> None:
    assert _run(store_path, "move", "save-fixture", "1", "2", "2") == 0
    assert SaveStore(store_path).get("save-fixture")["grid"][0][1] == 2

    assert _run(store_path, "undo", "save-fixture") == 0
    record = SaveStore(store_path).get("save-fixture")
    assert record["grid"][0][1] == 0
    assert record["historyIndex"] == -1

    assert _run(store_path, "redo", "save-fixture") == 0
    assert SaveStore(store_path).get("save-fixture")["grid"][0][1] == 2
    assert _run(store_path, "redo", "save-fixture") == 1
    assert "Nothing to redo." in capsys.readouterr().out


def test_conflicting_move_is_reported(store_path, capsys) -> None:
    assert _run(store_path, "move", "save-fixture", "1", "2", "1") == 1
    assert "Conflict with r1c1, r4c2" in capsys.readouterr().out
    assert SaveStore(store_path).get("save-fixture")["grid"][0][1] == 0


def test_hint_picks_first_open_cell(store_path, capsys) -> None:
    assert _run(store_path, "hint", "save-fixture") == 0
    assert "Hint: r1c2 is 2" in capsys.readouterr().out
    record = SaveStore(store_path).get("save-fixture")
    assert record["hintCount"] == 1
    assert record["hintNumbers"][0][1] is True


def test_check_reports_clean_board(store_path, capsys) -> None:
    assert _run(store_path, "check", "save-fixture") == 0
    assert "No errors found." in capsys.readouterr().out


def test_solve_and_finish(store_path, capsys) -> None:
    assert _run(store_path, "solve", "save-fixture") == 0
    assert _run(store_path, "move", "save-fixture", "1", "2", "0") == 1
    assert "Edit refused: complete" in capsys.readouterr().out


def test_delete_and_missing_session(store_path, capsys) -> None:
    assert _run(store_path, "delete", "save-fixture") == 0
    assert SaveStore(store_path).list_records() == []
    assert _run(store_path, "show", "save-fixture") == 1
    assert "error: not-found:save-fixture" in capsys.readouterr().out


def test_journal_option_writes_events(store_path, tmp_path) -> None:
    journal_dir = tmp_path / "journal"
    assert _run(store_path, "--journal", str(journal_dir), "move", "save-fixture", "1", "2", "2") == 0
    lines = [
        json.loads(line)
        for path in journal_dir.rglob("*.jsonl")
        for line in path.read_text("utf-8").splitlines()
    ]
    assert "cell_changed" in {entry["event"] for entry in lines}


def test_export_pdf(store_path, tmp_path) -> None:
    out = tmp_path / "board.pdf"
    assert _run(store_path, "export-pdf", "save-fixture", "--out", str(out)) == 0
    assert out.read_bytes().startswith(b"%PDF")


def test_pack_prints_json_bundle(tmp_path, capsys) -> None:
    out = tmp_path / "pack.pdf"
    argv = ["pack", "--count", "2", "--difficulty", "hard", "--seed", "1", "--out", str(out), "--json"]
    assert _run(tmp_path / "unused.json", *argv) == 0
    printed = capsys.readouterr().out
    bundle = json.loads(printed[: printed.rindex("]") + 1])
    assert len(bundle) == 2
    assert all(len(item["puzzle"]) == 81 for item in bundle)
    assert out.exists()

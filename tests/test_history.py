from __future__ import annotations

import pytest

from engine.history import History, Operation


def _op(value: int, row: int = 0, col: int = 0) -> Operation:
    return Operation(row=row, col=col, old_value=0, new_value=value, old_hint_mark=False, timestamp=value)


def test_record_advances_cursor() -> None:
    history = History(max_size=5)
    assert history.index == -1
    assert history.can_undo is False
    history.record(_op(1))
    history.record(_op(2))
    assert history.index == 1
    assert len(history) == 2
    assert history.can_undo is True
    assert history.can_redo is False


def test_step_back_and_forward() -> None:
    history = History(max_size=5)
    history.record(_op(1))
    history.record(_op(2))
    assert history.step_back().new_value == 2
    assert history.can_redo is True
    assert history.step_back().new_value == 1
    assert history.step_back() is None
    assert history.index == -1
    assert history.step_forward().new_value == 1
    assert history.step_forward().new_value == 2
    assert history.step_forward() is None


def test_new_record_truncates_redo_tail() -> None:
    history = History(max_size=10)
    for value in range(1, 6):
        history.record(_op(value))
    for _ in range(3):
        history.step_back()
    history.record(_op(9))
    assert [op.new_value for op in history] == [1, 2, 9]
    assert history.index == 2
    assert history.can_redo is False


def test_eviction_drops_oldest_and_keeps_cursor_on_latest() -> None:
    history = History(max_size=3)
    for value in range(1, 5):
        history.record(_op(value))
    assert [op.new_value for op in history] == [2, 3, 4]
    assert history.index == 2
    assert history[history.index].new_value == 4


def test_load_clamps_cursor_and_trims() -> None:
    history = History(max_size=3)
    ops = [_op(v) for v in range(1, 6)]
    history.load(ops, 4)
    assert [op.new_value for op in history] == [3, 4, 5]
    assert history.index == 2

    history.load(ops[:2], 10)
    assert history.index == 1
    history.load([], 0)
    assert history.index == -1


def test_operation_dict_round_trip_and_legacy_field() -> None:
    op = Operation(row=1, col=2, old_value=3, new_value=4, old_hint_mark=True, timestamp=99)
    assert Operation.from_dict(op.to_dict()) == op

    legacy = Operation.from_dict(
        {"row": 0, "col": 0, "oldValue": 0, "newValue": 5, "oldHintStatus": True, "timestamp": 1}
    )
    assert legacy.old_hint_mark is True

    missing = Operation.from_dict({"row": 0, "col": 0, "oldValue": 0, "newValue": 5})
    assert missing.old_hint_mark is None
    assert "oldHintMark" not in missing.to_dict()


def test_max_size_must_be_positive() -> None:
    with pytest.raises(ValueError):
        History(max_size=0)

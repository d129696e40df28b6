from __future__ import annotations

import pytest

from core.document import DocumentState, load_document, new_document
from core.reducer import MissingRowError, apply_backward, apply_forward, commit, reduce, replay
from core.save_point import is_clean
from schemas import commands as cmd
from schemas.sheet import Balances, Expense, Focus


def _edit(row_id: str, field: str, old, new, *, advance: bool = False) -> cmd.Edit:
    return cmd.Edit(
        target=Focus(row_id=row_id, field=field), old_value=old, new_value=new, advance_focus=advance
    )


def _visible(state: DocumentState):
    return state.rows, state.balances, state.focus


def _row(state: DocumentState, row_id: str) -> Expense:
    return state.rows[state.row_index(row_id)]


def test_new_document_has_one_default_row() -> None:
    state = new_document()
    (row,) = state.rows
    assert row.name == "New expense"
    assert (row.amount, row.pay_percent, row.paid_percent) == (0.0, 1.0, 0.0)
    assert len(state.log) == 0
    assert is_clean(state)


def test_scenario_edit_undo_redo() -> None:
    state = load_document([])
    add = cmd.AddRow()
    r1 = add.row_id
    state = reduce(state, add)
    assert _row(state, r1).name == "New expense"
    assert state.focus == Focus(row_id=r1, field="name")

    state = reduce(state, _edit(r1, "amount", 0.0, 100.0))
    state = reduce(state, _edit(r1, "pay_percent", 1.0, 0.5))
    assert _row(state, r1).to_pay == 50.0
    assert not is_clean(state)

    state = reduce(reduce(state, cmd.Undo()), cmd.Undo())
    row = _row(state, r1)
    assert (row.amount, row.pay_percent, row.to_pay) == (0.0, 1.0, 0.0)
    assert not is_clean(state)

    state = reduce(reduce(state, cmd.Redo()), cmd.Redo())
    assert _row(state, r1).to_pay == 50.0
    assert not is_clean(state)


def test_command_goes_through_commit_then_redo() -> None:
    state = new_document()
    add = cmd.AddRow()
    committed = commit(state, add)
    assert committed.rows == state.rows
    assert committed.log.cursor == 0 and len(committed.log) == 1
    assert reduce(state, add) == reduce(committed, cmd.Redo())


def test_undo_redo_inverse_law() -> None:
    state = new_document()
    r0 = state.rows[0].id
    inputs = [
        cmd.AddRow(),
        _edit(r0, "amount", 0.0, 120.0),
        cmd.AddSpace(),
        _edit(r0, "paid_percent", 0.0, 1.0, advance=True),
        cmd.EditBalance(field="due", old_value=0.0, new_value=30.0),
    ]
    for step in inputs:
        state = reduce(state, step)
        undone = reduce(state, cmd.Undo())
        assert _visible(reduce(undone, cmd.Redo())) == _visible(state)
    # Walk all the way back and forward again.
    forward = state
    for _ in inputs:
        state = reduce(state, cmd.Undo())
    assert state.log.cursor == 0
    back_again = replay(state, [cmd.Redo()] * len(inputs))
    assert _visible(back_again) == _visible(forward)


def test_redo_then_undo_restores_state() -> None:
    state = new_document()
    r0 = state.rows[0].id
    add = cmd.AddRow()
    inputs = [
        add,
        _edit(r0, "amount", 0.0, 120.0),
        cmd.AddSpace(),
        _edit(r0, "paid_percent", 0.0, 1.0, advance=True),
        cmd.EditBalance(field="due", old_value=0.0, new_value=30.0),
    ]
    state = replay(state, inputs)
    # Every position on the way back has at least one redoable command.
    while state.log.can_undo():
        state = reduce(state, cmd.Undo())
        assert state.log.can_redo()
        redone = reduce(state, cmd.Redo())
        assert _visible(reduce(redone, cmd.Undo())) == _visible(state)
    assert state.log.cursor == 0

    # Redoing AddRow focuses the new row's name; undoing it clears that focus.
    redone = reduce(state, cmd.Redo())
    assert redone.focus == Focus(row_id=add.row_id, field="name")
    restored = reduce(redone, cmd.Undo())
    assert restored.focus is None and state.focus is None
    assert restored.rows == state.rows


def test_undo_and_redo_out_of_bounds_are_noops() -> None:
    state = new_document()
    assert reduce(state, cmd.Undo()) is state
    assert reduce(state, cmd.Redo()) is state


def test_new_command_discards_redo_tail() -> None:
    state = new_document()
    r0 = state.rows[0].id
    for value in (1.0, 2.0, 3.0, 4.0, 5.0):
        state = reduce(state, _edit(r0, "amount", 0.0, value))
    state = replay(state, [cmd.Undo()] * 3)
    assert state.log.cursor == 2 and len(state.log) == 5

    state = reduce(state, _edit(r0, "amount", 2.0, 9.0))
    assert len(state.log) == 3 and state.log.cursor == 3
    assert reduce(state, cmd.Redo()) is state
    assert _row(state, r0).amount == 9.0


def test_undo_add_row_removes_tail_row() -> None:
    state = new_document()
    add = cmd.AddRow()
    space = cmd.AddSpace()
    state = replay(state, [add, space])
    assert state.rows[-1].space and state.rows[-1].id == space.row_id
    state = reduce(state, cmd.Undo())
    assert state.rows[-1].id == add.row_id
    state = reduce(state, cmd.Undo())
    assert len(state.rows) == 1
    assert state.focus is None


def test_redo_reuses_recorded_row_id() -> None:
    add = cmd.AddRow()
    state = replay(new_document(), [add, cmd.Undo(), cmd.Redo()])
    assert state.rows[-1].id == add.row_id


def test_edit_recomputes_derived_fields() -> None:
    state = new_document()
    r0 = state.rows[0].id
    state = replay(
        state,
        [
            _edit(r0, "amount", 0.0, 80.0),
            _edit(r0, "pay_percent", 1.0, 0.5),
            _edit(r0, "paid_percent", 0.0, 0.25),
            _edit(r0, "usually_due", "", "5th"),
        ],
    )
    row = _row(state, r0)
    assert (row.to_pay, row.due, row.actually_due) == (40.0, 30.0, "5th")
    state = reduce(state, _edit(r0, "paid_percent", 0.25, 1.0))
    assert _row(state, r0).actually_due == "-"
    assert _row(state, r0).due == 0.0


def test_edit_without_advance_clears_focus() -> None:
    state = new_document()
    r0 = state.rows[0].id
    state = reduce(state, cmd.SetFocus(row_id=r0, field="amount"))
    state = reduce(state, _edit(r0, "amount", 0.0, 3.0))
    assert state.focus is None


@pytest.mark.parametrize(
    "field,expected",
    [
        ("name", "amount"),
        ("amount", "pay_percent"),
        ("pay_percent", "paid_percent"),
        ("paid_percent", "usually_due"),
        ("usually_due", "name"),
    ],
)
def test_tab_commit_cycles_focus(field: str, expected: str) -> None:
    state = new_document()
    row = state.rows[0]
    state = reduce(state, _edit(row.id, field, getattr(row, field), getattr(row, field), advance=True))
    assert state.focus == Focus(row_id=row.id, field=expected)


def test_unchanged_edit_is_still_logged() -> None:
    state = new_document()
    r0 = state.rows[0].id
    state = reduce(state, _edit(r0, "name", "New expense", "New expense"))
    assert len(state.log) == 1
    assert not is_clean(state)


def test_focus_inputs_are_not_logged() -> None:
    state = new_document()
    r0 = state.rows[0].id
    state = reduce(state, cmd.SetFocus(row_id=r0, field="usually_due"))
    assert state.focus == Focus(row_id=r0, field="usually_due")
    state = reduce(state, cmd.CancelFocus())
    assert state.focus is None
    assert len(state.log) == 0


def test_set_focus_unknown_row_raises() -> None:
    with pytest.raises(MissingRowError):
        reduce(new_document(), cmd.SetFocus(row_id="nope", field="name"))


def test_edit_unknown_row_is_fatal() -> None:
    with pytest.raises(MissingRowError):
        reduce(new_document(), _edit("nope", "amount", 0.0, 1.0))


def test_reverse_add_row_checks_tail() -> None:
    state = new_document()
    with pytest.raises(MissingRowError):
        apply_backward(state, cmd.AddRow(row_id="not-the-tail"))


def test_edit_balance_round_trip() -> None:
    state = new_document()
    state = reduce(state, cmd.EditBalance(field="amount", old_value=0.0, new_value=500.0))
    assert state.balances == Balances(amount=500.0)
    state = reduce(state, cmd.Undo())
    assert state.balances == Balances()


def test_replace_document_resets_history() -> None:
    state = replay(new_document(), [cmd.AddRow(), cmd.AddRow()])
    opened = reduce(
        state,
        cmd.ReplaceDocument(
            expenses=[Expense(id="x", amount=10.0, pay_percent=0.5, to_pay=123.0)],
            balances=Balances(due=4.0),
        ),
    )
    assert len(opened.log) == 0 and opened.log.cursor == 0
    assert opened.rows[0].to_pay == 5.0
    assert opened.balances.due == 4.0
    assert opened.focus is None
    assert is_clean(opened)


def test_reduce_does_not_mutate_state() -> None:
    state = new_document()
    snapshot = (state.rows, state.balances, state.focus, state.log, state.save_point)
    reduce(state, cmd.AddRow())
    reduce(state, cmd.MarkSaved())
    assert (state.rows, state.balances, state.focus, state.log, state.save_point) == snapshot


def test_apply_forward_rejects_unknown_command() -> None:
    with pytest.raises(TypeError):
        apply_forward(new_document(), cmd.Undo())  # type: ignore[arg-type]

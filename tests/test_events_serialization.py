from __future__ import annotations

from schemas import commands as cmd
from schemas import events as ev
from schemas.sheet import Balances, Expense, Focus


def _round_trip(model):
    data = model.to_json()
    cls = model.__class__
    again = cls.from_json(data)
    assert model.model_dump(mode="json") == again.model_dump(mode="json")
    assert getattr(again, "type", cls.__name__) == cls.__name__


def test_commands_round_trip() -> None:
    _round_trip(cmd.AddRow())
    _round_trip(cmd.AddSpace())
    _round_trip(
        cmd.Edit(target=Focus(row_id="r1", field="pay_percent"), old_value=1.0, new_value=0.5)
    )
    _round_trip(cmd.Edit(target=Focus(row_id="r1", field="name"), old_value="a", new_value="b"))
    _round_trip(cmd.EditBalance(field="due", old_value=0.0, new_value=10.0))
    _round_trip(cmd.ReplaceDocument(expenses=[Expense(id="r1")], balances=Balances(due=1.0)))


def test_events_round_trip() -> None:
    _round_trip(ev.DocumentOpened(expenses=[Expense(id="r1", name="Rent")]))
    _round_trip(ev.NewDocumentRequested())
    _round_trip(ev.SaveAcknowledged())
    _round_trip(ev.UndoRequested())
    _round_trip(ev.RedoRequested())
    _round_trip(ev.DocumentSnapshot(balances=Balances(amount=2.0)))
    _round_trip(ev.CleanStateChanged(clean=False))


def test_command_ids_are_unique_and_stable() -> None:
    a, b = cmd.AddRow(), cmd.AddRow()
    assert a.id != b.id
    assert a.row_id != b.row_id
    assert cmd.AddRow.from_json(a.to_json()).id == a.id


def test_edit_keeps_text_values_as_text() -> None:
    e = cmd.Edit(target=Focus(row_id="r1", field="name"), old_value="", new_value="100")
    assert cmd.Edit.from_json(e.to_json()).new_value == "100"

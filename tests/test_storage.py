import json
from datetime import datetime
from decimal import Decimal
from zoneinfo import ZoneInfo

from moneyflow.domain import Expense
from moneyflow.storage import (
    BUDGETS_KEY,
    EXPENSES_KEY,
    JsonStore,
    load_budgets,
    load_expenses,
    save_budgets,
    save_expenses,
)

SP = ZoneInfo("America/Sao_Paulo")


def test_missing_keys_load_empty(tmp_path):
    store = JsonStore(tmp_path)
    assert load_expenses(store, SP) == ()
    assert load_budgets(store) == {}


def test_expenses_round_trip(tmp_path):
    store = JsonStore(tmp_path)
    expenses = (
        Expense("e2", Decimal("20.00"), "Mercado", datetime(2027, 3, 16, 9, 0, tzinfo=SP)),
        Expense("e1", Decimal("10.50"), "Uber", datetime(2027, 3, 15, 12, 0, tzinfo=SP)),
    )
    assert save_expenses(store, expenses)
    assert load_expenses(store, SP) == expenses

    raw = json.loads((tmp_path / f"{EXPENSES_KEY}.json").read_text(encoding="utf-8"))
    assert raw[0]["id"] == "e2"
    assert raw[0]["date"].startswith("2027-03-16T09:00:00")


def test_budgets_round_trip(tmp_path):
    store = JsonStore(tmp_path)
    budgets = {"03/2027": Decimal("1000.00")}
    assert save_budgets(store, budgets)
    assert load_budgets(store) == budgets
    raw = json.loads((tmp_path / f"{BUDGETS_KEY}.json").read_text(encoding="utf-8"))
    assert raw == {"03/2027": 1000.0}


def test_large_amounts_survive_a_save_cycle(tmp_path):
    store = JsonStore(tmp_path)
    big = Decimal("12345678901234567.89")
    expenses = (Expense("e1", big, "Apartamento", datetime(2027, 3, 15, 12, 0, tzinfo=SP)),)
    assert save_expenses(store, expenses)
    assert save_budgets(store, {"03/2027": big})
    assert load_expenses(store, SP)[0].amount == big
    assert load_budgets(store) == {"03/2027": big}


def test_non_finite_stored_amounts_fall_back_to_empty(tmp_path):
    (tmp_path / f"{EXPENSES_KEY}.json").write_text(
        '[{"id": "e1", "amount": NaN, "description": "x", "date": "2027-01-01T00:00:00+00:00"}]',
        encoding="utf-8",
    )
    (tmp_path / f"{BUDGETS_KEY}.json").write_text('{"01/2027": "Infinity"}', encoding="utf-8")
    store = JsonStore(tmp_path)
    assert load_expenses(store, SP) == ()
    assert load_budgets(store) == {}


def test_unparseable_content_falls_back_to_empty(tmp_path):
    (tmp_path / f"{EXPENSES_KEY}.json").write_text("{not json", encoding="utf-8")
    (tmp_path / f"{BUDGETS_KEY}.json").write_text("[1, 2]", encoding="utf-8")
    store = JsonStore(tmp_path)
    assert load_expenses(store, SP) == ()
    assert load_budgets(store) == {}


def test_undecodable_bytes_fall_back_to_empty(tmp_path):
    (tmp_path / f"{EXPENSES_KEY}.json").write_bytes(b"\xff\xfe\x00garbage")
    (tmp_path / f"{BUDGETS_KEY}.json").write_bytes(b"\xff\xfe")
    store = JsonStore(tmp_path)
    assert load_expenses(store, SP) == ()
    assert load_budgets(store) == {}


def test_malformed_records_fall_back_to_empty(tmp_path):
    store = JsonStore(tmp_path)
    store.save(EXPENSES_KEY, [{"id": "e1", "amount": "abc", "description": "x", "date": "2027-01-01"}])
    store.save(BUDGETS_KEY, {"01/2027": "lots"})
    assert load_expenses(store, SP) == ()
    assert load_budgets(store) == {}


def test_save_creates_directory(tmp_path):
    store = JsonStore(tmp_path / "nested" / "data")
    assert store.save("k", {"a": 1})
    assert store.load("k", None) == {"a": 1}


def test_save_failure_is_reported_not_raised(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    store = JsonStore(blocker)
    assert store.save("k", [1]) is False
    assert list(tmp_path.iterdir()) == [blocker]

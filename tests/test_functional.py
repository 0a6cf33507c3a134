from datetime import datetime
from decimal import Decimal
from zoneinfo import ZoneInfo

from moneyflow.domain import Expense
from moneyflow.functional import (
    Left,
    Nothing,
    Right,
    Some,
    check_amount,
    check_description,
    find_expense,
    validate_expense_input,
)

SP = ZoneInfo("America/Sao_Paulo")


def test_maybe_default():
    assert Some(5).get_or_else(0) == 5
    assert Nothing().get_or_else(0) == 0
    assert Some(1).is_some()
    assert not Nothing().is_some()


def test_either_bind_short_circuits():
    def half(x):
        return Left("odd") if x % 2 else Right(x // 2)

    assert Right(8).bind(half).bind(half) == Right(2)
    assert Right(6).bind(half).bind(half) == Left("odd")
    assert Left("first").bind(half).get_error() == "first"
    assert Left("e").is_left()


def test_find_expense():
    e = Expense("e1", Decimal("1.00"), "Uber", datetime(2027, 1, 1, tzinfo=SP))
    assert find_expense((e,), "e1") == Some(e)
    assert find_expense((e,), "nope") == Nothing()


def test_check_amount():
    assert check_amount("1050") == Right(Decimal("10.50"))
    assert check_amount(Decimal("3")) == Right(Decimal("3.00"))
    assert check_amount("").get_error()["error"] == "non_positive_amount"
    assert check_amount(-1).is_left()
    assert check_amount(0).is_left()


def test_check_amount_rejects_non_finite_numbers():
    for bad in (float("nan"), float("inf"), float("-inf"), Decimal("NaN"), Decimal("1E+40")):
        assert check_amount(bad).get_error()["error"] == "invalid_amount"


def test_check_description():
    assert check_description("  Uber ") == Right("Uber")
    assert check_description("   ").get_error()["error"] == "empty_description"
    assert check_description(None).is_left()


def test_validate_expense_input():
    assert validate_expense_input("500", " Café ") == Right((Decimal("5.00"), "Café"))
    assert validate_expense_input("0", "Café").get_error()["error"] == "non_positive_amount"
    assert validate_expense_input("500", "").get_error()["error"] == "empty_description"

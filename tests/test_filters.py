from datetime import datetime, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

from moneyflow.domain import Expense
from moneyflow.filters import belongs_to_period, by_description, by_period

SP = ZoneInfo("America/Sao_Paulo")


def make_exp(id, amount, description, date):
    return Expense(id=id, amount=Decimal(amount), description=description, date=date)


def test_belongs_to_period_same_month():
    e = make_exp("e1", "10.00", "Uber", datetime(2027, 3, 15, 12, 0, tzinfo=SP))
    assert belongs_to_period(e, "03/2027", SP)
    assert not belongs_to_period(e, "04/2027", SP)
    assert not belongs_to_period(e, "03/2028", SP)


def test_belongs_to_period_uses_configured_zone():
    # 01:00 UTC on April 1st is still March 31st in São Paulo
    e = make_exp("e1", "10.00", "Uber", datetime(2027, 4, 1, 1, 0, tzinfo=timezone.utc))
    assert belongs_to_period(e, "03/2027", SP)
    assert belongs_to_period(e, "04/2027", timezone.utc)


def test_belongs_to_period_naive_timestamp_is_local():
    e = make_exp("e1", "10.00", "Uber", datetime(2027, 12, 31, 23, 59))
    assert belongs_to_period(e, "12/2027", SP)


def test_by_period_predicate():
    e1 = make_exp("e1", "10.00", "Uber", datetime(2027, 3, 1, tzinfo=SP))
    e2 = make_exp("e2", "20.00", "Uber", datetime(2027, 2, 28, tzinfo=SP))
    result = list(filter(by_period("03/2027", SP), [e1, e2]))
    assert [e.id for e in result] == ["e1"]


def test_by_period_matches_belongs_to_period():
    # 01:00 UTC on April 1st is still March 31st in local time
    edge = make_exp("e1", "10.00", "Uber", datetime(2027, 4, 1, 1, 0, tzinfo=timezone.utc))
    for key in ("03/2027", "04/2027"):
        assert by_period(key, SP)(edge) == belongs_to_period(edge, key, SP)
    assert by_period("03/2027", SP)(edge)


def test_by_description_ignores_case_and_spaces():
    e1 = make_exp("e1", "10.00", "Uber ", datetime(2027, 3, 1, tzinfo=SP))
    e2 = make_exp("e2", "20.00", "uber", datetime(2027, 3, 2, tzinfo=SP))
    e3 = make_exp("e3", "5.00", "Mercado", datetime(2027, 3, 3, tzinfo=SP))
    result = list(filter(by_description("UBER"), [e1, e2, e3]))
    assert {e.id for e in result} == {"e1", "e2"}

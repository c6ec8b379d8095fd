from datetime import date
from decimal import Decimal

import pytest

from billsplit.errors import InconsistencyError
from billsplit.schemas import ExpenseRecord, SelectedSplit
from billsplit.services.balance_aggregator import aggregate
from billsplit.services.split_calculator import compute_split

D = Decimal


def _expense(amount, payer, members, strategy=None, eid=None):
    return ExpenseRecord(
        id=eid,
        description="x",
        amount=D(amount),
        date=date(2024, 1, 1),
        payer=payer,
        split=compute_split(D(amount), members, strategy),
    )


def test_no_expenses():
    assert aggregate([], ["A", "B"]) == {"A": D("0"), "B": D("0")}


def test_payer_share_nets_out():
    balances = aggregate([_expense("90", "A", ["A", "B", "C"])], ["A", "B", "C"])
    assert balances == {"A": D("60"), "B": D("-30"), "C": D("-30")}


def test_sole_participant_payer():
    members = ["A", "B", "C"]
    balances = aggregate([_expense("40", "A", members, SelectedSplit(members=["A"]))], members)
    assert all(b == 0 for b in balances.values())


def test_order_independent_and_sums_to_zero():
    members = ["A", "B", "C", "D"]
    expenses = [
        _expense("10.00", "A", members),
        _expense("33.33", "B", members, SelectedSplit(members=["B", "C", "D"])),
        _expense("7.01", "D", members),
    ]
    forward = aggregate(expenses, members)
    backward = aggregate(list(reversed(expenses)), members)
    assert forward == backward
    assert sum(forward.values()) == 0


def test_expense_for_removed_member_is_not_dropped():
    expense = _expense("20", "Z", ["A", "Z"], eid=7)
    with pytest.raises(InconsistencyError):
        aggregate([expense], ["A", "B"])

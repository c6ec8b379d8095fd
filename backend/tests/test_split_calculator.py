from decimal import Decimal

import pytest

from billsplit.errors import ConfigurationError, ValidationError
from billsplit.schemas import EqualSplit, SelectedSplit, PercentageSplit, ExactSplit
from billsplit.services.split_calculator import compute_split

D = Decimal


def test_equal_split_even():
    split = compute_split(D("90"), ["A", "B", "C"], EqualSplit())
    assert split == {"A": D("30.00"), "B": D("30.00"), "C": D("30.00")}


def test_equal_split_is_default():
    assert compute_split(D("10"), ["A", "B"]) == {"A": D("5.00"), "B": D("5.00")}


def test_equal_split_remainder_goes_to_first_members():
    split = compute_split(D("10.00"), ["A", "B", "C"], EqualSplit())
    assert split == {"A": D("3.34"), "B": D("3.33"), "C": D("3.33")}
    assert sum(split.values()) == D("10.00")


@pytest.mark.parametrize("amount,n", [("0.01", 3), ("100.00", 7), ("999.99", 6), ("1.00", 11)])
def test_equal_split_sums_exactly(amount, n):
    members = [f"m{i}" for i in range(n)]
    split = compute_split(D(amount), members, EqualSplit())
    assert sum(split.values()) == D(amount)
    assert list(split) == members


def test_selected_split():
    split = compute_split(D("100"), ["A", "B", "C", "D"], SelectedSplit(members=["A", "B"]))
    assert split == {"A": D("50.00"), "B": D("50.00"), "C": D("0.00"), "D": D("0.00")}


def test_selected_remainder_follows_group_order():
    split = compute_split(D("0.05"), ["A", "B", "C"], SelectedSplit(members=["C", "A"]))
    assert split == {"A": D("0.03"), "B": D("0.00"), "C": D("0.02")}


def test_selected_empty_subset():
    with pytest.raises(ConfigurationError):
        compute_split(D("10"), ["A", "B"], SelectedSplit(members=[]))


def test_selected_unknown_member():
    with pytest.raises(ValidationError):
        compute_split(D("10"), ["A", "B"], SelectedSplit(members=["Z"]))


def test_no_members():
    with pytest.raises(ConfigurationError):
        compute_split(D("10"), [], EqualSplit())


def test_percentage_split():
    split = compute_split(
        D("200"), ["A", "B", "C"], PercentageSplit(percentages={"A": D("50"), "B": D("25"), "C": D("25")})
    )
    assert split == {"A": D("100.00"), "B": D("50.00"), "C": D("50.00")}


def test_percentage_split_leftover_cents():
    split = compute_split(
        D("10.00"), ["A", "B", "C"], PercentageSplit(percentages={"A": D("33.33"), "B": D("33.33"), "C": D("33.34")})
    )
    assert sum(split.values()) == D("10.00")
    assert split["A"] == D("3.34")


def test_percentage_must_total_100():
    with pytest.raises(ValidationError):
        compute_split(D("10"), ["A", "B"], PercentageSplit(percentages={"A": D("60"), "B": D("30")}))


def test_exact_split():
    split = compute_split(D("30"), ["A", "B", "C"], ExactSplit(shares={"A": D("10"), "B": D("20")}))
    assert split == {"A": D("10.00"), "B": D("20.00"), "C": D("0.00")}


def test_exact_split_wrong_total():
    with pytest.raises(ValidationError):
        compute_split(D("30"), ["A", "B"], ExactSplit(shares={"A": D("10"), "B": D("10")}))


def test_sub_cent_amount_rejected():
    with pytest.raises(ValidationError):
        compute_split(D("10.005"), ["A", "B"], EqualSplit())

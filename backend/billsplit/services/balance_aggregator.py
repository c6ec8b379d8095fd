"""Fold a group's expense history into one net balance per member."""
from decimal import Decimal
from typing import Iterable

from billsplit.errors import InconsistencyError
from billsplit.schemas import ExpenseRecord
from billsplit.services.money import MINOR_UNIT


def aggregate(expenses: Iterable[ExpenseRecord], members: list[str]) -> dict[str, Decimal]:
    """
    members: current member names, in group order.
    Returns member -> net balance (positive = is owed money, negative = owes money).

    The payer is credited the full amount and every split entry is debited,
    the payer's own share included. Expenses naming someone outside ``members``
    raise InconsistencyError rather than losing that amount.
    """
    balances: dict[str, Decimal] = {m: Decimal(0).quantize(MINOR_UNIT) for m in members}
    for e in expenses:
        strangers = sorted({e.payer, *e.split} - set(balances))
        if strangers:
            raise InconsistencyError(
                f"Expense {e.id} references non-members: {', '.join(strangers)}"
            )
        balances[e.payer] += e.amount
        for name, share in e.split.items():
            balances[name] -= share
    return balances

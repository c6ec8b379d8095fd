"""Turn net balances into directed transfers that zero them out.

Greedy cancellation: the largest debtor pays the largest creditor until one
of them is square, then moves on. It emits at most ``debtors + creditors - 1``
transfers but is not a minimum-transaction solver; finding the fewest
transfers is a subset-sum style partition problem this does not attempt.
"""
import logging
from decimal import Decimal

from billsplit.errors import InconsistencyError
from billsplit.schemas import SettlementItem
from billsplit.services.money import EPSILON, quantize

logger = logging.getLogger(__name__)


def plan(balances: dict[str, Decimal]) -> list[SettlementItem]:
    """
    balances: member -> net balance (positive = is owed money, negative = owes money).
    Returns the ordered list of transfers. Equal balances are ordered by member name.
    """
    total = sum(balances.values(), Decimal(0))
    if abs(total) > EPSILON * max(1, len(balances)):
        raise InconsistencyError(f"Balances do not cancel out (sum is {total})")

    debtors = sorted(
        ([name, bal] for name, bal in balances.items() if bal < -EPSILON),
        key=lambda x: (x[1], x[0]),
    )
    creditors = sorted(
        ([name, bal] for name, bal in balances.items() if bal > EPSILON),
        key=lambda x: (-x[1], x[0]),
    )

    out: list[SettlementItem] = []
    i, j = 0, 0
    while i < len(debtors) and j < len(creditors):
        debtor, creditor = debtors[i], creditors[j]
        transfer = min(-debtor[1], creditor[1])
        if transfer > EPSILON:
            out.append(SettlementItem(from_member=debtor[0], to_member=creditor[0], amount=quantize(transfer)))
        debtor[1] += transfer
        creditor[1] -= transfer
        if abs(debtor[1]) <= EPSILON:
            i += 1
        if creditor[1] <= EPSILON:
            j += 1

    logger.debug("planned %d settlements for %d members", len(out), len(balances))
    return out

"""Turn an expense amount and a split strategy into per-member shares."""
import logging
from decimal import Decimal, ROUND_DOWN

from billsplit.errors import ConfigurationError, ValidationError
from billsplit.schemas import EqualSplit, SelectedSplit, PercentageSplit, ExactSplit
from billsplit.services.money import EPSILON, from_minor, to_minor, quantize

logger = logging.getLogger(__name__)

HUNDRED = Decimal(100)


def _spread(total_units: int, names: list[str]) -> dict[str, int]:
    """Equal division in minor units; the remainder goes one unit each to the first names."""
    base, remainder = divmod(total_units, len(names))
    return {name: base + (1 if i < remainder else 0) for i, name in enumerate(names)}


def _unknown(names, members: list[str]) -> list[str]:
    known = set(members)
    return sorted(n for n in names if n not in known)


def _equal(units: int, members: list[str], strategy: EqualSplit) -> dict[str, int]:
    return _spread(units, members)


def _selected(units: int, members: list[str], strategy: SelectedSplit) -> dict[str, int]:
    if not strategy.members:
        raise ConfigurationError("Select at least one member to split with")
    unknown = _unknown(strategy.members, members)
    if unknown:
        raise ValidationError(f"Not group members: {', '.join(unknown)}")
    chosen = set(strategy.members)
    # Group order, so the remainder assignment does not depend on request order.
    subset = [m for m in members if m in chosen]
    spread = _spread(units, subset)
    return {m: spread.get(m, 0) for m in members}


def _percentage(units: int, members: list[str], strategy: PercentageSplit) -> dict[str, int]:
    unknown = _unknown(strategy.percentages, members)
    if unknown:
        raise ValidationError(f"Not group members: {', '.join(unknown)}")
    if any(pct < 0 for pct in strategy.percentages.values()):
        raise ValidationError("Percentages cannot be negative")
    total_pct = sum(strategy.percentages.values(), Decimal(0))
    if total_pct != HUNDRED:
        raise ValidationError(f"Percentages total {total_pct}, expected 100")

    out = {}
    for m in members:
        pct = strategy.percentages.get(m, Decimal(0))
        out[m] = int((Decimal(units) * pct / HUNDRED).to_integral_value(rounding=ROUND_DOWN))
    leftover = units - sum(out.values())
    for m in members:
        if leftover <= 0:
            break
        if strategy.percentages.get(m, Decimal(0)) > 0:
            out[m] += 1
            leftover -= 1
    return out


def _exact(units: int, members: list[str], strategy: ExactSplit) -> dict[str, int]:
    unknown = _unknown(strategy.shares, members)
    if unknown:
        raise ValidationError(f"Not group members: {', '.join(unknown)}")
    if any(share < 0 for share in strategy.shares.values()):
        raise ValidationError("Shares cannot be negative")
    return {m: to_minor(strategy.shares.get(m, Decimal(0))) for m in members}


_CALCULATORS = {
    "equal": _equal,
    "selected": _selected,
    "percentage": _percentage,
    "exact": _exact,
}


def check_split_total(split: dict[str, Decimal], amount: Decimal) -> None:
    """Every split must add up to the expense amount within EPSILON."""
    total = sum(split.values(), Decimal(0))
    if abs(total - amount) > EPSILON:
        raise ValidationError(
            f"Split total ({quantize(total)}) must equal expense amount ({quantize(amount)})"
        )


def compute_split(amount: Decimal, members: list[str], strategy=None) -> dict[str, Decimal]:
    """
    Shares owed by each member for an expense of ``amount``.

    Returns a mapping covering every name in ``members`` (in member order);
    members outside the strategy's participants owe 0.00. Shares always sum
    to ``amount`` exactly.
    """
    if not members:
        raise ConfigurationError("Cannot split an expense across no members")
    strategy = strategy or EqualSplit()
    units = to_minor(amount)
    shares = _CALCULATORS[strategy.mode](units, list(members), strategy)
    split = {m: from_minor(shares[m]) for m in members}
    check_split_total(split, amount)
    logger.debug("split %s %s over %d members", amount, strategy.mode, len(members))
    return split

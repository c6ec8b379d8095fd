"""Admission checks: nothing reaches the aggregator or planner without passing here."""
import logging
from decimal import Decimal

from billsplit.errors import ConfigurationError, ValidationError
from billsplit.schemas import ExpenseRecord, GroupSnapshot
from billsplit.services.money import to_minor
from billsplit.services.split_calculator import check_split_total

logger = logging.getLogger(__name__)


def validate_group(name: str, members: list[str]) -> None:
    if not name or not name.strip():
        raise ConfigurationError("Group name is required")
    if len(members) < 2:
        raise ConfigurationError("A group needs at least two members")
    if any(not m or not m.strip() for m in members):
        raise ConfigurationError("Member names cannot be blank")
    seen = set()
    for m in members:
        if m in seen:
            raise ConfigurationError(f"Duplicate member name: {m}")
        seen.add(m)


def validate_expense(expense: ExpenseRecord, members: list[str]) -> None:
    """Reject an expense that breaks any data-model invariant for a group with ``members``."""
    if not expense.description or not expense.description.strip():
        raise ValidationError("Description is required")
    if expense.amount <= 0:
        raise ValidationError("Amount must be positive")
    to_minor(expense.amount)
    if expense.payer not in members:
        raise ValidationError(f"Payer {expense.payer} is not a group member")
    unknown = sorted(name for name in expense.split if name not in members)
    if unknown:
        raise ValidationError(f"Split names non-members: {', '.join(unknown)}")
    if any(share < Decimal(0) for share in expense.split.values()):
        raise ValidationError("Split shares cannot be negative")
    for share in expense.split.values():
        to_minor(share)
    check_split_total(expense.split, expense.amount)


def validate_snapshot(snapshot: GroupSnapshot) -> None:
    members = snapshot.member_names()
    validate_group(snapshot.name, members)
    for expense in snapshot.expenses:
        validate_expense(expense, members)


def admit(expense: ExpenseRecord, members: list[str]) -> ExpenseRecord:
    try:
        validate_expense(expense, members)
    except ValidationError as exc:
        logger.warning("rejected expense %r: %s", expense.description, exc)
        raise
    return expense

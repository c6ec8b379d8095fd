"""Convert between stored groups and immutable GroupSnapshot documents."""
import random

from sqlalchemy.orm import Session

from billsplit.models import Group, Member, Expense, ExpenseShare
from billsplit.schemas import ExpenseRecord, GroupSnapshot, MemberRecord


def random_color() -> str:
    return f"hsl({random.randint(0, 359)}, 70%, 80%)"


def expense_record(expense: Expense) -> ExpenseRecord:
    return ExpenseRecord(
        id=expense.id,
        description=expense.description,
        amount=expense.amount,
        date=expense.date,
        payer=expense.payer.name,
        split={s.member.name: s.share_amount for s in expense.shares},
        currency=expense.currency,
        split_type=expense.split_type,
    )


def group_snapshot(group: Group) -> GroupSnapshot:
    return GroupSnapshot(
        id=group.id,
        name=group.name,
        members=[MemberRecord(name=m.name) for m in group.members],
        expenses=[expense_record(e) for e in group.expenses],
        color=group.color,
    )


def add_expense(db: Session, group: Group, record: ExpenseRecord) -> Expense:
    """Stage an admitted expense on ``group``; the caller commits."""
    by_name = {m.name: m for m in group.members}
    expense = Expense(
        group=group,
        payer=by_name[record.payer],
        description=record.description,
        amount=record.amount,
        date=record.date,
        currency=record.currency,
        split_type=record.split_type,
    )
    expense.shares = [
        ExpenseShare(member=by_name[name], share_amount=share)
        for name, share in record.split.items()
    ]
    db.add(expense)
    return expense


def restore_group(db: Session, snapshot: GroupSnapshot) -> Group:
    """Stage a new Group built from a validated snapshot; ids are reassigned."""
    group = Group(name=snapshot.name, color=snapshot.color or random_color())
    group.members = [
        Member(name=m.name, position=i) for i, m in enumerate(snapshot.members)
    ]
    db.add(group)
    for record in snapshot.expenses:
        add_expense(db, group, record)
    return group


def name_key(name: str) -> str:
    """Comparison key for case-insensitive group name uniqueness."""
    return name.strip().casefold()


def normalize(snapshot: GroupSnapshot) -> GroupSnapshot:
    """Strip surrounding whitespace from group, member, payer and split names."""
    expenses = [
        e.model_copy(update={
            "payer": e.payer.strip(),
            "split": {name.strip(): share for name, share in e.split.items()},
        })
        for e in snapshot.expenses
    ]
    return snapshot.model_copy(update={
        "name": snapshot.name.strip(),
        "members": [MemberRecord(name=m.name.strip()) for m in snapshot.members],
        "expenses": expenses,
    })

"""Groups: create, list, get, update, delete, add/remove members."""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from billsplit.database import get_db
from billsplit.errors import ConfigurationError, ValidationError
from billsplit.models import Group, Member
from billsplit.schemas import GroupCreate, GroupUpdate, GroupResponse, GroupAddMember, MemberRecord
from billsplit.services.ledger import validate_group
from billsplit.services.snapshots import name_key, random_color

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/groups", tags=["groups"])


def group_response(group: Group) -> GroupResponse:
    return GroupResponse(
        id=group.id,
        name=group.name,
        color=group.color,
        created_at=group.created_at,
        members=[MemberRecord(name=m.name) for m in group.members],
        expense_count=len(group.expenses),
    )


def get_group_or_404(db: Session, group_id: int) -> Group:
    group = db.query(Group).filter(Group.id == group_id).first()
    if not group:
        raise HTTPException(status_code=404, detail="Group not found")
    return group


def _check_name_free(db: Session, name: str, exclude_id: int = None) -> None:
    # casefold in Python: SQLite's lower() only folds ASCII.
    key = name_key(name)
    q = db.query(Group.id, Group.name)
    if exclude_id is not None:
        q = q.filter(Group.id != exclude_id)
    if any(name_key(other) == key for _, other in q):
        raise ValidationError("Group already exists")


@router.get("", response_model=list[GroupResponse])
def list_groups(db: Session = Depends(get_db)):
    groups = db.query(Group).order_by(Group.id).all()
    return [group_response(g) for g in groups]


@router.post("", response_model=GroupResponse)
def create_group(data: GroupCreate, db: Session = Depends(get_db)):
    name = data.name.strip()
    members = [m.strip() for m in data.members if m.strip()]
    validate_group(name, members)
    _check_name_free(db, name)
    group = Group(name=name, color=data.color or random_color())
    group.members = [Member(name=m, position=i) for i, m in enumerate(members)]
    db.add(group)
    db.commit()
    db.refresh(group)
    logger.info("created group %s (%d) with %d members", group.name, group.id, len(members))
    return group_response(group)


@router.get("/{group_id}", response_model=GroupResponse)
def get_group(group_id: int, db: Session = Depends(get_db)):
    return group_response(get_group_or_404(db, group_id))


@router.patch("/{group_id}", response_model=GroupResponse)
def update_group(group_id: int, data: GroupUpdate, db: Session = Depends(get_db)):
    group = get_group_or_404(db, group_id)
    if data.name is not None:
        name = data.name.strip()
        if not name:
            raise ConfigurationError("Group name is required")
        _check_name_free(db, name, exclude_id=group.id)
        group.name = name
    if data.color is not None:
        group.color = data.color
    db.commit()
    db.refresh(group)
    return group_response(group)


@router.delete("/{group_id}", status_code=204)
def delete_group(group_id: int, db: Session = Depends(get_db)):
    group = get_group_or_404(db, group_id)
    db.delete(group)
    db.commit()
    logger.info("deleted group %d", group_id)


@router.post("/{group_id}/members", response_model=GroupResponse)
def add_group_member(group_id: int, data: GroupAddMember, db: Session = Depends(get_db)):
    group = get_group_or_404(db, group_id)
    name = data.name.strip()
    if not name:
        raise ConfigurationError("Member names cannot be blank")
    if any(m.name == name for m in group.members):
        raise ValidationError(f"{name} is already in this group")
    position = max((m.position for m in group.members), default=-1) + 1
    group.members.append(Member(name=name, position=position))
    db.commit()
    db.refresh(group)
    return group_response(group)


@router.delete("/{group_id}/members/{name}", response_model=GroupResponse)
def remove_group_member(group_id: int, name: str, db: Session = Depends(get_db)):
    group = get_group_or_404(db, group_id)
    member = next((m for m in group.members if m.name == name), None)
    if not member:
        raise HTTPException(status_code=404, detail="Member not in this group")
    if len(group.members) <= 2:
        raise ConfigurationError("A group needs at least two members")
    # Removing a referenced member would leave a balance nobody can settle.
    for expense in group.expenses:
        if expense.payer_id == member.id or any(
            s.member_id == member.id and s.share_amount != 0 for s in expense.shares
        ):
            raise ValidationError(f"{name} still has expenses in this group")
    for expense in group.expenses:
        expense.shares = [s for s in expense.shares if s.member_id != member.id]
    group.members.remove(member)
    db.commit()
    db.refresh(group)
    return group_response(group)

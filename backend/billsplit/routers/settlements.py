"""Settlements: net balances and who pays whom, recomputed on every request."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from billsplit.database import get_db
from billsplit.schemas import SettlementSummary, MemberBalance
from billsplit.services.balance_aggregator import aggregate
from billsplit.services.settlement_planner import plan
from billsplit.services.snapshots import group_snapshot
from billsplit.routers.groups import get_group_or_404

router = APIRouter(prefix="/settlements", tags=["settlements"])


@router.get("/group/{group_id}", response_model=SettlementSummary)
def get_settlements(group_id: int, db: Session = Depends(get_db)):
    snapshot = group_snapshot(get_group_or_404(db, group_id))
    balances = aggregate(snapshot.expenses, snapshot.member_names())
    return SettlementSummary(
        group_id=group_id,
        members=snapshot.members,
        balances=[MemberBalance(member=name, balance=bal) for name, bal in balances.items()],
        settlements=plan(balances),
    )

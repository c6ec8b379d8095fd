"""Expenses: create, list, get, delete, export."""
import csv
import io
import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from billsplit.database import get_db
from billsplit.models import Expense
from billsplit.schemas import DEFAULT_CURRENCY, ExpenseCreate, ExpenseRecord, ExpenseResponse
from billsplit.services import ledger, snapshots
from billsplit.services.split_calculator import compute_split
from billsplit.routers.groups import get_group_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/expenses", tags=["expenses"])


def _expense_response(exp: Expense) -> ExpenseResponse:
    record = snapshots.expense_record(exp)
    return ExpenseResponse(
        **record.model_dump(exclude={"id"}),
        id=exp.id,
        group_id=exp.group_id,
        created_at=exp.created_at,
    )


@router.post("", response_model=ExpenseResponse)
def create_expense(data: ExpenseCreate, db: Session = Depends(get_db)):
    group = get_group_or_404(db, data.group_id)
    members = [m.name for m in group.members]
    split = compute_split(data.amount, members, data.split)
    record = ledger.admit(
        ExpenseRecord(
            description=data.description.strip(),
            amount=data.amount,
            date=data.date or date.today(),
            payer=data.payer,
            split=split,
            currency=data.currency or DEFAULT_CURRENCY,
            split_type=data.split.mode,
        ),
        members,
    )
    expense = snapshots.add_expense(db, group, record)
    db.commit()
    db.refresh(expense)
    logger.info("added expense %d (%s) to group %d", expense.id, record.amount, group.id)
    return _expense_response(expense)


@router.get("", response_model=list[ExpenseResponse])
def list_expenses(
    group_id: int,
    search: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    get_group_or_404(db, group_id)
    q = db.query(Expense).filter(Expense.group_id == group_id)
    if search:
        pattern = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        q = q.filter(Expense.description.ilike(f"%{pattern}%", escape="\\"))
    expenses = q.order_by(Expense.date.desc(), Expense.id.desc()).offset(offset).limit(limit).all()
    return [_expense_response(e) for e in expenses]


@router.get("/export")
def export_expenses(group_id: int, db: Session = Depends(get_db)):
    group = get_group_or_404(db, group_id)
    member_order = [m.name for m in group.members]

    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["Date", "Description", "Amount", "Currency", "Paid By", "Split Type", *member_order])
    for e in sorted(group.expenses, key=lambda x: (x.date, x.id), reverse=True):
        shares = {s.member.name: s.share_amount for s in e.shares}
        writer.writerow([
            e.date.isoformat(),
            e.description,
            f"{e.amount:.2f}",
            e.currency,
            e.payer.name,
            e.split_type,
            *(f"{shares.get(name, 0):.2f}" for name in member_order),
        ])

    output.seek(0)
    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=expenses-group-{group_id}.csv"},
    )


@router.get("/{expense_id}", response_model=ExpenseResponse)
def get_expense(expense_id: int, db: Session = Depends(get_db)):
    expense = db.query(Expense).filter(Expense.id == expense_id).first()
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    return _expense_response(expense)


@router.delete("/{expense_id}", status_code=204)
def delete_expense(expense_id: int, db: Session = Depends(get_db)):
    expense = db.query(Expense).filter(Expense.id == expense_id).first()
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    db.delete(expense)
    db.commit()
    logger.info("deleted expense %d", expense_id)

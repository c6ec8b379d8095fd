"""Pydantic schemas for request/response and the group snapshot document."""
import os
from datetime import date as date_type, datetime
from decimal import Decimal
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

DEFAULT_CURRENCY = os.getenv("DEFAULT_CURRENCY", "INR")


# ----- Split strategies -----
class EqualSplit(BaseModel):
    mode: Literal["equal"] = "equal"


class SelectedSplit(BaseModel):
    mode: Literal["selected"] = "selected"
    members: list[str]


class PercentageSplit(BaseModel):
    mode: Literal["percentage"] = "percentage"
    percentages: dict[str, Decimal]


class ExactSplit(BaseModel):
    mode: Literal["exact"] = "exact"
    shares: dict[str, Decimal]


SplitStrategy = Annotated[
    Union[EqualSplit, SelectedSplit, PercentageSplit, ExactSplit],
    Field(discriminator="mode"),
]


# ----- Snapshot (also the backup document) -----
class MemberRecord(BaseModel):
    name: str


class ExpenseRecord(BaseModel):
    id: Optional[int] = None
    description: str
    amount: Decimal
    date: date_type
    payer: str
    split: dict[str, Decimal]
    currency: str = DEFAULT_CURRENCY
    split_type: str = "exact"


class GroupSnapshot(BaseModel):
    id: Optional[int] = None
    name: str
    members: list[MemberRecord]
    expenses: list[ExpenseRecord] = []
    color: Optional[str] = None

    def member_names(self) -> list[str]:
        return [m.name for m in self.members]


# ----- Group -----
class GroupCreate(BaseModel):
    name: str
    members: list[str]
    color: Optional[str] = None


class GroupUpdate(BaseModel):
    name: Optional[str] = None
    color: Optional[str] = None


class GroupAddMember(BaseModel):
    name: str


class GroupResponse(BaseModel):
    id: int
    name: str
    color: Optional[str] = None
    created_at: Optional[datetime] = None
    members: list[MemberRecord] = []
    expense_count: int = 0


# ----- Expense -----
class ExpenseCreate(BaseModel):
    group_id: int
    description: str
    amount: Decimal
    payer: str
    split: SplitStrategy = Field(default_factory=EqualSplit)
    date: Optional[date_type] = None
    currency: Optional[str] = None


class ExpenseResponse(ExpenseRecord):
    id: int
    group_id: int
    created_at: Optional[datetime] = None


# ----- Settlement -----
class SettlementItem(BaseModel):
    from_member: str
    to_member: str
    amount: Decimal


class MemberBalance(BaseModel):
    member: str
    balance: Decimal


class SettlementSummary(BaseModel):
    group_id: int
    members: list[MemberRecord] = []
    balances: list[MemberBalance]
    settlements: list[SettlementItem]

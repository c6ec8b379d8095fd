"""SQLAlchemy models."""
from sqlalchemy import Column, Integer, String, Numeric, Date, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from billsplit.database import Base


class Group(Base):
    __tablename__ = "groups"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False)
    color = Column(String(32), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    members = relationship(
        "Member",
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="Member.position",
    )
    expenses = relationship(
        "Expense",
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="Expense.id",
    )


class Member(Base):
    __tablename__ = "members"
    __table_args__ = (UniqueConstraint("group_id", "name", name="uq_member_name"),)

    id = Column(Integer, primary_key=True, index=True)
    group_id = Column(Integer, ForeignKey("groups.id"), nullable=False)
    name = Column(String(255), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    group = relationship("Group", back_populates="members")


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    group_id = Column(Integer, ForeignKey("groups.id"), nullable=False)
    payer_id = Column(Integer, ForeignKey("members.id"), nullable=False)
    description = Column(String(512), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    date = Column(Date, nullable=False)
    currency = Column(String(3), nullable=False)
    split_type = Column(String(20), nullable=False, default="equal")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    group = relationship("Group", back_populates="expenses")
    payer = relationship("Member", foreign_keys=[payer_id])
    shares = relationship(
        "ExpenseShare",
        back_populates="expense",
        cascade="all, delete-orphan",
        order_by="ExpenseShare.id",
    )


class ExpenseShare(Base):
    __tablename__ = "expense_shares"

    id = Column(Integer, primary_key=True, index=True)
    expense_id = Column(Integer, ForeignKey("expenses.id"), nullable=False)
    member_id = Column(Integer, ForeignKey("members.id"), nullable=False)
    share_amount = Column(Numeric(12, 2), nullable=False)

    expense = relationship("Expense", back_populates="shares")
    member = relationship("Member")

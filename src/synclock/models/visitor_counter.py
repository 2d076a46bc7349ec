# src/synclock/models/visitor_counter.py
"""Visitor counter bookkeeping model."""

from sqlalchemy import BigInteger, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from synclock.db.session import Base

COUNTER_ROW_ID = 1


class VisitorCounter(Base):
    """Single-row table holding the cumulative visit count.

    Only the counter store reads or writes this row.
    """

    __tablename__ = "visitor_counter"
    __table_args__ = (CheckConstraint("guest_count >= 0", name="ck_visitor_counter_nonnegative"),)

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, default=COUNTER_ROW_ID)
    guest_count: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

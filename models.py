from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import CheckConstraint, Date, DateTime, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from database import Base

DESCRIPTION_MAX_LENGTH = 255
CATEGORY_MAX_LENGTH = 100


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def cents_to_amount(cents: int) -> Decimal:
    """Integer cents as a two-place Decimal, e.g. 1250 -> Decimal("12.50")."""
    return Decimal(int(cents)).scaleb(-2)


def amount_to_cents(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )


class Expense(Base, TimestampMixin):
    __tablename__ = "expenses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    description: Mapped[str] = mapped_column(
        String(DESCRIPTION_MAX_LENGTH), nullable=False
    )
    amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    category: Mapped[str] = mapped_column(String(CATEGORY_MAX_LENGTH), nullable=False)
    date: Mapped[date] = mapped_column(
        Date, nullable=False, server_default=func.current_date()
    )

    __table_args__ = (
        Index("ix_expenses_date_created", "date", "created_at"),
        Index("ix_expenses_category", "category"),
        CheckConstraint("amount_cents > 0", name="ck_expenses_amount_positive"),
    )

    @property
    def amount(self) -> Decimal:
        return cents_to_amount(self.amount_cents)

    @amount.setter
    def amount(self, value: Decimal) -> None:
        self.amount_cents = amount_to_cents(value)

    def __repr__(self) -> str:
        return (
            f"Expense(id={self.id!r}, date={self.date!r}, "
            f"category={self.category!r}, amount={self.amount})"
        )

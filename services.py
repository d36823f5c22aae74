from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from aggregation import (
    category_breakdown,
    category_totals,
    daily_totals,
    fill_date_gaps,
    grand_total,
    sort_category_totals,
)
from models import Expense, amount_to_cents, cents_to_amount, utcnow
from periods import Period, ensure_ordered
from schemas import CategoryTotal, DailyTotal, ExpenseIn, MonthlyTotal
from validation import SUGGESTED_CATEGORIES

logger = logging.getLogger(__name__)


class ExpenseWriteError(RuntimeError):
    pass


@dataclass
class ExpenseFilters:
    category: Optional[str] = None
    start: Optional[date] = None
    end: Optional[date] = None

    @property
    def category_name(self) -> Optional[str]:
        if self.category is None:
            return None
        name = self.category.strip()
        if not name or name == "all":
            return None
        return name


class ExpenseService:
    def __init__(self, session: Session) -> None:
        self.session = session

    def _ordered(self, stmt):
        return stmt.order_by(
            Expense.date.desc(), Expense.created_at.desc(), Expense.id.desc()
        )

    def _commit(self, action: str) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise ExpenseWriteError(f"Failed to {action} expense") from exc

    def _get_for_write(self, expense_id: int, action: str) -> Optional[Expense]:
        try:
            return self.get(expense_id)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise ExpenseWriteError(f"Failed to {action} expense") from exc

    def has_any(self) -> bool:
        stmt = select(func.count(Expense.id))
        return (self.session.execute(stmt).scalar_one() or 0) > 0

    def list_all(self) -> list[Expense]:
        return self.list(ExpenseFilters())

    def list_by_category(self, category: str) -> list[Expense]:
        stmt = self._ordered(select(Expense).where(Expense.category == category))
        return list(self.session.scalars(stmt).all())

    def list_by_date_range(self, start: date, end: date) -> list[Expense]:
        return self.list(ExpenseFilters(start=start, end=end))

    def list(self, filters: ExpenseFilters) -> list[Expense]:
        ensure_ordered(filters.start, filters.end)
        stmt = select(Expense)
        if filters.category_name:
            stmt = stmt.where(Expense.category == filters.category_name)
        if filters.start:
            stmt = stmt.where(Expense.date >= filters.start)
        if filters.end:
            stmt = stmt.where(Expense.date <= filters.end)
        return list(self.session.scalars(self._ordered(stmt)).all())

    def get(self, expense_id: int) -> Optional[Expense]:
        return self.session.get(Expense, expense_id)

    def create(self, data: ExpenseIn) -> Expense:
        expense = Expense(
            description=data.description,
            amount_cents=amount_to_cents(data.amount),
            category=data.category,
            date=data.date,
        )
        self.session.add(expense)
        self._commit("create")
        self.session.refresh(expense)
        logger.info(
            f"expense_created: id={expense.id} date={expense.date} "
            f"category={expense.category!r} amount={expense.amount}"
        )
        return expense

    def update(self, expense_id: int, data: ExpenseIn) -> Optional[Expense]:
        expense = self._get_for_write(expense_id, "update")
        if expense is None:
            return None
        previous = expense.updated_at
        expense.description = data.description
        expense.amount_cents = amount_to_cents(data.amount)
        expense.category = data.category
        expense.date = data.date
        now = utcnow()
        if previous is not None and now <= previous:
            now = previous + timedelta(microseconds=1)
        expense.updated_at = now
        self._commit("update")
        self.session.refresh(expense)
        logger.info(f"expense_updated: id={expense.id}")
        return expense

    def delete(self, expense_id: int) -> bool:
        expense = self._get_for_write(expense_id, "delete")
        if expense is None:
            return False
        self.session.delete(expense)
        self._commit("delete")
        logger.info(f"expense_deleted: id={expense_id}")
        return True

    def sum_all(self) -> Decimal:
        stmt = select(func.coalesce(func.sum(Expense.amount_cents), 0))
        return cents_to_amount(self.session.execute(stmt).scalar_one() or 0)

    def distinct_categories(self) -> list[str]:
        stmt = select(Expense.category).distinct().order_by(Expense.category)
        return list(self.session.scalars(stmt).all())

    def category_totals(self) -> list[CategoryTotal]:
        stmt = select(
            Expense.category, func.sum(Expense.amount_cents).label("total")
        ).group_by(Expense.category)
        rows = self.session.execute(stmt).all()
        return sort_category_totals(
            CategoryTotal(category=row.category, total=cents_to_amount(row.total or 0))
            for row in rows
        )

    def _totals_by_date(self, period: Optional[Period] = None) -> dict[date, int]:
        stmt = select(
            Expense.date, func.sum(Expense.amount_cents).label("total")
        ).group_by(Expense.date)
        if period is not None:
            stmt = stmt.where(Expense.date.between(period.start, period.end))
        return {row.date: int(row.total or 0) for row in self.session.execute(stmt)}

    def monthly_totals(self) -> list[MonthlyTotal]:
        months: dict[str, int] = defaultdict(int)
        for day, cents in self._totals_by_date().items():
            months[f"{day.year:04d}-{day.month:02d}"] += cents
        return [
            MonthlyTotal(month=month, total=cents_to_amount(months[month]))
            for month in sorted(months)
        ]

    def daily_totals(self, period: Period) -> list[DailyTotal]:
        totals = self._totals_by_date(period)
        return [
            DailyTotal(date=day, total=cents_to_amount(totals[day]))
            for day in sorted(totals)
        ]


class MetricsService:
    def __init__(self, session: Session) -> None:
        self.session = session
        self.expenses = ExpenseService(session)

    def daily_series(self, period: Period) -> list[DailyTotal]:
        return fill_date_gaps(self.expenses.daily_totals(period))

    def dashboard(self, filters: ExpenseFilters) -> dict[str, object]:
        expenses = self.expenses.list(filters)
        totals = category_totals(expenses)
        return {
            "expenses": expenses,
            "filtered_total": grand_total(expenses),
            "total_amount": self.expenses.sum_all(),
            "categories": self.expenses.distinct_categories(),
            "suggested_categories": list(SUGGESTED_CATEGORIES),
            "category_chart": category_breakdown(totals),
            "daily_series": fill_date_gaps(daily_totals(expenses)),
            "has_any_expenses": self.expenses.has_any(),
        }

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from models import CATEGORY_MAX_LENGTH, DESCRIPTION_MAX_LENGTH


class ExpenseIn(BaseModel):
    description: str = Field(..., min_length=1, max_length=DESCRIPTION_MAX_LENGTH)
    amount: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    category: str = Field(..., min_length=1, max_length=CATEGORY_MAX_LENGTH)
    date: date


class ExpenseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    description: str
    amount: Decimal
    category: str
    date: date
    created_at: datetime
    updated_at: datetime


class CategoryTotal(BaseModel):
    category: str
    total: Decimal


class DailyTotal(BaseModel):
    date: date
    total: Decimal


class MonthlyTotal(BaseModel):
    month: str
    total: Decimal


class CategorySlice(BaseModel):
    category: str
    total: Decimal
    percent: Decimal
    color: str


class TotalOut(BaseModel):
    total: Decimal


class DeleteResult(BaseModel):
    success: bool
    message: str


class DashboardOut(BaseModel):
    expenses: list[ExpenseOut]
    filtered_total: Decimal
    total_amount: Decimal
    categories: list[str]
    suggested_categories: list[str]
    category_chart: list[CategorySlice]
    daily_series: list[DailyTotal]
    has_any_expenses: bool

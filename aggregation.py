"""Chart-ready derived views.

Everything here is a pure function over already-fetched data: daily series with
gap filling, per-category totals and slices, color tokens for pie charts and
percentage formatting. Money is handled as ``Decimal`` throughout.
"""

from collections import defaultdict
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence, Union

from models import Expense, cents_to_amount
from schemas import CategorySlice, CategoryTotal, DailyTotal

Number = Union[int, float, Decimal]

CATEGORY_PALETTE = (
    "#014f99",
    "#e11d48",
    "#059669",
    "#dc2626",
    "#7c3aed",
    "#ea580c",
    "#0891b2",
    "#65a30d",
    "#c2410c",
    "#7c2d12",
    "#be185d",
    "#1e40af",
    "#166534",
    "#92400e",
    "#581c87",
)

GOLDEN_ANGLE_DEGREES = 137.508
GENERATED_SATURATION = 75
GENERATED_LIGHTNESS = 45


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def fill_date_gaps(samples: Iterable[DailyTotal]) -> list[DailyTotal]:
    """Expand sparse per-day totals into a contiguous daily series.

    The series spans the earliest to the latest sample date inclusive. Days
    without a sample get a zero total. Several samples for the same day are
    summed.
    """
    totals: dict[date, Decimal] = defaultdict(Decimal)
    for sample in samples:
        totals[sample.date] += _to_decimal(sample.total)
    if not totals:
        return []

    current = min(totals)
    last = max(totals)
    out: list[DailyTotal] = []
    while current <= last:
        out.append(DailyTotal(date=current, total=totals.get(current, Decimal("0"))))
        current += timedelta(days=1)
    return out


def generate_category_colors(count: int) -> list[str]:
    if count < 0:
        raise ValueError("count must be non-negative")
    colors = list(CATEGORY_PALETTE[:count])
    for index in range(len(colors), count):
        hue = (index * GOLDEN_ANGLE_DEGREES) % 360
        colors.append(
            f"hsl({hue:.1f}, {GENERATED_SATURATION}%, {GENERATED_LIGHTNESS}%)"
        )
    return colors


def percentage_of(part: Number, whole: Number) -> Decimal:
    whole_dec = _to_decimal(whole)
    if whole_dec == 0:
        return Decimal("0")
    share = _to_decimal(part) / whole_dec * 100
    return share.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def grand_total(expenses: Iterable[Expense]) -> Decimal:
    return cents_to_amount(sum(expense.amount_cents for expense in expenses))


def sort_category_totals(totals: Iterable[CategoryTotal]) -> list[CategoryTotal]:
    return sorted(totals, key=lambda row: (-row.total, row.category))


def category_totals(expenses: Iterable[Expense]) -> list[CategoryTotal]:
    cents: dict[str, int] = defaultdict(int)
    for expense in expenses:
        cents[expense.category] += expense.amount_cents
    return sort_category_totals(
        CategoryTotal(category=name, total=cents_to_amount(value))
        for name, value in cents.items()
    )


def daily_totals(expenses: Iterable[Expense]) -> list[DailyTotal]:
    cents: dict[date, int] = defaultdict(int)
    for expense in expenses:
        cents[expense.date] += expense.amount_cents
    return [
        DailyTotal(date=day, total=cents_to_amount(cents[day])) for day in sorted(cents)
    ]


def category_breakdown(totals: Sequence[CategoryTotal]) -> list[CategorySlice]:
    whole = sum((row.total for row in totals), Decimal("0"))
    colors = generate_category_colors(len(totals))
    return [
        CategorySlice(
            category=row.category,
            total=row.total,
            percent=percentage_of(row.total, whole),
            color=color,
        )
        for row, color in zip(totals, colors)
    ]

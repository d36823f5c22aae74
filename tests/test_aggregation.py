import random
from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal

import pytest

from aggregation import (
    CATEGORY_PALETTE,
    category_breakdown,
    category_totals,
    daily_totals,
    fill_date_gaps,
    generate_category_colors,
    grand_total,
    percentage_of,
)
from models import Expense
from schemas import CategoryTotal, DailyTotal


def _expense(category: str, cents: int, day: date) -> Expense:
    return Expense(description="x", amount_cents=cents, category=category, date=day)


def test_fill_date_gaps_empty_input_returns_empty_list() -> None:
    assert fill_date_gaps([]) == []


def test_fill_date_gaps_spans_min_to_max_with_zero_days() -> None:
    samples = [
        DailyTotal(date=date(2024, 1, 5), total=Decimal("7.25")),
        DailyTotal(date=date(2024, 1, 1), total=Decimal("3.50")),
        DailyTotal(date=date(2024, 1, 3), total=Decimal("1.00")),
    ]

    series = fill_date_gaps(samples)

    assert [row.date for row in series] == [
        date(2024, 1, 1) + timedelta(days=i) for i in range(5)
    ]
    assert [row.total for row in series] == [
        Decimal("3.50"),
        Decimal("0"),
        Decimal("1.00"),
        Decimal("0"),
        Decimal("7.25"),
    ]


def test_fill_date_gaps_crosses_month_and_leap_day() -> None:
    samples = [
        DailyTotal(date=date(2024, 2, 27), total=Decimal("1")),
        DailyTotal(date=date(2024, 3, 2), total=Decimal("2")),
    ]

    series = fill_date_gaps(samples)

    assert len(series) == 5
    assert date(2024, 2, 29) in [row.date for row in series]
    for previous, current in zip(series, series[1:]):
        assert current.date - previous.date == timedelta(days=1)


def test_fill_date_gaps_single_sample() -> None:
    sample = DailyTotal(date=date(2024, 6, 1), total=Decimal("9.99"))
    assert fill_date_gaps([sample]) == [sample]


def test_fill_date_gaps_sums_duplicate_dates() -> None:
    samples = [
        DailyTotal(date=date(2024, 1, 1), total=Decimal("1.10")),
        DailyTotal(date=date(2024, 1, 2), total=Decimal("4.00")),
        DailyTotal(date=date(2024, 1, 1), total=Decimal("2.20")),
    ]

    series = fill_date_gaps(samples)

    assert [(row.date, row.total) for row in series] == [
        (date(2024, 1, 1), Decimal("3.30")),
        (date(2024, 1, 2), Decimal("4.00")),
    ]


def test_generate_category_colors_uses_palette_first() -> None:
    colors = generate_category_colors(15)
    assert colors == list(CATEGORY_PALETTE)
    assert len(set(colors)) == 15


def test_generate_category_colors_extends_with_golden_angle() -> None:
    colors = generate_category_colors(17)
    assert len(colors) == 17
    assert colors[15] == "hsl(262.6, 75%, 45%)"
    assert colors[16] == "hsl(40.1, 75%, 45%)"


def test_generate_category_colors_is_deterministic_and_distinct() -> None:
    assert generate_category_colors(40) == generate_category_colors(40)
    assert len(set(generate_category_colors(40))) == 40
    assert generate_category_colors(3) == generate_category_colors(40)[:3]
    assert generate_category_colors(0) == []


def test_generate_category_colors_rejects_negative_count() -> None:
    with pytest.raises(ValueError):
        generate_category_colors(-1)


def test_percentage_of() -> None:
    assert percentage_of(50, 200) == Decimal("25.0")
    assert percentage_of(Decimal("12.34"), 0) == 0
    assert percentage_of(1, 3) == Decimal("33.3")
    assert percentage_of(2, 3) == Decimal("66.7")
    assert percentage_of(Decimal("0.05"), Decimal("1000")) == Decimal("0.0")


def test_totals_from_prefetched_expenses() -> None:
    expenses = [
        _expense("Food", 350, date(2024, 1, 2)),
        _expense("Travel", 45000, date(2024, 1, 1)),
        _expense("Food", 1250, date(2024, 1, 2)),
        _expense("Bills", 1600, date(2024, 1, 4)),
    ]

    assert grand_total(expenses) == Decimal("482.00")
    assert grand_total([]) == Decimal("0")
    assert category_totals(expenses) == [
        CategoryTotal(category="Travel", total=Decimal("450.00")),
        CategoryTotal(category="Bills", total=Decimal("16.00")),
        CategoryTotal(category="Food", total=Decimal("16.00")),
    ]
    assert daily_totals(expenses) == [
        DailyTotal(date=date(2024, 1, 1), total=Decimal("450.00")),
        DailyTotal(date=date(2024, 1, 2), total=Decimal("16.00")),
        DailyTotal(date=date(2024, 1, 4), total=Decimal("16.00")),
    ]


def test_category_breakdown_adds_percent_and_color() -> None:
    totals = [
        CategoryTotal(category="Food", total=Decimal("75.00")),
        CategoryTotal(category="Bills", total=Decimal("25.00")),
    ]

    slices = category_breakdown(totals)

    assert [(s.category, s.percent, s.color) for s in slices] == [
        ("Food", Decimal("75.0"), CATEGORY_PALETTE[0]),
        ("Bills", Decimal("25.0"), CATEGORY_PALETTE[1]),
    ]
    assert category_breakdown([]) == []


@pytest.mark.parametrize("seed", range(25))
def test_fill_date_gaps_holds_for_sparse_unsorted_inputs(seed: int) -> None:
    rng = random.Random(seed)
    origin = date(2023, 11, 20) + timedelta(days=rng.randint(0, 400))
    span = rng.randint(0, 120)
    samples = [
        DailyTotal(
            date=origin + timedelta(days=rng.randint(0, span)),
            total=Decimal(rng.randint(1, 50000)).scaleb(-2),
        )
        for _ in range(rng.randint(1, 15))
    ]
    rng.shuffle(samples)

    series = fill_date_gaps(samples)

    first = min(s.date for s in samples)
    last = max(s.date for s in samples)
    assert len(series) == (last - first).days + 1
    assert series[0].date == first
    assert series[-1].date == last
    for previous, current in zip(series, series[1:]):
        assert current.date - previous.date == timedelta(days=1)

    expected: dict[date, Decimal] = defaultdict(Decimal)
    for sample in samples:
        expected[sample.date] += sample.total
    for row in series:
        assert row.total == expected.get(row.date, Decimal("0"))
    assert sum((row.total for row in series), Decimal("0")) == sum(
        (s.total for s in samples), Decimal("0")
    )

"""Load sample expenses spread over the last four weeks.

Usage: ``python seed.py [--keep-existing]``. Without ``--keep-existing`` the
``expenses`` table is emptied first.
"""

import argparse
import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.orm import Session

from database import session_scope
from models import Expense, amount_to_cents
from periods import local_today

logger = logging.getLogger(__name__)

# (description, amount, category, days ago)
SAMPLE_EXPENSES: tuple[tuple[str, str, str, int], ...] = (
    ("Morning coffee", "3.50", "Food", 0),
    ("Bus ticket", "2.75", "Transportation", 0),
    ("Sandwich lunch", "8.95", "Food", 0),
    ("Coffee at Starbucks", "4.50", "Food", 1),
    ("Uber ride to downtown", "12.30", "Transportation", 1),
    ("Lunch with colleagues", "15.75", "Food", 2),
    ("Movie tickets", "24.00", "Entertainment", 3),
    ("Grocery shopping", "85.40", "Food", 4),
    ("Gas for car", "45.20", "Transportation", 5),
    ("New shirt", "29.99", "Shopping", 6),
    ("Electricity bill", "120.50", "Bills", 7),
    ("Doctor visit", "150.00", "Healthcare", 8),
    ("Online course", "199.99", "Education", 9),
    ("Flight to NYC", "450.00", "Travel", 10),
    ("Hotel booking", "180.00", "Travel", 10),
    ("Gym membership", "49.99", "Healthcare", 12),
    ("Phone bill", "85.00", "Bills", 13),
    ("Books from Amazon", "45.60", "Education", 14),
    ("Concert tickets", "120.00", "Entertainment", 15),
    ("Car maintenance", "200.00", "Transportation", 16),
    ("Weekend groceries", "95.30", "Food", 17),
    ("Netflix subscription", "15.99", "Entertainment", 18),
    ("Coffee beans", "18.50", "Food", 19),
    ("Parking fee", "8.00", "Transportation", 20),
    ("Haircut", "35.00", "Other", 21),
    ("Birthday gift", "75.00", "Shopping", 22),
    ("Internet bill", "65.00", "Bills", 23),
    ("Medication", "25.00", "Healthcare", 24),
    ("Taxi ride", "18.50", "Transportation", 25),
    ("Office supplies", "32.40", "Other", 26),
    ("Weekend brunch", "28.75", "Food", 27),
    ("Streaming service", "12.99", "Entertainment", 28),
)


def seed_expenses(
    session: Session, *, today: Optional[date] = None, replace: bool = True
) -> int:
    today = today or local_today()
    if replace:
        session.execute(delete(Expense))
    for description, amount, category, days_ago in SAMPLE_EXPENSES:
        session.add(
            Expense(
                description=description,
                amount_cents=amount_to_cents(Decimal(amount)),
                category=category,
                date=today - timedelta(days=days_ago),
            )
        )
    session.commit()
    return len(SAMPLE_EXPENSES)


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--keep-existing",
        action="store_true",
        help="append sample rows instead of replacing the table contents",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    with session_scope() as session:
        count = seed_expenses(session, replace=not args.keep_existing)
    logger.info(f"seed_complete: inserted={count} replaced={not args.keep_existing}")


if __name__ == "__main__":
    main()

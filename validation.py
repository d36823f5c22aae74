"""Form validation for expense submissions.

Validation is a pure function of the submitted fields and "today". Every field
is checked independently, so a submission with several bad fields reports all
of them at once. Persistence is the caller's job and only happens when
``ValidationResult.is_valid`` is true.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Mapping, Optional

from models import CATEGORY_MAX_LENGTH, DESCRIPTION_MAX_LENGTH
from periods import local_today
from schemas import ExpenseIn

SUGGESTED_CATEGORIES = (
    "Food",
    "Transportation",
    "Entertainment",
    "Shopping",
    "Bills",
    "Healthcare",
    "Education",
    "Travel",
    "Other",
)

# decimal(10,2)
MAX_AMOUNT = Decimal("100000000")

FORM_FIELDS = ("description", "amount", "category", "date")

# "1,234" or "12,345,678": a comma used for grouping, not as a decimal point.
_GROUPED_THOUSANDS = re.compile(r"\d{1,3}(,\d{3})+")


@dataclass
class ValidationResult:
    data: Optional[ExpenseIn] = None
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors


class AmbiguousAmount(ValueError):
    pass


def parse_amount(value: str) -> Decimal:
    clean = (
        value.strip()
        .replace("€", "")
        .replace("₹", "")
        .replace("$", "")
        .replace(" ", "")
    )
    if _GROUPED_THOUSANDS.fullmatch(clean):
        raise AmbiguousAmount(f"Ambiguous amount: {value!r}")
    clean = clean.replace(",", ".")
    if clean.count(".") > 1:
        parts = clean.split(".")
        clean = "".join(parts[:-1]) + "." + parts[-1]
    try:
        amount = Decimal(clean)
        if not amount.is_finite():
            raise ValueError("Invalid amount")
        return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValueError("Invalid amount") from exc


def _text(raw: Mapping[str, Optional[str]], name: str) -> str:
    value = raw.get(name)
    return value.strip() if isinstance(value, str) else ""


def validate_expense_form(
    raw: Mapping[str, Optional[str]], *, today: Optional[date] = None
) -> ValidationResult:
    errors: dict[str, str] = {}

    description = _text(raw, "description")
    if not description:
        errors["description"] = "Description is required"
    elif len(description) > DESCRIPTION_MAX_LENGTH:
        errors["description"] = (
            f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters"
        )

    amount: Optional[Decimal] = None
    amount_raw = _text(raw, "amount")
    if not amount_raw:
        errors["amount"] = "Amount is required"
    else:
        try:
            amount = parse_amount(amount_raw)
        except AmbiguousAmount:
            errors["amount"] = "Amount must not use a comma as a thousands separator"
        except ValueError:
            errors["amount"] = "Amount must be a positive number"
        else:
            if amount <= 0:
                errors["amount"] = "Amount must be a positive number"
            elif amount >= MAX_AMOUNT:
                errors["amount"] = "Amount is too large"

    category = _text(raw, "category")
    if not category:
        errors["category"] = "Category is required"
    elif len(category) > CATEGORY_MAX_LENGTH:
        errors["category"] = (
            f"Category must be at most {CATEGORY_MAX_LENGTH} characters"
        )

    expense_date: Optional[date] = None
    date_raw = _text(raw, "date")
    if not date_raw:
        errors["date"] = "Date is required"
    else:
        try:
            expense_date = date.fromisoformat(date_raw)
        except ValueError:
            errors["date"] = "Date must be a valid date"
        else:
            # Whole calendar days: anything on today's date is still allowed.
            if expense_date > (today or local_today()):
                errors["date"] = "Date cannot be in the future"

    if errors:
        return ValidationResult(errors=errors)
    return ValidationResult(
        data=ExpenseIn(
            description=description,
            amount=amount,
            category=category,
            date=expense_date,
        )
    )


def form_values(raw: Mapping[str, Optional[str]]) -> dict[str, str]:
    """Previously entered values, echoed back when a form is rejected."""
    return {name: str(raw.get(name) or "") for name in FORM_FIELDS}

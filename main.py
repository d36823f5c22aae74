import logging
import tomllib

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response
from sqlalchemy.orm import Session

from aggregation import generate_category_colors
from config import get_settings
from csrf import generate_csrf_token, validate_csrf_token
from database import get_db
from periods import Period, ensure_ordered, parse_iso_date, resolve_period
from schemas import (
    CategoryTotal,
    DailyTotal,
    DashboardOut,
    DeleteResult,
    ExpenseOut,
    MonthlyTotal,
    TotalOut,
)
from services import ExpenseFilters, ExpenseService, ExpenseWriteError, MetricsService
from validation import SUGGESTED_CATEGORIES, form_values, validate_expense_form

logger = logging.getLogger(__name__)

CREATE_FAILED_MESSAGE = "Failed to create expense. Please try again."
UPDATE_FAILED_MESSAGE = "Failed to update expense. Please try again."
DELETE_FAILED_MESSAGE = "Failed to delete expense. Please try again."


def _load_app_version() -> str:
    try:
        with open("pyproject.toml", "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return "unknown"
    return str(data.get("project", {}).get("version", "unknown"))


APP_VERSION = _load_app_version()

app = FastAPI(title="Expense Tracker", version=APP_VERSION)


@app.on_event("startup")
def startup_event():
    logging.basicConfig(level=get_settings().log_level)


def filters_from_request(request: Request) -> ExpenseFilters:
    params = request.query_params
    try:
        filters = ExpenseFilters(
            category=params.get("category"),
            start=parse_iso_date(params.get("startDate")),
            end=parse_iso_date(params.get("endDate")),
        )
        ensure_ordered(filters.start, filters.end)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return filters


def period_from_request(request: Request) -> Period:
    params = request.query_params
    try:
        return resolve_period(
            params.get("period"), params.get("start"), params.get("end")
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


async def _checked_form(request: Request):
    form = await request.form()
    if not validate_csrf_token(form.get("csrf_token")):
        raise HTTPException(status_code=400, detail="Invalid CSRF token")
    return form


def _after_write(request: Request) -> Response:
    headers = {"HX-Trigger": "expenses-changed"}
    if request.headers.get("HX-Request"):
        return Response(status_code=204, headers=headers)
    return RedirectResponse(
        url=request.app.url_path_for("dashboard"), status_code=303, headers=headers
    )


def _rejected(errors: dict[str, str], form, status_code: int = 422) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"errors": errors, "values": form_values(form)},
    )


@app.get("/", response_model=DashboardOut)
def dashboard(request: Request, db: Session = Depends(get_db)):
    filters = filters_from_request(request)
    data = MetricsService(db).dashboard(filters)
    data["expenses"] = [ExpenseOut.model_validate(e) for e in data["expenses"]]
    return data


@app.get("/api/expenses", response_model=list[ExpenseOut])
def api_expenses(request: Request, db: Session = Depends(get_db)):
    filters = filters_from_request(request)
    return ExpenseService(db).list(filters)


@app.get("/api/expenses/{expense_id}", response_model=ExpenseOut)
def api_expense(expense_id: int, db: Session = Depends(get_db)):
    expense = ExpenseService(db).get(expense_id)
    if expense is None:
        raise HTTPException(status_code=404, detail="Expense not found")
    return expense


@app.get("/api/total", response_model=TotalOut)
def api_total(db: Session = Depends(get_db)):
    return TotalOut(total=ExpenseService(db).sum_all())


@app.get("/api/categories")
def api_categories(db: Session = Depends(get_db)) -> dict[str, list[str]]:
    return {
        "categories": ExpenseService(db).distinct_categories(),
        "suggested": list(SUGGESTED_CATEGORIES),
    }


@app.get("/api/category-totals", response_model=list[CategoryTotal])
def api_category_totals(db: Session = Depends(get_db)):
    return ExpenseService(db).category_totals()


@app.get("/api/monthly-totals", response_model=list[MonthlyTotal])
def api_monthly_totals(db: Session = Depends(get_db)):
    return ExpenseService(db).monthly_totals()


@app.get("/api/daily-totals", response_model=list[DailyTotal])
def api_daily_totals(request: Request, db: Session = Depends(get_db)):
    period = period_from_request(request)
    return MetricsService(db).daily_series(period)


@app.get("/api/category-colors")
def api_category_colors(
    count: int = Query(..., ge=0, le=1000),
) -> dict[str, list[str]]:
    return {"colors": generate_category_colors(count)}


@app.get("/api/csrf-token")
def api_csrf_token() -> dict[str, str]:
    return {"csrf_token": generate_csrf_token()}


@app.post("/expenses")
async def create_expense(request: Request, db: Session = Depends(get_db)):
    form = await _checked_form(request)
    result = validate_expense_form(form)
    if not result.is_valid:
        return _rejected(result.errors, form)
    try:
        ExpenseService(db).create(result.data)
    except ExpenseWriteError:
        logger.exception("expense_create_failed")
        return _rejected({"general": CREATE_FAILED_MESSAGE}, form, status_code=500)
    return _after_write(request)


@app.post("/expenses/{expense_id}/delete", response_model=DeleteResult)
async def delete_expense(
    expense_id: int, request: Request, db: Session = Depends(get_db)
):
    await _checked_form(request)
    try:
        deleted = ExpenseService(db).delete(expense_id)
    except ExpenseWriteError:
        logger.exception(f"expense_delete_failed: id={expense_id}")
        return JSONResponse(
            status_code=500,
            content=DeleteResult(
                success=False, message=DELETE_FAILED_MESSAGE
            ).model_dump(),
        )
    if deleted:
        return DeleteResult(success=True, message="Expense deleted successfully")
    return DeleteResult(success=False, message="Expense not found")


@app.post("/expenses/{expense_id}")
async def update_expense(
    expense_id: int, request: Request, db: Session = Depends(get_db)
):
    form = await _checked_form(request)
    result = validate_expense_form(form)
    if not result.is_valid:
        return _rejected(result.errors, form)
    try:
        expense = ExpenseService(db).update(expense_id, result.data)
    except ExpenseWriteError:
        logger.exception(f"expense_update_failed: id={expense_id}")
        return _rejected({"general": UPDATE_FAILED_MESSAGE}, form, status_code=500)
    if expense is None:
        raise HTTPException(status_code=404, detail="Expense not found")
    return _after_write(request)


def main():
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=False)


if __name__ == "__main__":
    main()

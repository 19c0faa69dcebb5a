"""Transaction endpoints: CRUD, filtered listing, and summaries.

All routes resolve the caller through ``get_owner_id`` before touching the
store, and pass only that user's id down. No route accepts an owner id from
the request.
"""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_owner_id, get_transaction_service
from app.config import settings
from app.schemas.transaction import (
    MonthlySummaryResponse,
    MonthSummaryStats,
    SummaryResponse,
    TransactionCreate,
    TransactionDeleteResult,
    TransactionListResult,
    TransactionResponse,
    TransactionUpdate,
)
from app.services.transaction import TransactionService

router = APIRouter(prefix="/transactions", tags=["transactions"])

NOT_FOUND_RESPONSE = {404: {"description": "Transaction not found"}}


@router.get(
    "",
    response_model=TransactionListResult,
    summary="List transactions with filters",
    description="""
    List the authenticated user's transactions, newest first
    (by date, then by creation time).

    ## Filters
    - **kind**: `income`, `expense` or `all` (case-insensitive)
    - **category**: Case-insensitive substring match on the category
    - **dateFrom**, **dateTo**: Inclusive date range

    ## Pagination
    - **limit** (default 100) and **offset**, or **page** (1-indexed)
    """,
)
async def list_transactions(
    kind: Annotated[str | None, Query(description="income, expense or all")] = None,
    category: Annotated[str | None, Query(description="Category substring")] = None,
    date_from: Annotated[
        date | None, Query(alias="dateFrom", description="Filter from date (inclusive)")
    ] = None,
    date_to: Annotated[
        date | None, Query(alias="dateTo", description="Filter to date (inclusive)")
    ] = None,
    limit: Annotated[
        int, Query(ge=1, le=settings.max_page_size, description="Items per page")
    ] = settings.default_page_size,
    offset: Annotated[int, Query(ge=0, description="Items to skip")] = 0,
    page: Annotated[
        int | None, Query(ge=1, description="Page number (overrides offset)")
    ] = None,
    owner_id: UUID = Depends(get_owner_id),
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionListResult:
    result = await service.list_transactions(
        owner_id,
        kind=kind,
        category=category,
        date_from=date_from,
        date_to=date_to,
        limit=limit,
        offset=offset,
        page=page,
    )
    return TransactionListResult(
        count=result.count,
        total=result.total,
        total_pages=result.total_pages,
        current_page=result.current_page,
        data=[TransactionResponse.model_validate(txn) for txn in result.items],
    )


@router.get(
    "/summary",
    response_model=SummaryResponse,
    summary="Get balance summary",
    description="""
    All-time income, expense and balance, plus the current calendar month's
    income, expense, balance and expense ratio.

    The expense ratio is month expense as a percentage of month income, and
    is 0 for a month without income.
    """,
)
async def get_summary(
    owner_id: UUID = Depends(get_owner_id),
    service: TransactionService = Depends(get_transaction_service),
) -> SummaryResponse:
    summary = await service.get_summary(owner_id)
    return SummaryResponse(
        total_balance=summary.total_balance,
        total_income=summary.total_income,
        total_expense=summary.total_expense,
        month_income=summary.month_income,
        month_expense=summary.month_expense,
        month_balance=summary.month_balance,
        expense_ratio=summary.expense_ratio,
    )


@router.get(
    "/monthly",
    response_model=MonthlySummaryResponse,
    summary="Get monthly breakdown",
    description="Totals and transactions for one calendar month (default: current month).",
)
async def get_monthly_summary(
    year: Annotated[int | None, Query(ge=1, le=9999, description="Year")] = None,
    month: Annotated[int | None, Query(ge=1, le=12, description="Month (1-12)")] = None,
    owner_id: UUID = Depends(get_owner_id),
    service: TransactionService = Depends(get_transaction_service),
) -> MonthlySummaryResponse:
    monthly = await service.get_monthly_summary(owner_id, year=year, month=month)
    return MonthlySummaryResponse(
        year=monthly.year,
        month=monthly.month,
        summary=MonthSummaryStats(
            month_income=monthly.month_income,
            month_expense=monthly.month_expense,
            month_balance=monthly.month_balance,
            expense_ratio=monthly.expense_ratio,
            transaction_count=monthly.transaction_count,
        ),
        transactions=[TransactionResponse.model_validate(txn) for txn in monthly.transactions],
    )


@router.get(
    "/{transaction_id}",
    response_model=TransactionResponse,
    summary="Get a transaction",
    responses=NOT_FOUND_RESPONSE,
)
async def get_transaction(
    transaction_id: UUID,
    owner_id: UUID = Depends(get_owner_id),
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionResponse:
    txn = await service.get_transaction(owner_id, transaction_id)
    return TransactionResponse.model_validate(txn)


@router.post(
    "",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a transaction",
    description="""
    Record an income or expense. `title`, `amount`, `kind`, `category` and
    `date` are required; `amount` must be greater than 0 and `category` must
    belong to the kind's category list (see `GET /api/v1/categories`).
    """,
    responses={400: {"description": "Validation error"}},
)
async def create_transaction(
    payload: TransactionCreate,
    owner_id: UUID = Depends(get_owner_id),
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionResponse:
    txn = await service.create_transaction(owner_id, payload)
    return TransactionResponse.model_validate(txn)


@router.put(
    "/{transaction_id}",
    response_model=TransactionResponse,
    summary="Update a transaction",
    description="Partial update: only the supplied fields change, each re-validated.",
    responses={400: {"description": "Validation error"}, **NOT_FOUND_RESPONSE},
)
async def update_transaction(
    transaction_id: UUID,
    payload: TransactionUpdate,
    owner_id: UUID = Depends(get_owner_id),
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionResponse:
    txn = await service.update_transaction(owner_id, transaction_id, payload)
    return TransactionResponse.model_validate(txn)


@router.delete(
    "/{transaction_id}",
    response_model=TransactionDeleteResult,
    summary="Delete a transaction",
    description="Hard delete. Returns the id and title of the removed transaction.",
    responses=NOT_FOUND_RESPONSE,
)
async def delete_transaction(
    transaction_id: UUID,
    owner_id: UUID = Depends(get_owner_id),
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionDeleteResult:
    removed = await service.delete_transaction(owner_id, transaction_id)
    return TransactionDeleteResult(**removed)

"""Transaction request/response schemas.

Request models do the per-field checks (presence, types, trimming, bounds).
The cross-field rule that a category must belong to the kind's taxonomy lives
in the service, because on update the effective kind may come from the stored
record.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any
from uuid import UUID

from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    StringConstraints,
    field_validator,
)
from pydantic.alias_generators import to_camel

from app.categorization.registry import TransactionKind


def _coerce_date(value: Any) -> Any:
    """Accept datetimes (objects or ISO strings) and keep only their day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and len(value.strip()) > 10:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00")).date()
    return value


def _lower_kind(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower()
    return value


Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
CategoryLabel = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)
]
Amount = Annotated[Decimal, Field(gt=0, max_digits=12, decimal_places=2)]
Kind = Annotated[TransactionKind, BeforeValidator(_lower_kind)]
TxnDate = Annotated[date, BeforeValidator(_coerce_date)]

# Decimal amounts go over the wire as JSON numbers, not strings.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    """Response base: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


# Request schemas


class TransactionCreate(BaseModel):
    """Fields required to record a transaction."""

    title: Title
    amount: Amount
    kind: Kind = Field(validation_alias=AliasChoices("kind", "type"))
    category: CategoryLabel
    txn_date: TxnDate = Field(validation_alias=AliasChoices("date", "txn_date"))


class TransactionUpdate(BaseModel):
    """Partial update. Only fields present in the payload are changed."""

    title: Title | None = None
    amount: Amount | None = None
    kind: Kind | None = Field(default=None, validation_alias=AliasChoices("kind", "type"))
    category: CategoryLabel | None = None
    txn_date: TxnDate | None = Field(
        default=None, validation_alias=AliasChoices("date", "txn_date")
    )

    @field_validator("title", "amount", "kind", "category", "txn_date", mode="before")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        # Defaults are not validated, so this only fires on an explicit null.
        if value is None:
            raise ValueError("may not be null")
        return value

    def changes(self) -> dict[str, Any]:
        """Fields explicitly supplied by the caller, keyed by column name."""
        return self.model_dump(exclude_unset=True)


# Response schemas


class TransactionResponse(CamelModel):
    id: UUID
    title: str
    amount: Money
    kind: str
    category: str
    txn_date: date = Field(alias="date")
    user_id: UUID = Field(alias="owner")
    created_at: datetime
    updated_at: datetime


class TransactionListResult(CamelModel):
    """One page of transactions with pagination metadata."""

    count: int = Field(description="Number of records in this page")
    total: int = Field(description="Number of records matching the filter")
    total_pages: int
    current_page: int
    data: list[TransactionResponse]


class TransactionDeleteResult(CamelModel):
    id: UUID
    title: str


class SummaryResponse(CamelModel):
    """All-time balance plus the current calendar month."""

    total_balance: Money
    total_income: Money
    total_expense: Money
    month_income: Money
    month_expense: Money
    month_balance: Money
    expense_ratio: Money = Field(
        description="Month expense as a percentage of month income; 0 when there is no income"
    )


class MonthSummaryStats(CamelModel):
    month_income: Money
    month_expense: Money
    month_balance: Money
    expense_ratio: Money
    transaction_count: int


class MonthlySummaryResponse(CamelModel):
    year: int
    month: int
    summary: MonthSummaryStats
    transactions: list[TransactionResponse]


class CategoriesResponse(BaseModel):
    income: list[str]
    expense: list[str]

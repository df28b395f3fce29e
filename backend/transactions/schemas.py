from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import List, Optional, Literal, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from models.transaction_model import is_debt_type


TransactionType = Literal["income", "expense", "borrow", "lend"]
TransactionStatus = Literal["pending", "completed", "cancelled"]


def _naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def debt_field_errors(txn_type: Optional[str], contact_person: Optional[str], due_date: Any) -> List[dict]:
    """Borrow/lend rows must name a counterparty and a due date."""
    if not is_debt_type(txn_type):
        return []
    errors = []
    if not (contact_person or "").strip():
        errors.append({
            "path": "contactPerson",
            "msg": "Contact person is required for borrow/lend transactions",
        })
    if due_date is None:
        errors.append({
            "path": "dueDate",
            "msg": "Due date is required for borrow/lend transactions",
        })
    return errors


# Numeric(12, 2) holds at most ten integer digits.
MAX_AMOUNT = 10 ** 10


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _TransactionFields(_CamelModel):

    @field_validator("amount", mode="before", check_fields=False)
    @classmethod
    def reject_bool_amount(cls, v):
        if isinstance(v, bool):
            raise ValueError("Amount must be a number")
        return v

    @field_validator("date", "due_date", mode="before", check_fields=False)
    @classmethod
    def require_iso_string(cls, v):
        if v is not None and not isinstance(v, str):
            raise ValueError("Please provide a valid date")
        return v

    @field_validator("category", "description", "contact_person", "contact_phone", "location", "receipt", mode="before", check_fields=False)
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("date", "due_date", check_fields=False)
    @classmethod
    def to_naive_utc(cls, v):
        return _naive_utc(v)

    @field_validator("amount", check_fields=False)
    @classmethod
    def round_amount(cls, v):
        return round(v, 2) if v is not None else v

    @field_validator("tags", check_fields=False)
    @classmethod
    def strip_tags(cls, v):
        if v is None:
            return v
        return [t.strip() for t in v if t and t.strip()]


class TransactionCreateSchema(_TransactionFields):
    type: TransactionType
    category: str = Field(..., min_length=1, max_length=120)
    amount: float = Field(..., ge=0.01, lt=MAX_AMOUNT, allow_inf_nan=False)
    description: str = Field(..., min_length=1, max_length=500)
    date: Optional[datetime] = None
    status: Optional[TransactionStatus] = None

    contact_person: Optional[str] = Field(None, max_length=120)
    contact_phone: Optional[str] = Field(None, max_length=40)
    due_date: Optional[datetime] = None

    tags: Optional[List[str]] = None
    location: Optional[str] = Field(None, max_length=255)
    receipt: Optional[str] = Field(None, max_length=500)


# Columns that may be set but never cleared.
REQUIRED_ON_UPDATE = ("type", "category", "amount", "description", "date", "status")


class TransactionUpdateSchema(TransactionCreateSchema):
    type: Optional[TransactionType] = None
    category: Optional[str] = Field(None, min_length=1, max_length=120)
    amount: Optional[float] = Field(None, ge=0.01, lt=MAX_AMOUNT, allow_inf_nan=False)
    description: Optional[str] = Field(None, min_length=1, max_length=500)

    @field_validator(*REQUIRED_ON_UPDATE, mode="before")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be empty")
        return v


class TransactionFilterSchema(_CamelModel):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
    type: Optional[TransactionType] = None
    category: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    search: Optional[str] = None
    is_settled: Optional[bool] = None

    @model_validator(mode="before")
    @classmethod
    def drop_blank(cls, data):
        # ?category=&search= means "no filter", not "match empty"
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if not (isinstance(v, str) and not v.strip())}
        return data

    @field_validator("category", "search")
    @classmethod
    def strip_terms(cls, v):
        return v.strip() if v else v

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_day(cls, v, info):
        # A bare YYYY-MM-DD end date covers that whole day.
        if isinstance(v, str) and len(v.strip()) == 10:
            day = date.fromisoformat(v.strip())
            bound = time.max if info.field_name == "end_date" else time.min
            return datetime.combine(day, bound)
        return v

    @field_validator("start_date", "end_date")
    @classmethod
    def to_naive_utc(cls, v):
        return _naive_utc(v)

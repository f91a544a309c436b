# app/schemas/expense.py

import enum
from datetime import date
from decimal import Decimal
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field, model_validator

from app.models.expense import Expense
from app.schemas.error_info import ErrorInfo

T = TypeVar("T")


class CreateExpenseRequest(BaseModel):
    amount: Decimal = Field(gt=0)
    expense_date: date
    category_id: int = Field(gt=0)
    description: Optional[str] = None
    user_id: Optional[int] = None


class ReviewExpenseRequest(BaseModel):
    expense_id: int
    reviewer_id: int


class ReviewerPayload(BaseModel):
    reviewer_id: Optional[int] = None


class ExpenseCreated(BaseModel):
    expense_id: int


class ExpenseFilter(BaseModel):
    category: Optional[str] = None
    status: Optional[str] = None
    search_text: Optional[str] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None

    @model_validator(mode="after")
    def normalise_blanks(self):
        # form/query inputs send "" for "no filter"
        for name in ("category", "status", "search_text"):
            value = getattr(self, name)
            if value is not None and not value.strip():
                setattr(self, name, None)
        return self

    def matches_text(self, expense: Expense) -> bool:
        if not self.search_text:
            return True
        needle = self.search_text.lower()
        haystacks = (expense.description, expense.category_name, expense.user_name)
        return any(h and needle in h.lower() for h in haystacks)

    def matches_dates(self, expense: Expense) -> bool:
        if self.from_date and expense.expense_date < self.from_date:
            return False
        if self.to_date and expense.expense_date > self.to_date:
            return False
        return True

    def matches(self, expense: Expense) -> bool:
        if self.category and (expense.category_name or "").lower() != self.category.lower():
            return False
        if self.status and (expense.status_name or "").lower() != self.status.lower():
            return False
        return self.matches_text(expense) and self.matches_dates(expense)


class ResultStatus(str, enum.Enum):
    ok = "ok"
    degraded = "degraded"
    failed = "failed"


class OperationResult(BaseModel, Generic[T]):
    """Outcome of one data-access call.

    ``degraded`` means ``data`` holds sample data because storage failed;
    ``failed`` means there was nothing sensible to return.
    """

    status: ResultStatus
    data: T
    error: Optional[ErrorInfo] = None

    @property
    def ok(self) -> bool:
        return self.status == ResultStatus.ok

    @property
    def degraded(self) -> bool:
        return self.status == ResultStatus.degraded

    @classmethod
    def success(cls, data):
        return cls(status=ResultStatus.ok, data=data)

    @classmethod
    def fallback(cls, data, error: ErrorInfo):
        return cls(status=ResultStatus.degraded, data=data, error=error)

    @classmethod
    def failure(cls, data, error: ErrorInfo):
        return cls(status=ResultStatus.failed, data=data, error=error)

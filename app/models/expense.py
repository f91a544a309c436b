# app/models/expense.py

import enum
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, computed_field

from app.services.amount_service import format_amount, to_major_units


class ExpenseStatusName(str, enum.Enum):
    draft = "Draft"
    submitted = "Submitted"
    approved = "Approved"
    rejected = "Rejected"


# Statuses that carry ReviewedBy / ReviewedAt
REVIEWED_STATUSES = {ExpenseStatusName.approved.value, ExpenseStatusName.rejected.value}
REVIEWED_STATUS_IDS = {3, 4}


class ExpenseCategory(BaseModel):
    category_id: int
    category_name: str
    is_active: bool = True

    class Config:
        frozen = True


class ExpenseStatus(BaseModel):
    status_id: int
    status_name: str

    class Config:
        frozen = True


class Expense(BaseModel):
    expense_id: int

    user_id: int
    user_name: Optional[str] = None

    category_id: int
    category_name: Optional[str] = None

    status_id: int
    status_name: Optional[str] = None

    # stored in pence / cents
    amount_minor: int = Field(ge=0)
    currency: str = "GBP"

    expense_date: date
    description: Optional[str] = None
    receipt_file: Optional[str] = None

    submitted_at: Optional[datetime] = None
    reviewed_by: Optional[int] = None
    reviewer_name: Optional[str] = None
    reviewed_at: Optional[datetime] = None

    created_at: datetime

    class Config:
        frozen = True

    @computed_field
    @property
    def amount(self) -> Decimal:
        return to_major_units(self.amount_minor)

    @computed_field
    @property
    def formatted_amount(self) -> str:
        return format_amount(self.amount_minor, self.currency)

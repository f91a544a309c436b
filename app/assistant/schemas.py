# app/assistant/schemas.py
from datetime import date
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"] = "user"
    content: str = ""


class ChatRequest(BaseModel):
    message: str = Field(min_length=1)
    history: Optional[List[ChatMessage]] = None


class ChatResponse(BaseModel):
    message: str
    success: bool
    error: Optional[str] = None


class ChatStatus(BaseModel):
    configured: bool


# ---- tool arguments


class GetExpensesArgs(BaseModel):
    category: Optional[str] = None
    status: Optional[str] = None


class CreateExpenseArgs(BaseModel):
    amount: Decimal = Field(gt=0)
    category_id: int = Field(gt=0)
    expense_date: date
    description: Optional[str] = None


class ExpenseIdArgs(BaseModel):
    expense_id: int

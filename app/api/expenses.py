# app/api/expenses.py

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.core.config import settings
from app.models.expense import Expense
from app.schemas.error_info import ErrorInfo
from app.schemas.expense import (
    CreateExpenseRequest,
    ExpenseCreated,
    ExpenseFilter,
    ReviewerPayload,
    ReviewExpenseRequest,
)
from app.services.expense_service import ExpenseService, get_expense_service

router = APIRouter(tags=["Expenses"])

SAMPLE_DATA_HEADER = "X-Sample-Data"


def flag_sample_data(response: Response, degraded: bool) -> None:
    response.headers[SAMPLE_DATA_HEADER] = "true" if degraded else "false"


def _resolve_actor(explicit_id: Optional[int], default_id: int, role: str) -> int:
    if explicit_id is not None:
        return explicit_id
    if settings.DEFAULT_ACTORS_ENABLED:
        return default_id
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=f"{role} is required",
    )


def _failure_detail(error: Optional[ErrorInfo], fallback: str) -> dict:
    if error is None:
        return {"error": fallback}
    return {"error": error.message, "detail": error.detailed_message}


# --------------------------------------------------
# LIST
# --------------------------------------------------
@router.get("", response_model=List[Expense])
def list_expenses(
    response: Response,
    category: Optional[str] = None,
    status_name: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = None,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    service: ExpenseService = Depends(get_expense_service),
):
    result = service.list_expenses(
        ExpenseFilter(
            category=category,
            status=status_name,
            search_text=search,
            from_date=from_date,
            to_date=to_date,
        )
    )
    flag_sample_data(response, result.degraded)
    return result.data


@router.get("/pending", response_model=List[Expense])
def list_pending_expenses(
    response: Response,
    search: Optional[str] = None,
    service: ExpenseService = Depends(get_expense_service),
):
    result = service.list_pending_expenses(search_text=search)
    flag_sample_data(response, result.degraded)
    return result.data


# --------------------------------------------------
# GET ONE
# --------------------------------------------------
@router.get("/{expense_id}", response_model=Expense)
def get_expense(
    expense_id: int,
    response: Response,
    service: ExpenseService = Depends(get_expense_service),
):
    result = service.get_expense_by_id(expense_id)
    if result.data is None:
        raise HTTPException(status_code=404, detail="Expense not found")
    flag_sample_data(response, result.degraded)
    return result.data


# --------------------------------------------------
# CREATE (DRAFT)
# --------------------------------------------------
@router.post("", response_model=ExpenseCreated, status_code=status.HTTP_201_CREATED)
def create_expense(
    payload: CreateExpenseRequest,
    service: ExpenseService = Depends(get_expense_service),
):
    user_id = _resolve_actor(payload.user_id, settings.DEFAULT_SUBMITTER_ID, "user_id")
    try:
        expense_id = service.create_expense(payload, user_id=user_id)
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=_failure_detail(service.last_error, "Failed to create expense"),
        )
    return ExpenseCreated(expense_id=expense_id)


# --------------------------------------------------
# LIFECYCLE
# --------------------------------------------------
@router.post("/{expense_id}/submit")
def submit_expense(
    expense_id: int,
    service: ExpenseService = Depends(get_expense_service),
):
    result = service.submit_expense(expense_id)
    if not result.data:
        raise HTTPException(
            status_code=400,
            detail=_failure_detail(result.error, "Failed to submit expense"),
        )
    return {"message": "Expense submitted successfully"}


@router.post("/{expense_id}/approve")
def approve_expense(
    expense_id: int,
    payload: Optional[ReviewerPayload] = None,
    service: ExpenseService = Depends(get_expense_service),
):
    reviewer_id = _resolve_actor(payload.reviewer_id if payload else None, settings.DEFAULT_REVIEWER_ID, "reviewer_id")
    result = service.approve_expense(
        ReviewExpenseRequest(expense_id=expense_id, reviewer_id=reviewer_id)
    )
    if not result.data:
        raise HTTPException(
            status_code=400,
            detail=_failure_detail(result.error, "Failed to approve expense"),
        )
    return {"message": "Expense approved successfully"}


@router.post("/{expense_id}/reject")
def reject_expense(
    expense_id: int,
    payload: Optional[ReviewerPayload] = None,
    service: ExpenseService = Depends(get_expense_service),
):
    reviewer_id = _resolve_actor(payload.reviewer_id if payload else None, settings.DEFAULT_REVIEWER_ID, "reviewer_id")
    result = service.reject_expense(
        ReviewExpenseRequest(expense_id=expense_id, reviewer_id=reviewer_id)
    )
    if not result.data:
        raise HTTPException(
            status_code=400,
            detail=_failure_detail(result.error, "Failed to reject expense"),
        )
    return {"message": "Expense rejected successfully"}

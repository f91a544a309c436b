from typing import List

from fastapi import APIRouter, Depends, Response

from app.api.expenses import flag_sample_data
from app.db.session import ConnectionProvider, get_connection_provider
from app.models.expense import ExpenseCategory, ExpenseStatus
from app.models.user import User
from app.services.expense_service import ExpenseService, get_expense_service

router = APIRouter(tags=["Reference Data"])


@router.get("/categories", response_model=List[ExpenseCategory])
def get_categories(
    response: Response,
    service: ExpenseService = Depends(get_expense_service),
):
    result = service.list_categories()
    flag_sample_data(response, result.degraded)
    return result.data


@router.get("/statuses", response_model=List[ExpenseStatus])
def get_statuses(
    response: Response,
    service: ExpenseService = Depends(get_expense_service),
):
    result = service.list_statuses()
    flag_sample_data(response, result.degraded)
    return result.data


@router.get("/users", response_model=List[User])
def get_users(
    response: Response,
    service: ExpenseService = Depends(get_expense_service),
):
    result = service.list_users()
    flag_sample_data(response, result.degraded)
    return result.data


@router.get("/diagnostics")
def get_diagnostics(
    service: ExpenseService = Depends(get_expense_service),
    provider: ConnectionProvider = Depends(get_connection_provider),
):
    last_error = service.last_error or provider.last_error
    return {
        "is_connected": provider.is_connected,
        "use_dummy_data": service.use_dummy_data,
        "last_error": last_error.model_dump() if last_error else None,
    }

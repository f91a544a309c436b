import logging
from functools import lru_cache
from typing import Any, Dict, Optional

from app.core.config import settings
from app.core.constants import (
    FALLBACK_CATEGORIES,
    FALLBACK_EXPENSES,
    FALLBACK_STATUSES,
    FALLBACK_USERS,
)
from app.db.procedures import ProcedureGateway
from app.db.session import get_connection_provider
from app.models.expense import (
    REVIEWED_STATUS_IDS,
    REVIEWED_STATUSES,
    Expense,
    ExpenseCategory,
    ExpenseStatus,
    ExpenseStatusName,
)
from app.models.user import User
from app.schemas.error_info import ErrorInfo
from app.schemas.expense import CreateExpenseRequest, ExpenseFilter, OperationResult, ReviewExpenseRequest
from app.services.amount_service import to_minor_units

logger = logging.getLogger(__name__)


# --------------------------------------------------
# ROW MAPPING
# --------------------------------------------------

def _optional(row: Dict[str, Any], column: str):
    # NULL and missing columns both mean "absent"
    return row.get(column)


def map_expense(row: Dict[str, Any], default_currency: str = "GBP") -> Expense:
    status_name = _optional(row, "status_name")
    if status_name:
        reviewed = status_name in REVIEWED_STATUSES
    else:
        reviewed = row["status_id"] in REVIEWED_STATUS_IDS

    return Expense(
        expense_id=row["expense_id"],
        user_id=row["user_id"],
        user_name=_optional(row, "user_name"),
        category_id=row["category_id"],
        category_name=_optional(row, "category_name"),
        status_id=row["status_id"],
        status_name=status_name,
        amount_minor=row["amount_minor"],
        currency=_optional(row, "currency") or default_currency,
        expense_date=row["expense_date"],
        description=_optional(row, "description"),
        receipt_file=_optional(row, "receipt_file"),
        submitted_at=_optional(row, "submitted_at"),
        reviewed_by=_optional(row, "reviewed_by") if reviewed else None,
        reviewer_name=_optional(row, "reviewer_name") if reviewed else None,
        reviewed_at=_optional(row, "reviewed_at") if reviewed else None,
        created_at=row["created_at"],
    )


def map_category(row: Dict[str, Any]) -> ExpenseCategory:
    return ExpenseCategory(
        category_id=row["category_id"],
        category_name=row["category_name"],
        is_active=bool(row.get("is_active", True)),
    )


def map_status(row: Dict[str, Any]) -> ExpenseStatus:
    return ExpenseStatus(status_id=row["status_id"], status_name=row["status_name"])


def map_user(row: Dict[str, Any]) -> User:
    return User(
        user_id=row["user_id"],
        user_name=row["user_name"],
        email=row["email"],
        role_id=row["role_id"],
        role_name=_optional(row, "role_name"),
        manager_id=_optional(row, "manager_id"),
        is_active=bool(row.get("is_active", True)),
    )


# --------------------------------------------------
# SERVICE
# --------------------------------------------------

class ExpenseService:
    """Expense data access over the stored-procedure gateway.

    Reads never raise: when storage fails they return the sample dataset
    wrapped in a ``degraded`` result. ``create_expense`` re-raises because
    there is no sensible id to hand back. Submit / approve / reject report
    failure through ``data=False``.

    ``last_error`` and ``use_dummy_data`` mirror the latest call made by
    any request (last write wins) and only feed banners and diagnostics.
    """

    def __init__(self, gateway: ProcedureGateway, default_currency: str = "GBP"):
        self.gateway = gateway
        self.default_currency = default_currency
        self.last_error: Optional[ErrorInfo] = None
        self.use_dummy_data = False

    # ---- bookkeeping

    def _ok(self, data) -> OperationResult:
        self.use_dummy_data = False
        self.last_error = None
        return OperationResult.success(data)

    def _degraded(self, data, message: str, exc: Exception) -> OperationResult:
        logger.exception("%s, returning sample data", message)
        error = ErrorInfo.from_exception(message, exc)
        self.use_dummy_data = True
        self.last_error = error
        return OperationResult.fallback(data, error)

    def _failed(self, message: str, exc: Exception) -> OperationResult:
        logger.exception(message)
        error = ErrorInfo.from_exception(message, exc)
        self.last_error = error
        return OperationResult.failure(False, error)

    # ---- reads

    def list_expenses(self, expense_filter: Optional[ExpenseFilter] = None) -> OperationResult:
        expense_filter = expense_filter or ExpenseFilter()
        try:
            rows = self.gateway.fetch_all(
                "GetExpenses",
                category_name=expense_filter.category,
                status_name=expense_filter.status,
                search_text=expense_filter.search_text,
            )
            expenses = [map_expense(r, self.default_currency) for r in rows]
            return self._ok([e for e in expenses if expense_filter.matches_dates(e)])
        except Exception as e:
            sample = [x for x in FALLBACK_EXPENSES if expense_filter.matches(x)]
            return self._degraded(sample, "Failed to retrieve expenses from database", e)

    def list_pending_expenses(self, search_text: Optional[str] = None) -> OperationResult:
        search = ExpenseFilter(search_text=search_text)
        try:
            rows = self.gateway.fetch_all("GetPendingExpenses")
            expenses = [map_expense(r, self.default_currency) for r in rows]
            return self._ok([e for e in expenses if search.matches_text(e)])
        except Exception as e:
            sample = [
                x
                for x in FALLBACK_EXPENSES
                if x.status_name == ExpenseStatusName.submitted.value and search.matches_text(x)
            ]
            return self._degraded(sample, "Failed to retrieve pending expenses", e)

    def get_expense_by_id(self, expense_id: int) -> OperationResult:
        try:
            row = self.gateway.fetch_one("GetExpenseById", expense_id=expense_id)
            return self._ok(map_expense(row, self.default_currency) if row else None)
        except Exception as e:
            match = next((x for x in FALLBACK_EXPENSES if x.expense_id == expense_id), None)
            return self._degraded(match, "Failed to retrieve expense", e)

    def list_categories(self) -> OperationResult:
        try:
            rows = self.gateway.fetch_all("GetCategories")
            return self._ok([map_category(r) for r in rows])
        except Exception as e:
            return self._degraded(list(FALLBACK_CATEGORIES), "Failed to retrieve categories", e)

    def list_statuses(self) -> OperationResult:
        try:
            rows = self.gateway.fetch_all("GetStatuses")
            return self._ok([map_status(r) for r in rows])
        except Exception as e:
            return self._degraded(list(FALLBACK_STATUSES), "Failed to retrieve statuses", e)

    def list_users(self) -> OperationResult:
        try:
            rows = self.gateway.fetch_all("GetUsers")
            return self._ok([map_user(r) for r in rows])
        except Exception as e:
            return self._degraded(list(FALLBACK_USERS), "Failed to retrieve users", e)

    # ---- writes

    def create_expense(self, request: CreateExpenseRequest, user_id: int) -> int:
        try:
            new_id = self.gateway.fetch_scalar(
                "CreateExpense",
                user_id=user_id,
                category_id=request.category_id,
                amount_minor=to_minor_units(request.amount),
                expense_date=request.expense_date,
                description=request.description,
            )
            if new_id is None:
                raise ValueError("CreateExpense returned no expense id")
            self.last_error = None
            return int(new_id)
        except Exception as e:
            logger.exception("Error creating expense")
            self.last_error = ErrorInfo.from_exception("Failed to create expense", e)
            raise

    def submit_expense(self, expense_id: int) -> OperationResult:
        try:
            self.gateway.execute("SubmitExpense", expense_id=expense_id)
            self.last_error = None
            return OperationResult.success(True)
        except Exception as e:
            return self._failed("Failed to submit expense", e)

    def approve_expense(self, request: ReviewExpenseRequest) -> OperationResult:
        try:
            self.gateway.execute(
                "ApproveExpense",
                expense_id=request.expense_id,
                reviewer_id=request.reviewer_id,
            )
            self.last_error = None
            return OperationResult.success(True)
        except Exception as e:
            return self._failed("Failed to approve expense", e)

    def reject_expense(self, request: ReviewExpenseRequest) -> OperationResult:
        try:
            self.gateway.execute(
                "RejectExpense",
                expense_id=request.expense_id,
                reviewer_id=request.reviewer_id,
            )
            self.last_error = None
            return OperationResult.success(True)
        except Exception as e:
            return self._failed("Failed to reject expense", e)


@lru_cache(maxsize=1)
def get_expense_service() -> ExpenseService:
    return ExpenseService(ProcedureGateway(get_connection_provider()), settings.DEFAULT_CURRENCY)

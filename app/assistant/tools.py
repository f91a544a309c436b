# app/assistant/tools.py
"""Tool catalogue exposed to the chat model and the dispatcher that runs it.

Every tool delegates to :class:`ExpenseService`; results go back to the
model as compact JSON text. Nothing raised while running a tool escapes
:meth:`ToolDispatcher.execute` - failures become ``{"error": ...}``.
"""
import json
import logging
from typing import Any, Dict, Union

import pydantic

from app.assistant.schemas import CreateExpenseArgs, ExpenseIdArgs, GetExpensesArgs
from app.core.config import Settings, settings
from app.core.exceptions import ValidationError
from app.models.expense import Expense
from app.schemas.expense import CreateExpenseRequest, ExpenseFilter, ReviewExpenseRequest
from app.services.expense_service import ExpenseService

logger = logging.getLogger(__name__)

NO_PARAMETERS = {"type": "object", "properties": {}}

TOOL_DEFINITIONS = [
    {
        "type": "function",
        "function": {
            "name": "get_expenses",
            "description": "Retrieves a list of expenses. Can be filtered by category or status.",
            "parameters": {
                "type": "object",
                "properties": {
                    "category": {
                        "type": "string",
                        "description": "Filter by category name (e.g., Travel, Meals, Supplies)",
                    },
                    "status": {
                        "type": "string",
                        "description": "Filter by status (Draft, Submitted, Approved, Rejected)",
                    },
                },
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "get_pending_expenses",
            "description": "Retrieves all expenses that are pending approval (status = Submitted).",
            "parameters": NO_PARAMETERS,
        },
    },
    {
        "type": "function",
        "function": {
            "name": "get_categories",
            "description": "Retrieves all available expense categories.",
            "parameters": NO_PARAMETERS,
        },
    },
    {
        "type": "function",
        "function": {
            "name": "create_expense",
            "description": "Creates a new expense claim.",
            "parameters": {
                "type": "object",
                "properties": {
                    "amount": {"type": "number", "description": "Amount in GBP (e.g., 25.50)"},
                    "category_id": {
                        "type": "integer",
                        "description": "Category ID (1=Travel, 2=Meals, 3=Supplies, 4=Accommodation, 5=Other)",
                    },
                    "expense_date": {
                        "type": "string",
                        "description": "Date of expense in YYYY-MM-DD format",
                    },
                    "description": {"type": "string", "description": "Description of the expense"},
                },
                "required": ["amount", "category_id", "expense_date"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "approve_expense",
            "description": "Approves a pending expense. Only managers can approve expenses.",
            "parameters": {
                "type": "object",
                "properties": {
                    "expense_id": {"type": "integer", "description": "ID of the expense to approve"},
                },
                "required": ["expense_id"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "reject_expense",
            "description": "Rejects a pending expense. Only managers can reject expenses.",
            "parameters": {
                "type": "object",
                "properties": {
                    "expense_id": {"type": "integer", "description": "ID of the expense to reject"},
                },
                "required": ["expense_id"],
            },
        },
    },
]

TOOL_NAMES = {tool["function"]["name"] for tool in TOOL_DEFINITIONS}


def _dumps(payload: Any) -> str:
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=str)


def summarise_expense(expense: Expense, include_status: bool = True) -> Dict[str, Any]:
    summary = {
        "expense_id": expense.expense_id,
        "user_name": expense.user_name,
        "category_id": expense.category_id,
        "category_name": expense.category_name,
        "amount": expense.formatted_amount,
        "date": expense.expense_date.strftime("%d/%m/%Y"),
        "description": expense.description,
    }
    if include_status:
        summary["status_name"] = expense.status_name
    return summary


def _parse_arguments(name: str, arguments: Union[str, Dict[str, Any], None], model):
    if isinstance(arguments, str):
        try:
            raw = json.loads(arguments) if arguments.strip() else {}
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid arguments for {name}", [f"malformed JSON: {e.msg}"]) from e
    else:
        raw = arguments or {}

    if not isinstance(raw, dict):
        raise ValidationError(f"Invalid arguments for {name}", ["arguments must be a JSON object"])

    try:
        return model.model_validate(raw)
    except pydantic.ValidationError as e:
        details = [
            f"{'.'.join(str(p) for p in err['loc']) or 'arguments'}: {err['msg']}"
            for err in e.errors()
        ]
        raise ValidationError(f"Invalid arguments for {name}", details) from e


class ToolDispatcher:
    def __init__(self, expense_service: ExpenseService, cfg: Settings = settings):
        self.expense_service = expense_service
        self.settings = cfg

    def _default_actor(self, actor_id: int, role: str) -> int:
        if not self.settings.DEFAULT_ACTORS_ENABLED:
            raise ValidationError(f"No {role} identity available", [f"default {role} is disabled"])
        return actor_id

    def execute(self, name: str, arguments: Union[str, Dict[str, Any], None] = None) -> str:
        try:
            if name not in TOOL_NAMES:
                return _dumps({"error": f"Unknown function: {name}"})
            return _dumps(getattr(self, f"_{name}")(arguments))
        except ValidationError as e:
            logger.warning("Tool %s rejected arguments: %s", name, e.details)
            return _dumps({"error": str(e), "details": e.details})
        except Exception as e:
            logger.exception("Error executing function %s", name)
            return _dumps({"error": str(e)})

    # ---- tools

    def _get_expenses(self, arguments):
        args = _parse_arguments("get_expenses", arguments, GetExpensesArgs)
        result = self.expense_service.list_expenses(
            ExpenseFilter(category=args.category, status=args.status)
        )
        return [summarise_expense(e) for e in result.data]

    def _get_pending_expenses(self, arguments):
        result = self.expense_service.list_pending_expenses()
        return [summarise_expense(e, include_status=False) for e in result.data]

    def _get_categories(self, arguments):
        result = self.expense_service.list_categories()
        return [c.model_dump() for c in result.data]

    def _create_expense(self, arguments):
        args = _parse_arguments("create_expense", arguments, CreateExpenseArgs)
        user_id = self._default_actor(self.settings.DEFAULT_SUBMITTER_ID, "submitter")
        request = CreateExpenseRequest(
            amount=args.amount,
            category_id=args.category_id,
            expense_date=args.expense_date,
            description=args.description,
        )
        new_id = self.expense_service.create_expense(request, user_id=user_id)
        return {
            "success": True,
            "expense_id": new_id,
            "message": f"Expense created with ID {new_id}",
        }

    def _review(self, name: str, arguments, approve: bool):
        args = _parse_arguments(name, arguments, ExpenseIdArgs)
        reviewer_id = self._default_actor(self.settings.DEFAULT_REVIEWER_ID, "reviewer")
        request = ReviewExpenseRequest(expense_id=args.expense_id, reviewer_id=reviewer_id)
        if approve:
            result = self.expense_service.approve_expense(request)
        else:
            result = self.expense_service.reject_expense(request)

        verb = "approve" if approve else "reject"
        if result.data:
            return {"success": True, "message": f"Expense {verb}d"}
        payload = {"success": False, "message": f"Failed to {verb} expense"}
        if result.error:
            payload["error"] = result.error.detailed_message or result.error.message
        return payload

    def _approve_expense(self, arguments):
        return self._review("approve_expense", arguments, approve=True)

    def _reject_expense(self, arguments):
        return self._review("reject_expense", arguments, approve=False)

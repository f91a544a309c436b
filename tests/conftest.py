"""Shared fixtures: an in-memory stand-in for the stored procedures, a fake
Groq client, and a TestClient wired to both."""

from __future__ import annotations

import copy
import itertools
from datetime import date, datetime
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from app.assistant.service import ChatService, get_chat_service
from app.core.config import Settings
from app.core.exceptions import ConnectionFailureCategory, DatabaseConnectionError, OperationError
from app.db.session import ConnectionProvider, get_connection_provider
from app.main import app
from app.services.expense_service import ExpenseService, get_expense_service

CATEGORIES = {1: "Travel", 2: "Meals", 3: "Supplies", 4: "Accommodation", 5: "Other"}
STATUSES = {1: "Draft", 2: "Submitted", 3: "Approved", 4: "Rejected"}
USERS = {
    1: {"user_name": "Alice Example", "email": "alice@example.co.uk", "role_id": 1, "role_name": "Employee"},
    2: {"user_name": "Bob Manager", "email": "bob.manager@example.co.uk", "role_id": 2, "role_name": "Manager"},
}


class FakeProcedureGateway:
    """Implements the ten expense procedures against Python dicts.

    Set ``failing = True`` to make every call fail as if the database
    were unreachable.
    """

    def __init__(self):
        self.failing = False
        self.calls = []
        self._ids = itertools.count(100)
        self.expenses = {}
        self._seed()

    def _seed(self):
        self._insert(user_id=1, category_id=1, amount_minor=4250, expense_date=date(2024, 2, 1),
                     description="Train to Leeds", status_id=2)
        self._insert(user_id=1, category_id=2, amount_minor=1899, expense_date=date(2024, 2, 5),
                     description="Team lunch", status_id=1)
        self._insert(user_id=2, category_id=3, amount_minor=999, expense_date=date(2024, 2, 9),
                     description=None, status_id=3, reviewed_by=2)

    def _insert(self, user_id, category_id, amount_minor, expense_date, description,
                status_id=1, reviewed_by=None):
        expense_id = next(self._ids)
        self.expenses[expense_id] = {
            "expense_id": expense_id,
            "user_id": user_id,
            "category_id": category_id,
            "status_id": status_id,
            "amount_minor": amount_minor,
            "currency": "GBP",
            "expense_date": expense_date,
            "description": description,
            "receipt_file": None,
            "submitted_at": datetime(2024, 2, 10) if status_id >= 2 else None,
            "reviewed_by": reviewed_by,
            "reviewed_at": datetime(2024, 2, 11) if reviewed_by else None,
            "created_at": datetime(2024, 2, 1, 12, 0),
        }
        return expense_id

    def _row(self, expense):
        row = dict(expense)
        row["user_name"] = USERS[expense["user_id"]]["user_name"]
        row["category_name"] = CATEGORIES[expense["category_id"]]
        row["status_name"] = STATUSES[expense["status_id"]]
        row["reviewer_name"] = USERS[expense["reviewed_by"]]["user_name"] if expense["reviewed_by"] else None
        return row

    def _check(self, procedure):
        self.calls.append(procedure)
        if self.failing:
            raise DatabaseConnectionError(
                "Database connection failed",
                category=ConnectionFailureCategory.network,
                hint="Cannot connect to the database server.",
            )

    # ---- gateway interface

    def fetch_all(self, procedure, **params):
        self._check(procedure)
        rows = [self._row(e) for e in self.expenses.values()]

        if procedure == "GetExpenses":
            category = params.get("category_name")
            status = params.get("status_name")
            search = params.get("search_text")
            if category:
                rows = [r for r in rows if r["category_name"].lower() == category.lower()]
            if status:
                rows = [r for r in rows if r["status_name"].lower() == status.lower()]
            if search:
                needle = search.lower()
                rows = [
                    r for r in rows
                    if any(needle in (r[k] or "").lower() for k in ("description", "category_name", "user_name"))
                ]
            return rows
        if procedure == "GetPendingExpenses":
            return [r for r in rows if r["status_name"] == "Submitted"]
        if procedure == "GetExpenseById":
            return [r for r in rows if r["expense_id"] == params["expense_id"]]
        if procedure == "GetCategories":
            return [
                {"category_id": k, "category_name": v, "is_active": k != 4}
                for k, v in CATEGORIES.items()
            ]
        if procedure == "GetStatuses":
            return [{"status_id": k, "status_name": v} for k, v in STATUSES.items()]
        if procedure == "GetUsers":
            return [
                {"user_id": k, "manager_id": 2 if k == 1 else None, "is_active": True, **v}
                for k, v in USERS.items()
            ]
        raise OperationError(procedure, "not a query procedure")

    def fetch_one(self, procedure, **params):
        rows = self.fetch_all(procedure, **params)
        return rows[0] if rows else None

    def fetch_scalar(self, procedure, **params):
        self._check(procedure)
        if procedure != "CreateExpense":
            raise OperationError(procedure, "not a scalar procedure")
        if params["category_id"] not in CATEGORIES:
            raise OperationError(procedure, "foreign key violation on category_id")
        return self._insert(
            user_id=params["user_id"],
            category_id=params["category_id"],
            amount_minor=params["amount_minor"],
            expense_date=params["expense_date"],
            description=params["description"],
        )

    def execute(self, procedure, **params):
        self._check(procedure)
        expense = self.expenses.get(params["expense_id"])
        if expense is None:
            raise OperationError(procedure, f"expense {params['expense_id']} does not exist")

        if procedure == "SubmitExpense":
            if expense["status_id"] != 1:
                raise OperationError(procedure, "only draft expenses can be submitted")
            expense["status_id"] = 2
            expense["submitted_at"] = datetime(2024, 3, 1)
        elif procedure in ("ApproveExpense", "RejectExpense"):
            if expense["status_id"] != 2:
                raise OperationError(procedure, "only submitted expenses can be reviewed")
            expense["status_id"] = 3 if procedure == "ApproveExpense" else 4
            expense["reviewed_by"] = params["reviewer_id"]
            expense["reviewed_at"] = datetime(2024, 3, 2)
        else:
            raise OperationError(procedure, "not a command procedure")


# --------------------------------------------------
# FAKE GROQ CLIENT
# --------------------------------------------------

def tool_call(call_id, name, arguments="{}"):
    return SimpleNamespace(
        id=call_id,
        type="function",
        function=SimpleNamespace(name=name, arguments=arguments),
    )


def assistant_message(content=None, tool_calls=None):
    return SimpleNamespace(content=content, tool_calls=tool_calls)


class FakeGroqClient:
    """Replays a scripted list of assistant messages."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.requests = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs):
        self.requests.append(copy.deepcopy(kwargs))
        if not self.replies:
            raise RuntimeError("no scripted reply left")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(choices=[SimpleNamespace(message=reply)])


# --------------------------------------------------
# FIXTURES
# --------------------------------------------------

@pytest.fixture
def test_settings():
    cfg = Settings()
    cfg.DATABASE_URL = None
    cfg.DB_HOST = None
    cfg.GROQ_API_KEY = None
    cfg.DEFAULT_ACTORS_ENABLED = True
    cfg.DEFAULT_SUBMITTER_ID = 1
    cfg.DEFAULT_REVIEWER_ID = 2
    cfg.CHAT_MAX_TOOL_ROUNDS = 3
    return cfg


@pytest.fixture
def gateway():
    return FakeProcedureGateway()


@pytest.fixture
def expense_service(gateway):
    return ExpenseService(gateway)


@pytest.fixture
def client(expense_service, test_settings):
    provider = ConnectionProvider(test_settings)
    chat = ChatService(expense_service, test_settings)

    app.dependency_overrides[get_expense_service] = lambda: expense_service
    app.dependency_overrides[get_connection_provider] = lambda: provider
    app.dependency_overrides[get_chat_service] = lambda: chat
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

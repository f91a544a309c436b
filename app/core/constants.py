# app/core/constants.py

from datetime import date, datetime

from app.models.expense import Expense, ExpenseCategory, ExpenseStatus
from app.models.user import Role, User

# Logical procedure name -> (SQL function, ordered parameter names)
PROCEDURES = {
    "GetExpenses": ("sp_get_expenses", ("category_name", "status_name", "search_text")),
    "GetPendingExpenses": ("sp_get_pending_expenses", ()),
    "GetExpenseById": ("sp_get_expense_by_id", ("expense_id",)),
    "GetCategories": ("sp_get_categories", ()),
    "GetStatuses": ("sp_get_statuses", ()),
    "GetUsers": ("sp_get_users", ()),
    "CreateExpense": (
        "sp_create_expense",
        ("user_id", "category_id", "amount_minor", "expense_date", "description"),
    ),
    "SubmitExpense": ("sp_submit_expense", ("expense_id",)),
    "ApproveExpense": ("sp_approve_expense", ("expense_id", "reviewer_id")),
    "RejectExpense": ("sp_reject_expense", ("expense_id", "reviewer_id")),
}


# --------------------------------------------------
# SAMPLE DATA (served while the database is unreachable)
# --------------------------------------------------

SAMPLE_CREATED_AT = datetime(2024, 1, 15, 9, 0, 0)

FALLBACK_STATUSES = [
    ExpenseStatus(status_id=1, status_name="Draft"),
    ExpenseStatus(status_id=2, status_name="Submitted"),
    ExpenseStatus(status_id=3, status_name="Approved"),
    ExpenseStatus(status_id=4, status_name="Rejected"),
]

FALLBACK_CATEGORIES = [
    ExpenseCategory(category_id=1, category_name="Travel", is_active=True),
    ExpenseCategory(category_id=2, category_name="Meals", is_active=True),
    ExpenseCategory(category_id=3, category_name="Supplies", is_active=True),
    ExpenseCategory(category_id=4, category_name="Accommodation", is_active=True),
    ExpenseCategory(category_id=5, category_name="Other", is_active=True),
]

FALLBACK_ROLES = [
    Role(role_id=1, role_name="Employee", description="Submits expense claims"),
    Role(role_id=2, role_name="Manager", description="Reviews submitted claims"),
]

ROLE_NAMES = {role.role_id: role.role_name for role in FALLBACK_ROLES}

FALLBACK_USERS = [
    User(
        user_id=1,
        user_name="Alice Example",
        email="alice@example.co.uk",
        role_id=1,
        role_name=ROLE_NAMES[1],
        manager_id=2,
        is_active=True,
    ),
    User(
        user_id=2,
        user_name="Bob Manager",
        email="bob.manager@example.co.uk",
        role_id=2,
        role_name=ROLE_NAMES[2],
        is_active=True,
    ),
]

FALLBACK_EXPENSES = [
    Expense(
        expense_id=1,
        user_id=1,
        user_name="Alice Example",
        category_id=1,
        category_name="Travel",
        status_id=2,
        status_name="Submitted",
        amount_minor=12000,
        currency="GBP",
        expense_date=date(2024, 1, 15),
        description="Taxi to client site",
        submitted_at=SAMPLE_CREATED_AT,
        created_at=SAMPLE_CREATED_AT,
    ),
    Expense(
        expense_id=2,
        user_id=1,
        user_name="Alice Example",
        category_id=2,
        category_name="Meals",
        status_id=2,
        status_name="Submitted",
        amount_minor=6900,
        currency="GBP",
        expense_date=date(2023, 10, 1),
        description="Client lunch",
        submitted_at=SAMPLE_CREATED_AT,
        created_at=SAMPLE_CREATED_AT,
    ),
    Expense(
        expense_id=3,
        user_id=1,
        user_name="Alice Example",
        category_id=3,
        category_name="Supplies",
        status_id=3,
        status_name="Approved",
        amount_minor=9950,
        currency="GBP",
        expense_date=date(2023, 12, 4),
        description="Office supplies",
        reviewed_by=2,
        reviewer_name="Bob Manager",
        reviewed_at=SAMPLE_CREATED_AT,
        created_at=SAMPLE_CREATED_AT,
    ),
    Expense(
        expense_id=4,
        user_id=1,
        user_name="Alice Example",
        category_id=1,
        category_name="Travel",
        status_id=3,
        status_name="Approved",
        amount_minor=1920,
        currency="GBP",
        expense_date=date(2023, 1, 18),
        description="Transport to meeting",
        reviewed_by=2,
        reviewer_name="Bob Manager",
        reviewed_at=SAMPLE_CREATED_AT,
        created_at=SAMPLE_CREATED_AT,
    ),
]

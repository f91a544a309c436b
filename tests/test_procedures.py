import pytest
from sqlalchemy import create_engine

from app.core.exceptions import DatabaseConnectionError, OperationError
from app.db.procedures import ProcedureGateway, build_call
from app.db.session import ConnectionProvider


def test_build_call_orders_parameters():
    statement, bound = build_call("ApproveExpense", {"reviewer_id": 2, "expense_id": 7})

    assert str(statement) == "SELECT * FROM sp_approve_expense(:expense_id, :reviewer_id)"
    assert bound == {"expense_id": 7, "reviewer_id": 2}


def test_build_call_fills_missing_optional_parameters():
    statement, bound = build_call("GetExpenses", {"status_name": "Submitted"})

    assert str(statement) == "SELECT * FROM sp_get_expenses(:category_name, :status_name, :search_text)"
    assert bound == {"category_name": None, "status_name": "Submitted", "search_text": None}


def test_build_call_without_parameters():
    statement, bound = build_call("GetCategories", {})

    assert str(statement) == "SELECT * FROM sp_get_categories()"
    assert bound == {}


def test_unknown_procedure():
    with pytest.raises(OperationError, match="unknown stored procedure"):
        build_call("DropEverything", {})


def test_unexpected_parameter():
    with pytest.raises(OperationError, match="unexpected parameters"):
        build_call("GetExpenseById", {"expense_id": 1, "user_id": 3})


def test_gateway_wraps_database_errors(test_settings):
    # sqlite has no such function, so the call itself fails after connecting
    provider = ConnectionProvider(test_settings, engine=create_engine("sqlite://"))
    gateway = ProcedureGateway(provider)

    with pytest.raises(OperationError) as info:
        gateway.fetch_all("GetCategories")

    assert info.value.procedure == "GetCategories"
    assert provider.is_connected is True


def test_gateway_surfaces_connection_errors(test_settings):
    gateway = ProcedureGateway(ConnectionProvider(test_settings))

    with pytest.raises(DatabaseConnectionError):
        gateway.execute("SubmitExpense", expense_id=1)

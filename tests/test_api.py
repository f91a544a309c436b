def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}


def test_list_expenses(client):
    response = client.get("/api/expenses")

    assert response.status_code == 200
    assert response.headers["X-Sample-Data"] == "false"
    body = response.json()
    assert [e["expense_id"] for e in body] == [100, 101, 102]
    assert body[0]["formatted_amount"] == "£42.50"


def test_list_expenses_with_filters(client):
    response = client.get(
        "/api/expenses",
        params={"status": "submitted", "from_date": "2024-01-01", "to_date": "2024-12-31"},
    )

    assert [e["expense_id"] for e in response.json()] == [100]


def test_list_expenses_flags_sample_data(client, gateway):
    gateway.failing = True

    response = client.get("/api/expenses")

    assert response.status_code == 200
    assert response.headers["X-Sample-Data"] == "true"
    assert len(response.json()) == 4


def test_pending_expenses(client):
    response = client.get("/api/expenses/pending", params={"search": "leeds"})

    assert [e["expense_id"] for e in response.json()] == [100]


def test_get_expense(client):
    assert client.get("/api/expenses/102").json()["status_name"] == "Approved"
    assert client.get("/api/expenses/999").status_code == 404


def test_create_expense(client, gateway):
    response = client.post(
        "/api/expenses",
        json={"amount": "12.34", "expense_date": "2024-04-02", "category_id": 1, "description": "Bus"},
    )

    assert response.status_code == 201
    new_id = response.json()["expense_id"]
    assert gateway.expenses[new_id]["amount_minor"] == 1234
    assert gateway.expenses[new_id]["user_id"] == 1


def test_create_expense_rejects_non_positive_amount(client):
    response = client.post(
        "/api/expenses",
        json={"amount": 0, "expense_date": "2024-04-02", "category_id": 1},
    )

    assert response.status_code == 422


def test_create_expense_storage_failure(client):
    response = client.post(
        "/api/expenses",
        json={"amount": 5, "expense_date": "2024-04-02", "category_id": 77},
    )

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["error"] == "Failed to create expense"
    assert "foreign key" in detail["detail"]


def test_submit_and_approve(client, gateway):
    assert client.post("/api/expenses/101/submit").status_code == 200

    response = client.post("/api/expenses/101/approve", json={"reviewer_id": 2})

    assert response.status_code == 200
    assert response.json() == {"message": "Expense approved successfully"}
    assert gateway.expenses[101]["reviewed_by"] == 2


def test_reject_uses_default_reviewer(client, gateway):
    response = client.post("/api/expenses/100/reject")

    assert response.status_code == 200
    assert gateway.expenses[100]["reviewed_by"] == 2


def test_invalid_transition_returns_400(client):
    response = client.post("/api/expenses/102/submit")

    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "Failed to submit expense"


def test_reviewer_required_when_defaults_disabled(client, monkeypatch):
    from app.core.config import settings

    monkeypatch.setattr(settings, "DEFAULT_ACTORS_ENABLED", False)

    response = client.post("/api/expenses/100/approve")

    assert response.status_code == 400
    assert response.json()["detail"] == "reviewer_id is required"


def test_reference_data(client):
    assert len(client.get("/api/categories").json()) == 5
    assert [s["status_name"] for s in client.get("/api/statuses").json()] == [
        "Draft",
        "Submitted",
        "Approved",
        "Rejected",
    ]
    users = client.get("/api/users")
    assert users.headers["X-Sample-Data"] == "false"
    assert users.json()[1]["role_name"] == "Manager"


def test_diagnostics_after_failure(client, gateway):
    gateway.failing = True
    client.get("/api/categories")

    body = client.get("/api/diagnostics").json()

    assert body["use_dummy_data"] is True
    assert body["last_error"]["message"] == "Failed to retrieve categories"
    assert body["last_error"]["category"] == "network"


def test_chat_status_and_unconfigured_reply(client):
    assert client.get("/api/chat/status").json() == {"configured": False}

    response = client.post("/api/chat", json={"message": "hello"})

    assert response.status_code == 200
    assert response.json()["success"] is True


def test_chat_rejects_empty_message(client):
    assert client.post("/api/chat", json={"message": ""}).status_code == 422

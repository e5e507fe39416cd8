"""
Tests for expense endpoints.
"""
import pytest


@pytest.fixture
def people(make_user):
    return make_user("A"), make_user("B"), make_user("C")


def expense_payload(payer, shares, name="Dinner", amount=90):
    return {
        "name": name,
        "amount": amount,
        "payer_id": payer.id,
        "participants": [{"user_id": u.id, "amount": a} for u, a in shares],
    }


def test_create_expense(client, people):
    """Test expense creation."""
    a, b, c = people
    response = client.post("/api/expenses", json=expense_payload(a, [(a, 30), (b, 30), (c, 30)]))
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Dinner"
    assert data["amount"] == 90
    assert data["payer"] == {"id": a.id, "name": "A"}
    assert [p["user_id"] for p in data["participants"]] == [a.id, b.id, c.id]
    assert data["participants"][1]["user"]["name"] == "B"


@pytest.mark.parametrize("field", ["name", "amount", "payer_id", "participants"])
def test_create_expense_missing_field(client, people, field):
    """Missing required fields are rejected without writing anything."""
    a, b, _ = people
    payload = expense_payload(a, [(b, 90)])
    del payload[field]
    response = client.post("/api/expenses", json=payload)
    assert response.status_code == 400
    assert client.get("/api/expenses").json() == []


def test_create_expense_rejects_empty_participants_and_bad_amount(client, people):
    a, b, _ = people
    assert client.post("/api/expenses", json=expense_payload(a, [])).status_code == 400
    assert client.post("/api/expenses", json=expense_payload(a, [(b, 10)], amount=0)).status_code == 400


def test_create_expense_unknown_user(client, people):
    a, _, _ = people
    payload = expense_payload(a, [(a, 45)])
    payload["participants"].append({"user_id": 999, "amount": 45})
    response = client.post("/api/expenses", json=payload)
    assert response.status_code == 400
    assert response.json()["details"] == [999]


def test_get_expenses_newest_first(client, people):
    a, b, _ = people
    first = client.post("/api/expenses", json=expense_payload(a, [(b, 10)], name="First")).json()
    second = client.post("/api/expenses", json=expense_payload(b, [(a, 10)], name="Second")).json()
    expenses = client.get("/api/expenses").json()
    assert [e["id"] for e in expenses] == [second["id"], first["id"]]
    assert expenses[0]["participants"][0]["user_id"] == a.id


def test_get_expense_completion(client, people):
    a, b, c = people
    created = client.post("/api/expenses", json=expense_payload(a, [(a, 30), (b, 30), (c, 30)])).json()
    
    data = client.get(f"/api/expenses/{created['id']}").json()
    assert data["allCompleted"] is False
    
    client.post(f"/api/summary/payment/{created['id']}-{b.id}-{a.id}", json={"paid": True})
    client.post(f"/api/summary/payment/{created['id']}-{c.id}-{a.id}", json={"paid": True})
    assert client.get(f"/api/expenses/{created['id']}").json()["allCompleted"] is True


def test_get_expense_not_found(client):
    assert client.get("/api/expenses/404").status_code == 404


def test_update_expense(client, people):
    """Test expense update."""
    a, b, c = people
    created = client.post("/api/expenses", json=expense_payload(a, [(b, 90)])).json()
    response = client.put(
        f"/api/expenses/{created['id']}",
        json=expense_payload(c, [(a, 60), (b, 60)], name="Hotpot", amount=120)
    )
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Hotpot"
    assert data["payer_id"] == c.id
    assert [(p["user_id"], p["amount"]) for p in data["participants"]] == [(a.id, 60), (b.id, 60)]
    
    summary = {u["id"]: u for u in client.get("/api/summary").json()["userSummary"]}
    assert summary[c.id]["balance"] == 120
    assert summary[b.id]["balance"] == -60


def test_update_expense_not_found(client, people):
    a, b, _ = people
    response = client.put("/api/expenses/404", json=expense_payload(a, [(b, 90)]))
    assert response.status_code == 404


def test_delete_expense(client, people):
    """Test expense deletion."""
    a, b, _ = people
    created = client.post("/api/expenses", json=expense_payload(a, [(b, 90)])).json()
    response = client.delete(f"/api/expenses/{created['id']}")
    assert response.status_code == 200
    assert client.get(f"/api/expenses/{created['id']}").status_code == 404
    assert client.delete(f"/api/expenses/{created['id']}").status_code == 404
    assert client.get("/api/summary").json()["transactions"] == []

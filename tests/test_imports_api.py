from stockflow.core.ai_selector import AIServiceError
from stockflow.models.inventory import StockItem

STOCK_IN = "30-Nov-2025 C105 Celcom 0138456954 776.30\n30-Nov-2025 C106 Digi 0123456789 100"


def run_import(client, headers, mode, text, **extra):
    payload = {"mode": mode, "text": text, "import_date": "2025-12-01", **extra}
    return client.post("/api/v1/imports/", headers=headers, json=payload)


def test_add_stock_only_for_closed_accounts(client, admin_headers, db):
    first = run_import(client, admin_headers, "ADD_STOCK", STOCK_IN)
    assert first.status_code == 200
    assert first.json()["created"] == 2
    assert first.json()["message"] == "Synced 2 records"

    second = run_import(client, admin_headers, "ADD_STOCK", STOCK_IN)
    assert second.json()["created"] == 0
    assert second.json()["message"] == "No new records to sync."

    items = db.query(StockItem).all()
    assert len(items) == 2
    assert {i.created_by for i in items} == {"admin"}
    assert len({i.created_at for i in items}) == 1


def test_calculate_usage_posts_difference(client, admin_headers):
    run_import(client, admin_headers, "ADD_STOCK", STOCK_IN)

    response = run_import(client, admin_headers, "CALCULATE_USAGE", "C105 Celcom 0138456954 700.30\nC106 Digi 0123456789 100")
    body = response.json()
    assert body["created"] == 1
    record = body["records"][0]
    assert record["code"] == "C105"
    assert record["type"] == "OUT"
    assert record["amount"] == 76.0
    assert record["date"] == "01-Dec-2025"

    items = client.get("/api/v1/inventory/", params={"status": "CLOSED"}, headers=admin_headers).json()["items"]
    assert {i["code"] for i in items} == {"C105"}


def test_audit_does_not_write(client, admin_headers, db):
    run_import(client, admin_headers, "ADD_STOCK", STOCK_IN)

    response = run_import(
        client, admin_headers, "AUDIT_SYSTEM",
        "1. C105- 0138456954 Celcom 776.30\n2. C106- 0123456789 Digi 90.00",
    )
    assert response.status_code == 200
    audit = response.json()["audit"]
    assert audit["matches"] == 1
    assert audit["mismatches"] == 1
    assert audit["results"][0]["code"] == "C106"
    assert audit["results"][0]["difference"] == 10
    assert db.query(StockItem).count() == 2


def test_audit_needs_reports_view(client, staff_headers):
    response = run_import(client, staff_headers, "AUDIT_SYSTEM", "1. C105- 0138456954 Celcom 776.30")
    assert response.status_code == 403


def test_staff_with_list_view_can_add_stock(client, staff_headers):
    assert run_import(client, staff_headers, "ADD_STOCK", STOCK_IN).json()["created"] == 2


def test_unparseable_text(client, admin_headers):
    response = run_import(client, admin_headers, "ADD_STOCK", "nothing useful here")
    assert response.status_code == 400
    assert "Smart Import" in response.json()["detail"]


def test_unknown_mode(client, admin_headers):
    assert run_import(client, admin_headers, "DELETE_ALL", STOCK_IN).status_code == 422


def test_ai_import(client, admin_headers, monkeypatch):
    monkeypatch.setattr(
        "stockflow.api.v1.imports.parse_stock_text",
        lambda text: [{"code": "C200-", "provider": "Maxis", "phone_number": "0191234567", "amount": "1,050.00"}],
    )
    response = run_import(client, admin_headers, "ADD_STOCK", "messy pasted text", use_ai=True)
    body = response.json()
    assert body["created"] == 1
    assert body["records"][0]["code"] == "C200"
    assert body["records"][0]["amount"] == 1050.0
    assert body["records"][0]["date"] == "01-Dec-2025"


def test_ai_import_failure(client, admin_headers, monkeypatch):
    def broken(text):
        raise AIServiceError("quota exceeded")

    monkeypatch.setattr("stockflow.api.v1.imports.parse_stock_text", broken)
    response = run_import(client, admin_headers, "ADD_STOCK", "messy pasted text", use_ai=True)
    assert response.status_code == 502
    assert response.json()["detail"] == "AI Parsing failed. Please check your API key or input format."

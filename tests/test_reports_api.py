import pytest

from stockflow.models.inventory import StockItem, TransactionType


@pytest.fixture
def reporter(make_user, headers_for):
    return headers_for(make_user("lina", permissions=["transaction_report"]))


@pytest.fixture
def pending_orders(db):
    db.add_all([
        StockItem(date="30-Nov-2025", code="C130", provider="Celcom", phone_number="011",
                  amount=100, type=TransactionType.IN, created_at=1),
        StockItem(date="01-Dec-2025", code="C130", provider="Temp Use", phone_number="",
                  amount=30, type=TransactionType.TEMP_USE, order_number="ORD-1",
                  created_at=2, created_by="lina"),
        StockItem(date="02-Dec-2025", code="C130", provider="Temp Use", phone_number="",
                  amount=10, type=TransactionType.TEMP_USE, created_at=3),
    ])
    db.commit()


def test_transaction_report(client, reporter, pending_orders):
    response = client.get("/api/v1/reports/transactions", headers=reporter)
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 2
    assert body["total_pending"] == 40
    latest = body["transactions"][0]
    assert latest["balance_before"] == 70
    assert latest["balance_after"] == 60
    assert latest["order_number"] == "N/A"
    assert latest["created_by"] == "System"


def test_transaction_report_permission(client, staff_headers):
    assert client.get("/api/v1/reports/transactions", headers=staff_headers).status_code == 403


def test_transaction_report_export(client, reporter, pending_orders):
    response = client.get("/api/v1/reports/transactions/export", headers=reporter)
    assert response.status_code == 200
    assert response.content[:2] == b"PK"
    assert "StockFlow_Transactions_" in response.headers["content-disposition"]

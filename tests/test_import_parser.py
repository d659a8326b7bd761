from datetime import date

import pytest

from stockflow.modules.import_parser import (
    ImportParseError,
    normalize_ai_rows,
    parse_manual,
    parse_number,
)
from stockflow.modules.ledger import ImportMode

IMPORT_DAY = date(2025, 12, 1)


def test_parse_number_reads_leading_value():
    assert parse_number("942.38") == 942.38
    assert parse_number("942.38abc") == 942.38
    assert parse_number(" -5") == -5
    assert parse_number("abc") is None
    assert parse_number(None) is None


def test_stock_in_lines():
    text = """
30-Nov-2025 C105 Celcom 0138456954 776.30
30-Nov-2025 C106 Digi 0123456789 100

too short line
30-Nov-2025 C107 Maxis 0111111111 n/a
"""
    rows = parse_manual(text, ImportMode.ADD_STOCK, IMPORT_DAY)

    assert len(rows) == 2
    assert rows[0] == {
        "date": "30-Nov-2025",
        "code": "C105",
        "provider": "Celcom",
        "phone_number": "0138456954",
        "amount": 776.30,
    }
    assert rows[1]["amount"] == 100


def test_usage_lines_default_date_and_amount():
    text = "C105 Celcom 0138456954 50.22\nC106 Digi\nC107"
    rows = parse_manual(text, ImportMode.CALCULATE_USAGE, IMPORT_DAY)

    assert len(rows) == 2
    assert rows[0]["date"] == "01-Dec-2025"
    assert rows[0]["amount"] == 50.22
    assert rows[1] == {
        "date": "01-Dec-2025",
        "code": "C106",
        "provider": "Digi",
        "phone_number": "",
        "amount": 0.0,
    }


def test_audit_lines():
    text = "2. C315- 01119938648 Celcom 942.38\n1. R101- Temp01 20,000.00"
    rows = parse_manual(text, ImportMode.AUDIT_SYSTEM, IMPORT_DAY)

    assert rows[0]["code"] == "C315"
    assert rows[0]["provider"] == "Celcom"
    assert rows[0]["phone_number"] == "01119938648"
    assert rows[0]["amount"] == 942.38
    assert rows[1]["code"] == "R101"
    assert rows[1]["provider"] == "System"
    assert rows[1]["amount"] == 20000.0


def test_nothing_parsed_raises():
    with pytest.raises(ImportParseError, match="Smart Import"):
        parse_manual("hello\nworld", ImportMode.ADD_STOCK, IMPORT_DAY)


def test_unknown_mode_raises():
    with pytest.raises(ValueError):
        parse_manual("C1 Celcom 1 2", "SOMETHING", IMPORT_DAY)


def test_normalize_ai_rows():
    raw = [
        {"code": "C315-", "provider": "Celcom", "phoneNumber": "011", "amount": "1,200.50"},
        {"code": "C316", "provider": "Digi", "phone_number": "012", "amount": None, "date": "29-Nov-2025"},
        {"code": " C317 ", "amount": float("nan")},
    ]
    rows = normalize_ai_rows(raw, IMPORT_DAY)

    assert rows[0] == {
        "date": "01-Dec-2025",
        "code": "C315",
        "provider": "Celcom",
        "phone_number": "011",
        "amount": 1200.5,
    }
    assert rows[1]["date"] == "29-Nov-2025"
    assert rows[1]["amount"] == 0.0
    assert rows[2]["code"] == "C317"
    assert rows[2]["provider"] == ""
    assert rows[2]["amount"] == 0.0

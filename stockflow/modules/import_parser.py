"""
Import text parsing

Turns pasted ledger text into rows of {date, code, provider, phone_number, amount}.
Standard import splits lines on whitespace; rows coming back from the AI
parser only get normalised.
"""
import math
import re
from datetime import date
from typing import Any, Dict, List, Optional

from stockflow.modules.ledger import ImportMode
from stockflow.utils.dates import format_display_date

_NUMBER_PREFIX = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


class ImportParseError(ValueError):
    """Nothing in the pasted text could be turned into a row"""


def parse_number(text: Optional[str]) -> Optional[float]:
    """Read the leading number of a field ("942.38abc" -> 942.38), None if there is none"""
    if text is None:
        return None
    match = _NUMBER_PREFIX.match(text.strip())
    if not match:
        return None
    return float(match.group(0))


def _parse_audit_line(parts: List[str], import_date: str) -> Optional[Dict[str, Any]]:
    # "2. C315- 01119938648 Celcom 942.38" or "1. R101- Temp01 20,000.00"
    if len(parts) < 3:
        return None

    code = parts[1].replace("-", "", 1).strip()
    amount = parse_number(parts[-1].replace(",", ""))
    if not code and len(parts) > 2:
        code = parts[2]

    provider = parts[3] if len(parts) > 4 else "System"
    phone = parts[2]

    if amount is None:
        return None
    return {
        "date": import_date,
        "code": code,
        "provider": provider,
        "phone_number": phone,
        "amount": amount,
    }


def _parse_usage_line(parts: List[str], import_date: str) -> Optional[Dict[str, Any]]:
    # "C105 Celcom 0138456954 50.22"
    code = parts[0]
    provider = parts[1] if len(parts) > 1 else ""
    phone = parts[2] if len(parts) > 2 else ""
    amount = 0.0

    if len(parts) >= 4:
        value = parse_number(parts[-1])
        if value is not None:
            amount = value

    if not code or not provider:
        return None
    return {
        "date": import_date,
        "code": code,
        "provider": provider,
        "phone_number": phone,
        "amount": amount,
    }


def _parse_stock_in_line(parts: List[str]) -> Optional[Dict[str, Any]]:
    # "30-Nov-2025 C105 Celcom 0138456954 776.30"
    if len(parts) < 5:
        return None
    amount = parse_number(parts[4])
    if amount is None:
        return None
    return {
        "date": parts[0],
        "code": parts[1],
        "provider": parts[2],
        "phone_number": parts[3],
        "amount": amount,
    }


def parse_manual(text: str, mode: str, import_date: Optional[date] = None) -> List[Dict[str, Any]]:
    """
    Standard import: one record per line, malformed lines skipped.

    Raises:
        ImportParseError: no line produced a row
    """
    if mode not in ImportMode.ALL:
        raise ValueError(f"Unknown import mode: {mode}")

    display_date = format_display_date(import_date)
    rows = []
    for line in text.strip().splitlines():
        parts = line.split()
        if not parts:
            continue

        if mode == ImportMode.AUDIT_SYSTEM:
            row = _parse_audit_line(parts, display_date)
        elif mode == ImportMode.CALCULATE_USAGE:
            row = _parse_usage_line(parts, display_date)
        else:
            row = _parse_stock_in_line(parts)

        if row is not None:
            rows.append(row)

    if not rows:
        raise ImportParseError("Could not parse text. Please check the format or use Smart Import.")
    return rows


def normalize_ai_rows(raw_rows: List[Dict[str, Any]], import_date: Optional[date] = None) -> List[Dict[str, Any]]:
    """Clean up rows returned by the AI parser"""
    display_date = format_display_date(import_date)
    rows = []
    for raw in raw_rows:
        code = str(raw.get("code") or "").strip()
        if code.endswith("-"):
            code = code[:-1].strip()

        amount = raw.get("amount")
        if isinstance(amount, str):
            amount = parse_number(amount.replace(",", ""))
        if amount is None or (isinstance(amount, float) and math.isnan(amount)):
            amount = 0.0

        rows.append({
            "date": raw.get("date") or display_date,
            "code": code,
            "provider": str(raw.get("provider") or ""),
            "phone_number": str(raw.get("phone_number") or raw.get("phoneNumber") or ""),
            "amount": float(amount),
        })
    return rows

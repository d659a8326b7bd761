"""
Excel export
Ledger records and the TEMP_USE transaction report as .xlsx workbooks
"""
import io
from typing import Any, Dict, List

import pandas as pd

from stockflow.utils.logger import setup_logger

logger = setup_logger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

LEDGER_COLUMNS = {
    "date": "Date",
    "code": "Code",
    "provider": "Provider",
    "phone_number": "Phone Number",
    "type": "Type",
    "amount": "Amount",
    "order_number": "Order Number",
    "created_by": "Created By",
    "status": "Account Status",
}

REPORT_COLUMNS = {
    "date": "Date",
    "created_by": "Created By",
    "order_number": "Order Number",
    "code": "Account",
    "balance_before": "Opening Balance",
    "amount": "Cost",
    "balance_after": "Balance Left",
}


def _to_workbook(rows: List[Dict[str, Any]], columns: Dict[str, str], sheet_name: str) -> bytes:
    df = pd.DataFrame(rows, columns=list(columns))
    df = df.rename(columns=columns)

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
    logger.info(f"Excel export '{sheet_name}': {len(rows)} rows")
    return buffer.getvalue()


def ledger_workbook(rows: List[Dict[str, Any]]) -> bytes:
    """Inventory records with their account status"""
    return _to_workbook(rows, LEDGER_COLUMNS, "Inventory")


def report_workbook(rows: List[Dict[str, Any]]) -> bytes:
    """TEMP_USE transactions with opening and closing balances"""
    return _to_workbook(rows, REPORT_COLUMNS, "Transactions")

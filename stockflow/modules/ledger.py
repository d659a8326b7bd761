"""
Stock ledger reconciliation

Balance arithmetic shared by the dashboard, the import/audit flow and the
transaction report. Works on any sequence of ledger records carrying
code/type/amount/created_at (StockItem rows in practice).
"""
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional

from stockflow.models.inventory import AccountStatus, TransactionType
from stockflow.utils.dates import now_ms
from stockflow.utils.logger import setup_logger

logger = setup_logger(__name__)

AUDIT_TOLERANCE = 0.05
SYNC_TOLERANCE = 0.01
TEMP_PROVIDER = "Temp Use"


class ImportMode:
    ADD_STOCK = "ADD_STOCK"
    CALCULATE_USAGE = "CALCULATE_USAGE"
    AUDIT_SYSTEM = "AUDIT_SYSTEM"

    ALL = (ADD_STOCK, CALCULATE_USAGE, AUDIT_SYSTEM)


def _type_of(item) -> TransactionType:
    return TransactionType(item.type)


def group_by_code(items: Iterable) -> Dict[str, List]:
    """Group records per code, each ledger sorted by creation time"""
    grouped: Dict[str, List] = defaultdict(list)
    for item in items:
        grouped[item.code].append(item)
    for code in grouped:
        grouped[code].sort(key=lambda i: i.created_at)
    return dict(grouped)


def account_status_map(items: Iterable) -> Dict[str, str]:
    """
    OPEN/CLOSED per code from the most recent posting.

    IN or TEMP_USE last -> OPEN, OUT last -> CLOSED.
    """
    status = {}
    for code, ledger in group_by_code(items).items():
        last = _type_of(ledger[-1])
        if last in (TransactionType.IN, TransactionType.TEMP_USE):
            status[code] = AccountStatus.OPEN.value
        else:
            status[code] = AccountStatus.CLOSED.value
    return status


def status_of(status_map: Dict[str, str], code: str) -> str:
    return status_map.get(code, AccountStatus.CLOSED.value)


def official_balances(items: Iterable) -> Dict[str, float]:
    """IN - OUT per code; TEMP_USE does not touch the official balance"""
    balances: Dict[str, float] = defaultdict(float)
    for item in items:
        kind = _type_of(item)
        if kind == TransactionType.IN:
            balances[item.code] += item.amount
        elif kind == TransactionType.OUT:
            balances[item.code] -= item.amount
    return dict(balances)


def physical_balances(items: Iterable) -> Dict[str, float]:
    """IN - OUT - TEMP_USE per code"""
    balances: Dict[str, float] = defaultdict(float)
    for item in items:
        if _type_of(item) == TransactionType.IN:
            balances[item.code] += item.amount
        else:
            balances[item.code] -= item.amount
    return dict(balances)


def dashboard_stats(items: List) -> Dict[str, Any]:
    """KPI totals and chart series for the dashboard"""
    total_in = sum(i.amount for i in items if _type_of(i) == TransactionType.IN)
    total_out = sum(i.amount for i in items if _type_of(i) == TransactionType.OUT)
    total_temp = sum(i.amount for i in items if _type_of(i) == TransactionType.TEMP_USE)

    official = total_in - total_out
    physical = official - total_temp

    provider_values: Dict[str, float] = defaultdict(float)
    for item in items:
        value = item.amount if _type_of(item) == TransactionType.IN else -item.amount
        key = "Temporary" if item.provider == TEMP_PROVIDER else item.provider
        provider_values[key] += value

    provider_chart = [
        {"name": name, "value": max(0, value)}
        for name, value in provider_values.items()
        if max(0, value) > 0
    ]

    usage: Dict[str, float] = defaultdict(float)
    for item in items:
        if _type_of(item) in (TransactionType.OUT, TransactionType.TEMP_USE):
            usage[item.code] += item.amount
    top_usage = [
        {"name": code, "value": value}
        for code, value in sorted(usage.items(), key=lambda kv: kv[1], reverse=True)[:5]
    ]

    return {
        "total_in": total_in,
        "total_out": total_out,
        "total_temp": total_temp,
        "official_balance": official,
        "physical_balance": physical,
        "total_transactions": len(items),
        "unique_providers": len({i.provider for i in items}),
        "provider_chart": provider_chart,
        "top_usage": top_usage,
    }


def run_audit(items: Iterable, rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Compare externally reported balances against the ledger.

    Nothing is written; the result lists mismatches first.
    """
    balances = official_balances(items)
    results = []
    for row in rows:
        app_balance = balances.get(row["code"], 0)
        difference = app_balance - row["amount"]
        results.append({
            "code": row["code"],
            "provider": row.get("provider", ""),
            "phone_number": row.get("phone_number", ""),
            "system_balance": row["amount"],
            "app_balance": app_balance,
            "difference": difference,
            "status": "MATCH" if abs(difference) < AUDIT_TOLERANCE else "MISMATCH",
        })

    results.sort(key=lambda r: 0 if r["status"] == "MISMATCH" else 1)
    mismatches = sum(1 for r in results if r["status"] == "MISMATCH")

    return {
        "results": results,
        "matches": len(results) - mismatches,
        "mismatches": mismatches,
        "total_difference": sum(r["difference"] for r in results),
    }


def plan_import(
    items: Iterable,
    rows: List[Dict[str, Any]],
    mode: str,
    timestamp: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    Work out which postings an ADD_STOCK or CALCULATE_USAGE import creates.

    Status and balances are taken once from the ledger as it stands before
    the import, and every new posting shares one timestamp.

    Returns:
        list of StockItem field dicts (without id)
    """
    if mode not in (ImportMode.ADD_STOCK, ImportMode.CALCULATE_USAGE):
        raise ValueError(f"Import mode {mode} does not create postings")

    items = list(items)
    timestamp = timestamp or now_ms()
    status_map = account_status_map(items)
    balances = official_balances(items)
    postings = []

    for row in rows:
        base = {
            "date": row["date"],
            "code": row["code"],
            "provider": row.get("provider") or "",
            "phone_number": row.get("phone_number") or "",
            "created_at": timestamp,
        }

        if mode == ImportMode.ADD_STOCK:
            if status_of(status_map, row["code"]) == AccountStatus.CLOSED.value:
                postings.append({**base, "amount": row["amount"], "type": TransactionType.IN.value})
            continue

        # CALCULATE_USAGE: only open accounts are synchronised
        if status_of(status_map, row["code"]) != AccountStatus.OPEN.value:
            continue
        diff = balances.get(row["code"], 0) - row["amount"]
        if abs(diff) <= SYNC_TOLERANCE:
            continue
        kind = TransactionType.OUT if diff > 0 else TransactionType.IN
        postings.append({**base, "amount": round(abs(diff), 2), "type": kind.value})

    logger.info(f"Import plan ({mode}): {len(rows)} rows -> {len(postings)} postings")
    return postings


def transaction_report(items: Iterable) -> Dict[str, Any]:
    """
    Running balance per code with a before/after snapshot for every TEMP_USE.

    Rows come back newest first.
    """
    rows = []
    total_pending = 0.0

    for code, ledger in group_by_code(items).items():
        balance = 0.0
        for item in ledger:
            kind = _type_of(item)
            if kind == TransactionType.IN:
                balance += item.amount
            elif kind == TransactionType.OUT:
                balance -= item.amount
            else:
                before = balance
                balance -= item.amount
                total_pending += item.amount
                rows.append({
                    "id": item.id,
                    "date": item.date,
                    "order_number": item.order_number or "N/A",
                    "code": code,
                    "amount": item.amount,
                    "balance_before": before,
                    "balance_after": balance,
                    "created_at": item.created_at,
                    "created_by": item.created_by or "System",
                })

    rows.sort(key=lambda r: r["created_at"], reverse=True)
    return {
        "total_pending": total_pending,
        "count": len(rows),
        "transactions": rows,
    }

"""
Date helpers shared by ledger, import and roster code
"""
import calendar
import time
from datetime import date, datetime
from typing import Dict, List, Optional

DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def now_ms() -> int:
    """Current time as epoch milliseconds (ledger ordering key)"""
    return int(time.time() * 1000)


def format_display_date(value: Optional[date] = None) -> str:
    """Format a date the way ledger records carry it: 30-Nov-2025"""
    value = value or date.today()
    return value.strftime("%d-%b-%Y")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD, raising ValueError on anything else"""
    return datetime.strptime(value.strip(), "%Y-%m-%d").date()


def parse_month(month: str) -> tuple[int, int]:
    """Parse YYYY-MM into (year, month)"""
    parsed = datetime.strptime(month.strip(), "%Y-%m")
    return parsed.year, parsed.month


def month_days(month: str) -> List[Dict]:
    """
    Every date of the given month (YYYY-MM).

    Returns:
        [{"full_date": "2025-12-01", "day_num": 1, "day_name": "Mon", "is_weekend": False}, ...]
    """
    year, month_num = parse_month(month)
    _, last_day = calendar.monthrange(year, month_num)
    days = []
    for day_num in range(1, last_day + 1):
        d = date(year, month_num, day_num)
        days.append({
            "full_date": d.isoformat(),
            "day_num": day_num,
            "day_name": DAY_NAMES[d.weekday()],
            "is_weekend": d.weekday() >= 5,
        })
    return days

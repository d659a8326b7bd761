"""
Staff roster handling: day schedules, shift edits and imported rosters
"""
from collections import defaultdict
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from stockflow.models.staff import DaySchedule, Employee, ShiftAssignment, SHIFT_VALUES
from stockflow.utils.dates import parse_iso_date
from stockflow.utils.logger import setup_logger

logger = setup_logger(__name__)


def normalize_shift(shift: str) -> str:
    """Map loose spellings ("noon 2", "off") onto the known shift names"""
    cleaned = (shift or "").strip()
    for value in SHIFT_VALUES:
        if cleaned.lower() == value.lower():
            return value
    raise ValueError(f"Unknown shift: {shift}")


def merge_assignments(existing: List[Dict[str, Any]], incoming: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Replace an employee's assignment when present, append otherwise"""
    merged = [dict(a) for a in existing]
    for assignment in incoming:
        for idx, current in enumerate(merged):
            if current["employee_id"] == assignment["employee_id"]:
                merged[idx] = dict(assignment)
                break
        else:
            merged.append(dict(assignment))
    return merged


def save_day(db: Session, day: str, assignments: List[Dict[str, Any]]) -> DaySchedule:
    """Overwrite one day's roster (flushed, not committed)"""
    parse_iso_date(day)
    schedule = db.query(DaySchedule).filter(DaySchedule.day == day).first()
    if schedule is None:
        schedule = DaySchedule(day=day)
        db.add(schedule)

    schedule.assignments = [
        ShiftAssignment(
            employee_id=a["employee_id"],
            employee_name=a["employee_name"],
            shift=normalize_shift(a["shift"]),
        )
        for a in assignments
    ]
    db.flush()
    return schedule


def set_shift(db: Session, day: str, employee: Employee, shift: str) -> DaySchedule:
    """Set a single employee's shift on a day, creating the day if needed"""
    schedule = db.query(DaySchedule).filter(DaySchedule.day == day).first()
    existing = schedule.to_dict()["assignments"] if schedule else []
    merged = merge_assignments(existing, [{
        "employee_id": employee.id,
        "employee_name": employee.name,
        "shift": shift,
    }])
    return save_day(db, day, merged)


def find_employee_by_name(employees: List[Employee], name: str) -> Optional[Employee]:
    wanted = name.strip().lower()
    for employee in employees:
        if employee.name.strip().lower() == wanted:
            return employee
    return None


def apply_image_import(db: Session, parsed: Dict[str, Any]) -> Dict[str, Any]:
    """
    Store a roster read from an image.

    Unknown names become employees first, so every assignment can be
    matched in the same pass. Unknown shifts and bad dates are skipped.

    Returns:
        {"employees_added": [...], "days_updated": [...], "skipped": n}
    """
    employees = db.query(Employee).all()
    added = []
    for name in parsed.get("employees", []):
        if not name or not name.strip():
            continue
        if find_employee_by_name(employees, name) is None:
            employee = Employee(name=name.strip(), requests=[])
            db.add(employee)
            employees.append(employee)
            added.append(employee.name)
    db.flush()

    by_date: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
    skipped = 0
    for item in parsed.get("flat_assignments", []):
        employee = find_employee_by_name(employees, item.get("employee_name", ""))
        try:
            day = parse_iso_date(item.get("date", "")).isoformat()
            shift = normalize_shift(item.get("shift", ""))
        except ValueError:
            skipped += 1
            continue
        if employee is None:
            skipped += 1
            continue
        by_date[day].append({"employee_id": employee.id, "employee_name": employee.name, "shift": shift})

    for day, incoming in by_date.items():
        schedule = db.query(DaySchedule).filter(DaySchedule.day == day).first()
        existing = schedule.to_dict()["assignments"] if schedule else []
        save_day(db, day, merge_assignments(existing, incoming))

    logger.info(f"Roster image import: {len(added)} employees added, {len(by_date)} days, {skipped} skipped")
    return {"employees_added": added, "days_updated": sorted(by_date), "skipped": skipped}

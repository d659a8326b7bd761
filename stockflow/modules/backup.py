"""
Backup bundle export / restore / reset

The bundle is one JSON document holding every collection in the
camelCase document layout:
    {"items": [...], "employees": [...], "schedule": [...], "notes": [...], "users": [...]}
"""
import uuid
from datetime import date
from typing import Any, Callable, Dict, List

from sqlalchemy import func
from sqlalchemy.orm import Session

from stockflow.auth.security import get_password_hash
from stockflow.models.inventory import StockItem, TransactionType
from stockflow.models.note import Note
from stockflow.models.staff import DaySchedule, Employee, EmployeeRequest, ShiftAssignment
from stockflow.models.user import User, UserRole
from stockflow.modules.roster import normalize_shift
from stockflow.utils.dates import now_ms
from stockflow.utils.logger import setup_logger

logger = setup_logger(__name__)

# Writes per commit while restoring
BATCH_LIMIT = 450


def backup_filename(today: date = None) -> str:
    today = today or date.today()
    return f"StockFlow_CloudBackup_{today.isoformat()}.json"


# ─────────────────────────────────────────────
# Export
# ─────────────────────────────────────────────

def _item_doc(item: StockItem) -> Dict[str, Any]:
    doc = {
        "id": item.id,
        "date": item.date,
        "code": item.code,
        "provider": item.provider,
        "phoneNumber": item.phone_number,
        "amount": item.amount,
        "type": TransactionType(item.type).value,
        "createdAt": item.created_at,
    }
    if item.order_number:
        doc["orderNumber"] = item.order_number
    if item.created_by:
        doc["createdBy"] = item.created_by
    return doc


def _employee_doc(employee: Employee) -> Dict[str, Any]:
    return {
        "id": employee.id,
        "name": employee.name,
        "primaryShift": employee.primary_shift,
        "requests": [{"id": r.id, "day": r.day, "shift": r.shift} for r in employee.requests],
    }


def _schedule_doc(schedule: DaySchedule) -> Dict[str, Any]:
    return {
        "day": schedule.day,
        "assignments": [
            {"employeeId": a.employee_id, "employeeName": a.employee_name, "shift": a.shift}
            for a in schedule.assignments
        ],
    }


def _note_doc(note: Note) -> Dict[str, Any]:
    doc = {
        "id": note.id,
        "content": note.content,
        "author": note.author,
        "color": note.color,
        "createdAt": note.created_at,
    }
    if note.image_url:
        doc["imageUrl"] = note.image_url
    return doc


def _user_doc(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "username": user.username,
        "passwordHash": user.password_hash,
        "name": user.name,
        "role": UserRole(user.role).value,
        "permissions": user.permissions,
    }


def export_bundle(db: Session) -> Dict[str, List[Dict[str, Any]]]:
    """Dump every collection"""
    bundle = {
        "items": [_item_doc(i) for i in db.query(StockItem).order_by(StockItem.created_at).all()],
        "employees": [_employee_doc(e) for e in db.query(Employee).order_by(Employee.name).all()],
        "schedule": [_schedule_doc(s) for s in db.query(DaySchedule).order_by(DaySchedule.day).all()],
        "notes": [_note_doc(n) for n in db.query(Note).order_by(Note.created_at.desc()).all()],
        "users": [_user_doc(u) for u in db.query(User).order_by(User.username).all()],
    }
    logger.info("Backup export: " + ", ".join(f"{k}={len(v)}" for k, v in bundle.items()))
    return bundle


# ─────────────────────────────────────────────
# Restore
# ─────────────────────────────────────────────

def _restore_item(db: Session, doc: Dict[str, Any]) -> None:
    item = db.get(StockItem, doc["id"])
    if item is None:
        item = StockItem(id=doc["id"])
        db.add(item)
    item.date = doc.get("date") or ""
    item.code = doc["code"]
    item.provider = doc.get("provider") or ""
    item.phone_number = doc.get("phoneNumber") or ""
    item.amount = float(doc.get("amount") or 0)
    item.type = TransactionType(doc["type"])
    item.order_number = doc.get("orderNumber")
    item.created_at = int(doc.get("createdAt") or now_ms())
    item.created_by = doc.get("createdBy")


def _restore_request(db: Session, doc: Dict[str, Any]) -> EmployeeRequest:
    request = db.get(EmployeeRequest, doc["id"]) if doc.get("id") else None
    if request is None:
        request = EmployeeRequest(id=doc.get("id") or str(uuid.uuid4()))
    request.day = doc["day"]
    request.shift = normalize_shift(doc["shift"])
    return request


def _restore_employee(db: Session, doc: Dict[str, Any]) -> None:
    employee = db.get(Employee, doc["id"])
    if employee is None:
        employee = Employee(id=doc["id"])
        db.add(employee)
    employee.name = doc["name"]
    employee.primary_shift = doc.get("primaryShift")
    employee.requests = [_restore_request(db, r) for r in doc.get("requests") or []]


def _restore_schedule(db: Session, doc: Dict[str, Any]) -> None:
    schedule = db.get(DaySchedule, doc["day"])
    if schedule is None:
        schedule = DaySchedule(day=doc["day"])
        db.add(schedule)
    schedule.assignments = [
        ShiftAssignment(
            employee_id=a["employeeId"],
            employee_name=a.get("employeeName") or "",
            shift=normalize_shift(a["shift"]),
        )
        for a in doc.get("assignments") or []
    ]


def _restore_note(db: Session, doc: Dict[str, Any]) -> None:
    note = db.get(Note, doc["id"])
    if note is None:
        note = Note(id=doc["id"])
        db.add(note)
    note.content = doc["content"]
    note.author = doc.get("author") or ""
    note.color = doc.get("color") or "yellow"
    note.created_at = int(doc.get("createdAt") or now_ms())
    note.image_url = doc.get("imageUrl")


def _restore_user(db: Session, doc: Dict[str, Any]) -> None:
    user = db.get(User, doc["id"])
    if user is None:
        # same account under another id, e.g. the admin seeded on a fresh install
        user = db.query(User).filter(func.lower(User.username) == doc["username"].lower()).first()
    if user is None:
        user = User(id=doc["id"])
        db.add(user)
    user.username = doc["username"]
    user.name = doc.get("name") or doc["username"]
    user.role = UserRole(doc.get("role") or UserRole.STAFF.value)
    user.permissions = None if user.role == UserRole.ADMIN else doc.get("permissions") or []
    if doc.get("passwordHash"):
        user.password_hash = doc["passwordHash"]
    elif doc.get("password"):
        # older bundles carry plain-text passwords
        user.password_hash = get_password_hash(doc["password"])
    elif not user.password_hash:
        raise ValueError(f"User {doc['username']} has no password")


RESTORERS: Dict[str, Callable[[Session, Dict[str, Any]], None]] = {
    "items": _restore_item,
    "employees": _restore_employee,
    "schedule": _restore_schedule,
    "notes": _restore_note,
    "users": _restore_user,
}


def restore_bundle(db: Session, bundle: Dict[str, Any]) -> Dict[str, int]:
    """
    Upsert every document of the bundle, committing every BATCH_LIMIT writes.

    Missing collections are left untouched. Returns written counts per collection.
    """
    counts = {}
    pending = 0
    for collection, restore in RESTORERS.items():
        docs = bundle.get(collection) or []
        for doc in docs:
            restore(db, doc)
            db.flush()
            pending += 1
            if pending >= BATCH_LIMIT:
                db.commit()
                pending = 0
        counts[collection] = len(docs)
    if pending:
        db.commit()

    logger.info("Backup restore: " + ", ".join(f"{k}={v}" for k, v in counts.items()))
    return counts


# ─────────────────────────────────────────────
# Reset
# ─────────────────────────────────────────────

def reset_data(db: Session) -> Dict[str, int]:
    """Wipe inventory, schedule, notes and employees. Users are kept."""
    db.query(ShiftAssignment).delete(synchronize_session=False)
    counts = {
        "items": db.query(StockItem).delete(synchronize_session=False),
        "schedule": db.query(DaySchedule).delete(synchronize_session=False),
        "notes": db.query(Note).delete(synchronize_session=False),
    }
    db.query(EmployeeRequest).delete(synchronize_session=False)
    counts["employees"] = db.query(Employee).delete(synchronize_session=False)
    db.commit()
    logger.warning("Database reset: " + ", ".join(f"{k}={v}" for k, v in counts.items()))
    return counts

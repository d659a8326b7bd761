"""
Staff schedule API endpoints
Employees, shift requests, day rosters and AI roster tools
"""
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from stockflow.database.config import get_db
from stockflow.models.user import User, View
from stockflow.models.staff import DaySchedule, Employee, EmployeeRequest
from stockflow.auth.dependencies import require_view
from stockflow.core.ai_selector import AIServiceError, generate_staff_schedule, parse_schedule_image
from stockflow.modules import roster
from stockflow.utils.dates import month_days, parse_iso_date
from stockflow.utils.response_models import (
    DayScheduleIn,
    EmployeeCreate,
    EmployeeUpdate,
    GenerateScheduleRequest,
    ShiftChange,
    ShiftRequestCreate,
)
from stockflow.utils.logger import setup_logger

logger = setup_logger(__name__)
router = APIRouter()

MONTH_PATTERN = r"^\d{4}-\d{2}$"
IMAGE_TYPES = ("image/png", "image/jpeg", "image/webp", "image/heic", "image/heif")


def _get_employee(db: Session, employee_id: str) -> Employee:
    employee = db.query(Employee).filter(Employee.id == employee_id).first()
    if not employee:
        raise HTTPException(status_code=404, detail="Employee not found")
    return employee


def _check_day(day: str) -> str:
    try:
        return parse_iso_date(day).isoformat()
    except ValueError:
        raise HTTPException(status_code=400, detail="Day must be YYYY-MM-DD")


# ─────────────────────────────────────────────
# Employees
# ─────────────────────────────────────────────

@router.get("/employees")
async def list_employees(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_view(View.SCHEDULE)),
):
    employees = db.query(Employee).order_by(Employee.name).all()
    return {"status": "success", "employees": [e.to_dict() for e in employees]}


@router.post("/employees", status_code=201)
async def create_employee(
    employee_data: EmployeeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_view(View.SCHEDULE)),
):
    employee = Employee(
        name=employee_data.name,
        primary_shift=employee_data.primary_shift,
        requests=[],
    )
    db.add(employee)
    db.commit()
    db.refresh(employee)
    logger.info(f"Employee added: {employee.name} ({employee.primary_shift})")
    return {"status": "success", "data": employee.to_dict()}


@router.patch("/employees/{employee_id}")
async def update_employee(
    employee_id: str,
    employee_data: EmployeeUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_view(View.SCHEDULE)),
):
    employee = _get_employee(db, employee_id)
    if employee_data.name is not None:
        name = employee_data.name.strip()
        if not name:
            raise HTTPException(status_code=400, detail="Name is required")
        employee.name = name
    if "primary_shift" in employee_data.model_fields_set:
        employee.primary_shift = employee_data.primary_shift
    db.commit()
    db.refresh(employee)
    return {"status": "success", "data": employee.to_dict()}


@router.delete("/employees/{employee_id}")
async def delete_employee(
    employee_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_view(View.SCHEDULE)),
):
    """Remove an employee; past roster entries keep their name"""
    employee = _get_employee(db, employee_id)
    name = employee.name
    db.delete(employee)
    db.commit()
    logger.info(f"Employee removed: {name}")
    return {"status": "success", "message": f"Employee '{name}' removed"}


@router.post("/employees/{employee_id}/requests", status_code=201)
async def add_request(
    employee_id: str,
    request_data: ShiftRequestCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_view(View.SCHEDULE)),
):
    """Add a date-specific shift request (e.g. OFF on a given day)"""
    employee = _get_employee(db, employee_id)
    day = request_data.day.isoformat()
    if request_data.month and not day.startswith(request_data.month):
        raise HTTPException(status_code=400, detail=f"Request date must be within {request_data.month}")

    employee.requests.append(EmployeeRequest(day=day, shift=request_data.shift))
    db.commit()
    db.refresh(employee)
    return {"status": "success", "data": employee.to_dict()}


@router.delete("/employees/{employee_id}/requests/{request_id}")
async def remove_request(
    employee_id: str,
    request_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_view(View.SCHEDULE)),
):
    employee = _get_employee(db, employee_id)
    request = next((r for r in employee.requests if r.id == request_id), None)
    if request is None:
        raise HTTPException(status_code=404, detail="Request not found")
    employee.requests.remove(request)
    db.commit()
    db.refresh(employee)
    return {"status": "success", "data": employee.to_dict()}


# ─────────────────────────────────────────────
# Day rosters
# ─────────────────────────────────────────────

@router.get("/")
async def get_schedule(
    month: str = Query(..., pattern=MONTH_PATTERN, description="YYYY-MM"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_view(View.SCHEDULE)),
):
    """Saved day rosters of a month plus the month's calendar"""
    schedules = (
        db.query(DaySchedule)
        .filter(DaySchedule.day.like(f"{month}-%"))
        .order_by(DaySchedule.day)
        .all()
    )
    return {
        "status": "success",
        "month": month,
        "days": month_days(month),
        "schedule": [s.to_dict() for s in schedules],
    }


@router.put("/days/{day}")
async def save_day(
    day: str,
    day_data: DayScheduleIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_view(View.SCHEDULE)),
):
    """Overwrite one day's roster"""
    day = _check_day(day)
    schedule = roster.save_day(db, day, [a.model_dump() for a in day_data.assignments])
    db.commit()
    db.refresh(schedule)
    return {"status": "success", "data": schedule.to_dict()}


@router.patch("/days/{day}")
async def change_shift(
    day: str,
    change: ShiftChange,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_view(View.SCHEDULE)),
):
    """Set one employee's shift on one day"""
    day = _check_day(day)
    employee = _get_employee(db, change.employee_id)
    schedule = roster.set_shift(db, day, employee, change.shift)
    db.commit()
    db.refresh(schedule)
    logger.info(f"Shift changed: {employee.name} {day} -> {change.shift} by {current_user.username}")
    return {"status": "success", "data": schedule.to_dict()}


# ─────────────────────────────────────────────
# AI tools
# ─────────────────────────────────────────────

@router.post("/generate")
async def generate_schedule(
    request: GenerateScheduleRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_view(View.SCHEDULE)),
):
    """Generate a month roster with Gemini and store every returned day"""
    employees = [e.to_dict() for e in db.query(Employee).order_by(Employee.name).all()]
    try:
        generated = generate_staff_schedule(employees, request.month)
    except AIServiceError as e:
        logger.error(f"Schedule generation failed: {e}")
        raise HTTPException(status_code=502, detail="Failed to generate schedule. Check API Key or try again.")

    # last entry wins when the model repeats a day
    by_day = {}
    skipped = 0
    for entry in generated:
        try:
            day = parse_iso_date(entry.get("day", "")).isoformat()
            assignments = [
                {
                    "employee_id": a["employee_id"],
                    "employee_name": a["employee_name"],
                    "shift": roster.normalize_shift(a["shift"]),
                }
                for a in entry.get("assignments") or []
            ]
        except (KeyError, ValueError):
            skipped += 1
            continue
        by_day[day] = assignments

    for day, assignments in by_day.items():
        roster.save_day(db, day, assignments)
    db.commit()

    logger.info(f"Schedule generated for {request.month}: {len(by_day)} days, {skipped} skipped")
    return {
        "status": "success",
        "month": request.month,
        "days_saved": len(by_day),
        "skipped": skipped,
    }


@router.post("/import-image")
async def import_schedule_image(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_view(View.SCHEDULE)),
):
    """Read a roster screenshot and merge it into the schedule"""
    if file.content_type not in IMAGE_TYPES:
        raise HTTPException(status_code=400, detail="Please upload a PNG, JPEG, WEBP or HEIC image.")

    data = await file.read()
    if not data:
        raise HTTPException(status_code=400, detail="Empty file")

    try:
        parsed = parse_schedule_image(data, file.content_type)
    except AIServiceError as e:
        logger.error(f"Schedule image import failed: {e}")
        raise HTTPException(status_code=502, detail="Failed to import schedule from image. Please try again.")

    result = roster.apply_image_import(db, parsed)
    db.commit()
    return {"status": "success", **result}

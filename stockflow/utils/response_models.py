"""
API request models
Pydantic schemas shared by the v1 routers
"""
import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator

from stockflow.modules.roster import normalize_shift as _check_shift


# ─────────────────────────────────────────────
# Inventory / imports
# ─────────────────────────────────────────────

class TransactionRequest(BaseModel):
    """TEMP_USE entry (pending order)"""
    date: datetime.date = Field(default_factory=datetime.date.today, description="Transaction date")
    code: str = Field(..., min_length=1, description="Account code, e.g. C130")
    order_number: str = Field(..., min_length=1, description="Order number")
    amount: float = Field(..., gt=0, description="Cost amount")

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("code is required")
        return v


class ImportRequest(BaseModel):
    """Pasted ledger text"""
    mode: str = Field("ADD_STOCK", pattern="^(ADD_STOCK|CALCULATE_USAGE|AUDIT_SYSTEM)$")
    text: str = Field(..., min_length=1, description="Pasted records, one per line")
    import_date: datetime.date = Field(default_factory=datetime.date.today, description="Date used when a line has none")
    use_ai: bool = Field(False, description="Parse with Gemini instead of the standard parser")


# ─────────────────────────────────────────────
# Schedule
# ─────────────────────────────────────────────

class EmployeeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    primary_shift: Optional[str] = "Morning"

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name is required")
        return v

    @field_validator("primary_shift")
    @classmethod
    def check_shift(cls, v: Optional[str]) -> Optional[str]:
        return _check_shift(v) if v else None


class EmployeeUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    primary_shift: Optional[str] = None

    @field_validator("primary_shift")
    @classmethod
    def check_shift(cls, v: Optional[str]) -> Optional[str]:
        return _check_shift(v) if v else None


class ShiftRequestCreate(BaseModel):
    day: datetime.date
    shift: str = "OFF"
    month: Optional[str] = Field(None, pattern=r"^\d{4}-\d{2}$", description="Request must fall in this month")

    @field_validator("shift")
    @classmethod
    def check_shift(cls, v: str) -> str:
        return _check_shift(v)


class AssignmentIn(BaseModel):
    employee_id: str
    employee_name: str
    shift: str

    @field_validator("shift")
    @classmethod
    def check_shift(cls, v: str) -> str:
        return _check_shift(v)


class DayScheduleIn(BaseModel):
    assignments: List[AssignmentIn] = Field(default_factory=list)


class ShiftChange(BaseModel):
    employee_id: str
    shift: str

    @field_validator("shift")
    @classmethod
    def check_shift(cls, v: str) -> str:
        return _check_shift(v)


class GenerateScheduleRequest(BaseModel):
    month: str = Field(..., pattern=r"^\d{4}-\d{2}$", description="YYYY-MM")


# ─────────────────────────────────────────────
# Notes
# ─────────────────────────────────────────────

class NoteCreate(BaseModel):
    content: str = Field(..., min_length=1)
    color: str = Field("yellow", max_length=100)
    image_url: Optional[str] = Field(None, description="Attached image as a data URL")

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("content is required")
        return v

import pytest

from stockflow.models.staff import DaySchedule, Employee
from stockflow.modules import roster
from stockflow.utils.dates import month_days


def test_normalize_shift():
    assert roster.normalize_shift("noon 2") == "Noon 2"
    assert roster.normalize_shift(" off ") == "OFF"
    with pytest.raises(ValueError):
        roster.normalize_shift("Lunch")


def test_merge_assignments_replaces_by_employee():
    existing = [
        {"employee_id": "a", "employee_name": "Alice", "shift": "Morning"},
        {"employee_id": "b", "employee_name": "Bob", "shift": "OFF"},
    ]
    merged = roster.merge_assignments(existing, [
        {"employee_id": "b", "employee_name": "Bob", "shift": "Noon 1"},
        {"employee_id": "c", "employee_name": "Carol", "shift": "AL"},
    ])
    assert [(a["employee_id"], a["shift"]) for a in merged] == [("a", "Morning"), ("b", "Noon 1"), ("c", "AL")]
    assert existing[1]["shift"] == "OFF"


def test_month_days():
    days = month_days("2025-12")
    assert len(days) == 31
    assert days[0] == {"full_date": "2025-12-01", "day_num": 1, "day_name": "Mon", "is_weekend": False}
    assert days[5]["day_name"] == "Sat"
    assert days[5]["is_weekend"] is True
    assert len(month_days("2024-02")) == 29


def test_set_shift_creates_and_replaces(db):
    alice = Employee(name="Alice", primary_shift="Morning", requests=[])
    bob = Employee(name="Bob", primary_shift="Noon 2", requests=[])
    db.add_all([alice, bob])
    db.commit()

    roster.set_shift(db, "2025-12-01", alice, "Morning")
    roster.set_shift(db, "2025-12-01", bob, "off")
    roster.set_shift(db, "2025-12-01", alice, "AL")
    db.commit()

    schedule = db.query(DaySchedule).filter(DaySchedule.day == "2025-12-01").one()
    shifts = {a.employee_name: a.shift for a in schedule.assignments}
    assert shifts == {"Alice": "AL", "Bob": "OFF"}


def test_save_day_rejects_bad_date(db):
    with pytest.raises(ValueError):
        roster.save_day(db, "2025-13-01", [])


def test_apply_image_import(db):
    db.add(Employee(name="Alice", primary_shift="Morning", requests=[]))
    db.commit()

    result = roster.apply_image_import(db, {
        "employees": ["alice", "Bob", " "],
        "flat_assignments": [
            {"date": "2025-12-01", "employee_name": "ALICE", "shift": "morning"},
            {"date": "2025-12-01", "employee_name": "Bob", "shift": "Noon 2"},
            {"date": "not a date", "employee_name": "Bob", "shift": "OFF"},
            {"date": "2025-12-02", "employee_name": "Carol", "shift": "OFF"},
            {"date": "2025-12-02", "employee_name": "Bob", "shift": "Lunch"},
        ],
    })
    db.commit()

    assert result == {"employees_added": ["Bob"], "days_updated": ["2025-12-01"], "skipped": 3}
    assert db.query(Employee).count() == 2

    schedule = db.query(DaySchedule).filter(DaySchedule.day == "2025-12-01").one()
    shifts = {a.employee_name: a.shift for a in schedule.assignments}
    assert shifts == {"Alice": "Morning", "Bob": "Noon 2"}


def test_apply_image_import_merges_into_existing_day(db):
    alice = Employee(name="Alice", primary_shift="Morning", requests=[])
    bob = Employee(name="Bob", primary_shift="Morning", requests=[])
    db.add_all([alice, bob])
    db.commit()
    roster.save_day(db, "2025-12-03", [
        {"employee_id": alice.id, "employee_name": "Alice", "shift": "Morning"},
        {"employee_id": bob.id, "employee_name": "Bob", "shift": "Morning"},
    ])
    db.commit()

    roster.apply_image_import(db, {
        "employees": [],
        "flat_assignments": [{"date": "2025-12-03", "employee_name": "bob", "shift": "OFF"}],
    })
    db.commit()

    schedule = db.query(DaySchedule).filter(DaySchedule.day == "2025-12-03").one()
    shifts = {a.employee_name: a.shift for a in schedule.assignments}
    assert shifts == {"Alice": "Morning", "Bob": "OFF"}

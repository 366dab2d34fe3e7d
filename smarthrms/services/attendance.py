"""
Attendance tracking: daily check-in/check-out and attendance statistics
"""
from datetime import datetime, time
from typing import Any, Dict, Iterable, Optional
import os
import uuid

from dotenv import load_dotenv
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from smarthrms.services.db import attendance_coll, employees_coll
from smarthrms.models.response import AttendanceStats
from smarthrms.utils.exceptions import NotFoundError, BusinessLogicError, ConfigurationError
from smarthrms.utils.logging_config import get_logger

logger = get_logger(__name__)

load_dotenv()


def _parse_clock(value: str) -> time:
    try:
        hours, minutes = value.split(":")
        return time(int(hours), int(minutes))
    except ValueError as e:
        raise ConfigurationError(
            "LATE_AFTER must be a HH:MM time", config_key="LATE_AFTER", config_value=value, cause=e
        )


LATE_AFTER = _parse_clock(os.getenv("LATE_AFTER", "09:30"))

STATUS_PRESENT = "present"
STATUS_ABSENT = "absent"
STATUS_LATE = "late"
STATUS_HALF_DAY = "half-day"


def status_for_check_in(check_in: datetime, late_after: time = LATE_AFTER) -> str:
    return STATUS_LATE if check_in.time() > late_after else STATUS_PRESENT


def hours_between(check_in: datetime, check_out: datetime) -> float:
    """Worked hours rounded to two decimals"""
    return round((check_out - check_in).total_seconds() / 3600, 2)


def compute_attendance_stats(records: Iterable[Dict[str, Any]]) -> AttendanceStats:
    counts = {STATUS_PRESENT: 0, STATUS_LATE: 0, STATUS_ABSENT: 0, STATUS_HALF_DAY: 0}
    total = 0
    for record in records:
        total += 1
        status = record.get("status")
        if status in counts:
            counts[status] += 1

    attended = counts[STATUS_PRESENT] + counts[STATUS_LATE] + counts[STATUS_HALF_DAY]
    rate = round(attended / total * 100) if total else 0

    return AttendanceStats(
        present=counts[STATUS_PRESENT],
        late=counts[STATUS_LATE],
        absent=counts[STATUS_ABSENT],
        half_day=counts[STATUS_HALF_DAY],
        total=total,
        attendance_rate=rate,
    )


def _already_recorded(employee_id: str, day: str, rule: str) -> BusinessLogicError:
    return BusinessLogicError(
        f"Attendance for {employee_id} on {day} is already recorded",
        rule=rule,
        details={"employee_id": employee_id, "date": day},
    )


async def insert_daily_record(record: Dict[str, Any], rule: str) -> None:
    """Insert a day's record; the unique (employee_id, date) index rejects a concurrent second one"""
    try:
        await attendance_coll.insert_one(record)
    except DuplicateKeyError as e:
        logger.warning(f"Concurrent attendance insert for {record['employee_id']} on {record['date']}")
        raise _already_recorded(record["employee_id"], record["date"], rule) from e


async def check_in(employee_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Open today's attendance record for an employee"""
    now = now or datetime.utcnow()
    today = now.date().isoformat()

    employee = await employees_coll.find_one({"employee_id": employee_id})
    if not employee:
        raise NotFoundError(f"Employee {employee_id} not found", resource="employee", resource_id=employee_id)

    existing = await attendance_coll.find_one({"employee_id": employee_id, "date": today})
    if existing:
        raise _already_recorded(employee_id, today, "single_check_in_per_day")

    record = {
        "attendance_id": str(uuid.uuid4()),
        "employee_id": employee_id,
        "date": today,
        "check_in": now,
        "check_out": None,
        "status": status_for_check_in(now),
        "hours": 0,
    }
    await insert_daily_record(record, "single_check_in_per_day")

    logger.info(f"Employee {employee_id} checked in at {now.isoformat()} ({record['status']})")
    return record


async def record_day(employee_id: str, day: str, status: str, hours: float = 0) -> Dict[str, Any]:
    """Manually record a day's attendance (e.g. an absence)"""
    employee = await employees_coll.find_one({"employee_id": employee_id})
    if not employee:
        raise NotFoundError(f"Employee {employee_id} not found", resource="employee", resource_id=employee_id)

    existing = await attendance_coll.find_one({"employee_id": employee_id, "date": day})
    if existing:
        raise _already_recorded(employee_id, day, "single_record_per_day")

    record = {
        "attendance_id": str(uuid.uuid4()),
        "employee_id": employee_id,
        "date": day,
        "check_in": None,
        "check_out": None,
        "status": status,
        "hours": hours,
    }
    await insert_daily_record(record, "single_record_per_day")

    logger.info(f"Recorded {status} for {employee_id} on {day}")
    return record


async def check_out(employee_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Close today's attendance record and store the worked hours"""
    now = now or datetime.utcnow()
    today = now.date().isoformat()

    record = await attendance_coll.find_one({"employee_id": employee_id, "date": today})
    if not record:
        raise NotFoundError(
            f"No check-in found for employee {employee_id} on {today}",
            resource="attendance",
            resource_id=employee_id,
        )
    if record.get("check_out"):
        raise BusinessLogicError(
            f"Employee {employee_id} already checked out on {today}",
            rule="single_check_out_per_day",
            details={"employee_id": employee_id, "date": today},
        )
    if not record.get("check_in"):
        raise BusinessLogicError(
            f"Attendance for {employee_id} on {today} has no check-in time",
            rule="check_out_requires_check_in",
        )

    hours = hours_between(record["check_in"], now)
    updated = await attendance_coll.find_one_and_update(
        {"attendance_id": record["attendance_id"]},
        {"$set": {"check_out": now, "hours": hours}},
        return_document=ReturnDocument.AFTER,
    )

    logger.info(f"Employee {employee_id} checked out after {hours}h")
    return updated


def today_iso() -> str:
    # check-in/check-out stamp UTC dates
    return datetime.utcnow().date().isoformat()

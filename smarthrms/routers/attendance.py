from fastapi import APIRouter, Query
from datetime import date as date_type
from typing import Any, Dict, List, Optional

from smarthrms.services.db import attendance_coll
from smarthrms.services import attendance as attendance_service
from smarthrms.models.schemas import AttendanceModel
from smarthrms.models.payloads import CheckInPayload, AttendanceCreate
from smarthrms.models.response import AttendanceStats
from smarthrms.helpers.records import attendance_record

router = APIRouter()


@router.post("/check-in", response_model=AttendanceModel)
async def check_in(payload: CheckInPayload):
    """Record today's check-in for an employee"""
    record = await attendance_service.check_in(payload.employee_id)
    return AttendanceModel(**attendance_record(record))


@router.post("/check-out", response_model=AttendanceModel)
async def check_out(payload: CheckInPayload):
    """Record today's check-out and worked hours"""
    record = await attendance_service.check_out(payload.employee_id)
    return AttendanceModel(**attendance_record(record))


@router.post("", response_model=AttendanceModel)
async def record_attendance(payload: AttendanceCreate):
    """Manually record attendance for a day (e.g. an absence)"""
    record = await attendance_service.record_day(
        payload.employee_id, payload.date.isoformat(), payload.status, payload.hours
    )
    return AttendanceModel(**attendance_record(record))


def _query(employee_id: Optional[str], day: Optional[date_type]) -> Dict[str, Any]:
    query: Dict[str, Any] = {}
    if employee_id:
        query["employee_id"] = employee_id
    if day:
        query["date"] = day.isoformat()
    return query


@router.get("/all", response_model=List[AttendanceModel])
async def list_attendance(employee_id: Optional[str] = None, date: Optional[date_type] = None):
    """Get attendance records, optionally filtered by employee and/or date (newest first)"""
    cursor = attendance_coll.find(_query(employee_id, date))
    records = await cursor.to_list(length=None)
    normalized = sorted((attendance_record(r) for r in records), key=lambda r: str(r["date"]), reverse=True)
    return [AttendanceModel(**r) for r in normalized]


@router.get("/stats", response_model=AttendanceStats)
async def attendance_stats(date: Optional[date_type] = Query(None, description="Day to summarize (defaults to today)")):
    """Counts per attendance status and the attendance rate for a day"""
    day = date.isoformat() if date else attendance_service.today_iso()
    cursor = attendance_coll.find({"date": day})
    records = await cursor.to_list(length=None)
    return attendance_service.compute_attendance_stats(attendance_record(r) for r in records)

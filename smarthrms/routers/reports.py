# routers/reports.py
from datetime import datetime
from typing import List, Optional
import uuid

from fastapi import APIRouter, HTTPException

from smarthrms.services.db import (
    employees_coll,
    tasks_coll,
    leaves_coll,
    attendance_coll,
    reports_coll,
)
from smarthrms.services.dashboard import (
    compute_dashboard_stats,
    task_status_breakdown,
    workload_distribution,
)
from smarthrms.services.attendance import today_iso
from smarthrms.helpers.records import employee_record, task_record, leave_record, attendance_record
from smarthrms.routers.matching import build_skill_gap_response
from smarthrms.models.schemas import ReportModel
from smarthrms.models.payloads import SkillGapReportPayload
from smarthrms.models.response import DashboardStats, WorkloadResponse
from smarthrms.utils.logging_config import get_logger

router = APIRouter(prefix="/reports", tags=["reports"])
logger = get_logger(__name__)


async def _all(coll, query=None):
    cursor = coll.find(query or {})
    return await cursor.to_list(length=None)


@router.get("/dashboard", response_model=DashboardStats)
async def dashboard_stats():
    """Headline HR numbers for the dashboard"""
    employees = [employee_record(d) for d in await _all(employees_coll)]
    tasks = [task_record(d) for d in await _all(tasks_coll)]
    leaves = [leave_record(d) for d in await _all(leaves_coll)]
    attendance_today = [attendance_record(d) for d in await _all(attendance_coll, {"date": today_iso()})]
    return compute_dashboard_stats(employees, tasks, leaves, attendance_today)


@router.get("/workload", response_model=WorkloadResponse)
async def workload():
    """Task status breakdown and per-employee workload"""
    employees = [employee_record(d) for d in await _all(employees_coll)]
    tasks = [task_record(d) for d in await _all(tasks_coll)]
    return WorkloadResponse(
        task_status=task_status_breakdown(tasks),
        workload=workload_distribution(employees),
    )


@router.post("/skill-gaps", response_model=ReportModel)
async def generate_skill_gap_report(payload: Optional[SkillGapReportPayload] = None):
    """Run the skill gap analysis and store it as a report"""
    title = payload.title if payload else SkillGapReportPayload().title
    analysis = await build_skill_gap_response()

    report_doc = {
        "report_id": f"rep_gaps_{uuid.uuid4().hex[:12]}",
        "title": title,
        "type": "skill_gap",
        "data": analysis.model_dump(mode="json"),
        "generated_at": datetime.utcnow(),
    }
    await reports_coll.insert_one(report_doc)

    logger.info(
        f"Stored skill gap report {report_doc['report_id']}: "
        f"{analysis.shortages} shortage(s) across {len(analysis.gaps)} skill(s)"
    )
    return ReportModel(**report_doc)


@router.get("/all", response_model=List[ReportModel])
async def list_all_reports():
    """Get all stored reports, newest first"""
    reports = await _all(reports_coll)
    reports.sort(key=lambda r: str(r.get("generated_at", "")), reverse=True)
    return [ReportModel(**report) for report in reports]


@router.get("/{report_id}", response_model=ReportModel)
async def get_report_by_id(report_id: str):
    """Get a specific report by its ID"""
    report = await reports_coll.find_one({"report_id": report_id})
    if not report:
        raise HTTPException(status_code=404, detail="Report not found")
    return ReportModel(**report)

# models/response.py
from pydantic import BaseModel, Field
from typing import Dict, List
from datetime import datetime

from smarthrms.models.models import SkillMatch, SkillGapEntry


class RecommendationResponse(BaseModel):
    task_id: str
    top_n: int
    candidates_evaluated: int
    recommendations: List[SkillMatch]


class SkillGapResponse(BaseModel):
    employees_evaluated: int
    tasks_evaluated: int
    shortages: int
    gaps: List[SkillGapEntry]
    generated_at: datetime = Field(default_factory=datetime.utcnow)


class AttendanceStats(BaseModel):
    present: int = 0
    late: int = 0
    absent: int = 0
    half_day: int = 0
    total: int = 0
    attendance_rate: int = 0


class DashboardStats(BaseModel):
    total_employees: int = 0
    active_employees: int = 0
    total_tasks: int = 0
    pending_tasks: int = 0
    completed_tasks: int = 0
    present_today: int = 0
    pending_leaves: int = 0
    departments: int = 0


class WorkloadEntry(BaseModel):
    employee_id: str
    name: str
    tasks: int


class WorkloadResponse(BaseModel):
    task_status: Dict[str, int]
    workload: List[WorkloadEntry]

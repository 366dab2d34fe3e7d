from pydantic import BaseModel, Field
from typing import Any, Dict, List, Literal, Optional
from datetime import date, datetime

from smarthrms.models.models import Skill, RequiredSkill

TaskPriority = Literal["low", "medium", "high", "urgent"]
TaskStatus = Literal["pending", "assigned", "in-progress", "completed", "cancelled"]
LeaveType = Literal["sick", "vacation", "personal", "emergency"]
LeaveStatus = Literal["pending", "approved", "rejected"]
AttendanceStatus = Literal["present", "absent", "late", "half-day"]

# -------- Employees --------
class EmployeeModel(BaseModel):
    employee_id: str
    name: str
    email: str
    position: Optional[str] = None
    department: Optional[str] = None
    phone: Optional[str] = None
    experience: float = 0          # years
    salary: float = 0
    availability: int = 100        # percent
    current_tasks: int = 0
    join_date: Optional[date] = None
    skills: List[Skill] = []
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None

# -------- Tasks --------
class TaskModel(BaseModel):
    task_id: str
    title: str
    description: Optional[str] = None
    required_skills: List[RequiredSkill] = []
    priority: TaskPriority = "medium"
    status: TaskStatus = "pending"
    assigned_to: Optional[str] = None
    estimated_hours: float = 0
    progress: int = 0              # 0-100
    due_date: Optional[date] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    completed_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

# -------- Leave Requests --------
class LeaveRequestModel(BaseModel):
    leave_id: str
    employee_id: str
    type: LeaveType = "personal"
    start_date: date
    end_date: date
    days: int
    reason: Optional[str] = None
    status: LeaveStatus = "pending"
    applied_at: datetime = Field(default_factory=datetime.utcnow)
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None

# -------- Attendance --------
class AttendanceModel(BaseModel):
    attendance_id: str
    employee_id: str
    date: date
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    status: AttendanceStatus = "present"
    hours: float = 0

# -------- Reports --------
class ReportModel(BaseModel):
    report_id: str
    title: str
    type: str = "custom"
    data: Dict[str, Any] = {}
    generated_at: datetime = Field(default_factory=datetime.utcnow)

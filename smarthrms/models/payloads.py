from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Any, List, Optional
from datetime import date

from smarthrms.models.models import Importance
from smarthrms.models.schemas import (
    TaskPriority,
    TaskStatus,
    LeaveType,
    AttendanceStatus,
)

# Input schemas for the HR record endpoints

class SkillInput(BaseModel):
    """Skill held by an employee"""
    name: str = Field(..., min_length=1)
    level: int = Field(..., ge=1, le=5)
    category: str = ""

class RequiredSkillInput(BaseModel):
    """Skill a task requires"""
    name: str = Field(..., min_length=1)
    level: int = Field(..., ge=1, le=5)
    importance: Importance = "required"
    category: str = ""

def _blank_to_none(v):
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v

def _non_blank(v):
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("must not be blank")
    return v

def _drop_nulls(data: Any, fields) -> Any:
    # a null for a field the stored record requires means "leave unchanged"
    if isinstance(data, dict):
        return {k: v for k, v in data.items() if not (v is None and k in fields)}
    return data

class EmployeeCreate(BaseModel):
    name: str
    email: str
    position: Optional[str] = None
    department: Optional[str] = None
    phone: Optional[str] = None
    experience: float = Field(0, ge=0)
    salary: float = Field(0, ge=0)
    availability: int = Field(100, ge=0, le=100)
    current_tasks: int = Field(0, ge=0)
    join_date: Optional[date] = None
    skills: List[SkillInput] = []

    @field_validator("name", "email")
    @classmethod
    def _required_text(cls, v: str) -> str:
        return _non_blank(v)

    @field_validator("position", "department", "phone", mode="before")
    @classmethod
    def _optional_text(cls, v):
        return _blank_to_none(v)

class EmployeeUpdate(BaseModel):
    """Partial update; only fields that are set are written"""
    name: Optional[str] = None
    position: Optional[str] = None
    department: Optional[str] = None
    phone: Optional[str] = None
    experience: Optional[float] = Field(None, ge=0)
    salary: Optional[float] = Field(None, ge=0)
    availability: Optional[int] = Field(None, ge=0, le=100)
    skills: Optional[List[SkillInput]] = None

    @model_validator(mode="before")
    @classmethod
    def _ignore_required_nulls(cls, data):
        return _drop_nulls(data, ("name", "experience", "salary", "availability", "skills"))

    @field_validator("name")
    @classmethod
    def _required_text(cls, v):
        return _non_blank(v)

    @field_validator("position", "department", "phone", mode="before")
    @classmethod
    def _optional_text(cls, v):
        return _blank_to_none(v)

class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = None
    required_skills: List[RequiredSkillInput] = []
    priority: TaskPriority = "medium"
    status: TaskStatus = "pending"
    assigned_to: Optional[str] = None
    estimated_hours: float = Field(0, ge=0)
    progress: int = Field(0, ge=0, le=100)
    due_date: Optional[date] = None

    @field_validator("title")
    @classmethod
    def _required_text(cls, v: str) -> str:
        return _non_blank(v)

    @field_validator("description", "assigned_to", mode="before")
    @classmethod
    def _optional_text(cls, v):
        return _blank_to_none(v)

class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    required_skills: Optional[List[RequiredSkillInput]] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None
    estimated_hours: Optional[float] = Field(None, ge=0)
    progress: Optional[int] = Field(None, ge=0, le=100)
    due_date: Optional[date] = None

    @model_validator(mode="before")
    @classmethod
    def _ignore_required_nulls(cls, data):
        return _drop_nulls(
            data, ("title", "required_skills", "priority", "status", "estimated_hours", "progress")
        )

    @field_validator("title")
    @classmethod
    def _required_text(cls, v):
        return _non_blank(v)

    @field_validator("description", mode="before")
    @classmethod
    def _optional_text(cls, v):
        return _blank_to_none(v)

class TaskAssignPayload(BaseModel):
    employee_id: str

class LeaveRequestCreate(BaseModel):
    employee_id: str
    type: LeaveType = "personal"
    start_date: date
    end_date: date
    reason: Optional[str] = None

class ReviewPayload(BaseModel):
    """Approve/reject a leave request"""
    reviewed_by: Optional[str] = None

class CheckInPayload(BaseModel):
    employee_id: str

class AttendanceCreate(BaseModel):
    """Manually recorded attendance (e.g. absences)"""
    employee_id: str
    date: date
    status: AttendanceStatus = "absent"
    hours: float = Field(0, ge=0, le=24)

class SkillGapReportPayload(BaseModel):
    title: str = "Skill Gap Analysis"

"""
Adapters from stored documents to canonical record shapes.

Records written by older clients use camelCase or lowercase column names
(checkIn, check_in, joindate, ...) and skills may arrive as join rows
({"level": 4, "skills": {"name": ..., "category": ...}}). Everything that
reads from the store goes through these functions so the rest of the code
sees one shape.
"""
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from smarthrms.models.models import Employee, Task, Skill, RequiredSkill

_MISSING = (None, "")


def pick(doc: Dict[str, Any], *names: str, default: Any = None) -> Any:
    """Return the first field variant that is present and non-empty."""
    if not doc:
        return default
    for name in names:
        value = doc.get(name)
        if value not in _MISSING:
            return value
    return default


def _as_int(value: Any, default: int = 0) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


def _as_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _skill_fields(row: Any) -> Optional[Dict[str, Any]]:
    # flat {"name", "level", "category"} or a join row with a nested "skills"/"skill"
    if not isinstance(row, dict):
        return None
    nested = row.get("skills") or row.get("skill")
    source = nested if isinstance(nested, dict) else row
    name = source.get("name")
    if not isinstance(name, str) or not name.strip():
        return None
    return {
        "name": name.strip(),
        "level": _as_int(row.get("level", source.get("level"))),
        "category": source.get("category") or "",
        "importance": row.get("importance"),
    }


def skills_from_rows(rows: Any) -> List[Skill]:
    out = []
    for row in rows or []:
        fields = _skill_fields(row)
        if fields:
            out.append(Skill(name=fields["name"], level=fields["level"], category=fields["category"]))
    return out


def required_skills_from_rows(rows: Any) -> List[RequiredSkill]:
    out = []
    for row in rows or []:
        fields = _skill_fields(row)
        if not fields:
            continue
        importance = fields["importance"]
        if importance not in ("required", "preferred", "nice-to-have"):
            importance = "nice-to-have"
        out.append(RequiredSkill(
            name=fields["name"],
            level=fields["level"],
            importance=importance,
            category=fields["category"],
        ))
    return out


def employee_from_doc(doc: Dict[str, Any]) -> Employee:
    """Stored employee document -> scoring input."""
    return Employee(
        id=str(pick(doc, "employee_id", "id", "_id", default="")),
        name=pick(doc, "name", default=""),
        skills=skills_from_rows(pick(doc, "skills", "employee_skills", default=[])),
        availability=_as_int(pick(doc, "availability", default=100), default=100),
    )


def task_from_doc(doc: Dict[str, Any]) -> Task:
    """Stored task document -> scoring input."""
    return Task(
        id=str(pick(doc, "task_id", "id", "_id", default="")),
        title=pick(doc, "title", default=""),
        required_skills=required_skills_from_rows(
            pick(doc, "required_skills", "requiredSkills", "task_required_skills", default=[])
        ),
    )


def employee_record(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Stored employee document -> EmployeeModel fields."""
    return {
        "employee_id": str(pick(doc, "employee_id", "id", "_id", default="")),
        "name": pick(doc, "name", default=""),
        "email": pick(doc, "email", default=""),
        "position": pick(doc, "position"),
        "department": pick(doc, "department"),
        "phone": pick(doc, "phone"),
        "experience": _as_float(pick(doc, "experience", default=0)),
        "salary": _as_float(pick(doc, "salary", default=0)),
        "availability": _as_int(pick(doc, "availability", default=100), default=100),
        "current_tasks": _as_int(pick(doc, "current_tasks", "currentTasks", "currenttasks", default=0)),
        "join_date": pick(doc, "join_date", "joinDate", "joindate"),
        "skills": skills_from_rows(pick(doc, "skills", "employee_skills", default=[])),
        "created_at": pick(doc, "created_at", "createdAt", default=datetime.utcnow()),
        "updated_at": pick(doc, "updated_at", "updatedAt"),
    }


def task_record(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Stored task document -> TaskModel fields."""
    return {
        "task_id": str(pick(doc, "task_id", "id", "_id", default="")),
        "title": pick(doc, "title", default=""),
        "description": pick(doc, "description"),
        "required_skills": required_skills_from_rows(
            pick(doc, "required_skills", "requiredSkills", "task_required_skills", default=[])
        ),
        "priority": pick(doc, "priority", default="medium"),
        "status": pick(doc, "status", default="pending"),
        "assigned_to": pick(doc, "assigned_to", "assignedTo"),
        "estimated_hours": _as_float(pick(doc, "estimated_hours", "estimatedHours", "estimatedhours", default=0)),
        "progress": _as_int(pick(doc, "progress", default=0)),
        "due_date": pick(doc, "due_date", "dueDate"),
        "created_at": pick(doc, "created_at", "createdAt", default=datetime.utcnow()),
        "completed_at": pick(doc, "completed_at", "completedAt"),
        "updated_at": pick(doc, "updated_at", "updatedAt"),
    }


def leave_record(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Stored leave document -> LeaveRequestModel fields."""
    return {
        "leave_id": str(pick(doc, "leave_id", "id", "_id", default="")),
        "employee_id": str(pick(doc, "employee_id", "employeeId", "user_id", default="")),
        "type": pick(doc, "type", default="personal"),
        "start_date": pick(doc, "start_date", "startDate"),
        "end_date": pick(doc, "end_date", "endDate"),
        "days": _as_int(pick(doc, "days", default=0)),
        "reason": pick(doc, "reason"),
        "status": pick(doc, "status", default="pending"),
        "applied_at": pick(doc, "applied_at", "appliedAt", "created_at", default=datetime.utcnow()),
        "reviewed_by": pick(doc, "reviewed_by", "reviewedBy", "approved_by"),
        "reviewed_at": pick(doc, "reviewed_at", "reviewedAt"),
    }


def attendance_record(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Stored attendance document -> AttendanceModel fields."""
    return {
        "attendance_id": str(pick(doc, "attendance_id", "id", "_id", default="")),
        "employee_id": str(pick(doc, "employee_id", "employeeId", "user_id", default="")),
        "date": pick(doc, "date"),
        "check_in": pick(doc, "check_in", "checkIn"),
        "check_out": pick(doc, "check_out", "checkOut"),
        "status": pick(doc, "status", default="present"),
        "hours": _as_float(pick(doc, "hours", "total_hours", "totalHours", default=0)),
    }


def to_document(data: Dict[str, Any]) -> Dict[str, Any]:
    """Prepare a dict for storage: BSON has no date type, so plain dates become ISO strings."""
    out = {}
    for key, value in data.items():
        if isinstance(value, date) and not isinstance(value, datetime):
            out[key] = value.isoformat()
        elif isinstance(value, list):
            out[key] = [to_document(v) if isinstance(v, dict) else v for v in value]
        else:
            out[key] = value
    return out

"""
Dashboard and report aggregations over normalized HR records
"""
from typing import Any, Dict, Iterable, List, Sequence

from smarthrms.models.response import DashboardStats, WorkloadEntry

TASK_STATUSES = ("pending", "assigned", "in-progress", "completed", "cancelled")
OPEN_TASK_STATUSES = ("pending", "assigned", "in-progress")


def compute_dashboard_stats(
    employees: Sequence[Dict[str, Any]],
    tasks: Sequence[Dict[str, Any]],
    leaves: Sequence[Dict[str, Any]],
    attendance_today: Sequence[Dict[str, Any]],
) -> DashboardStats:
    departments = {e.get("department") for e in employees if e.get("department")}

    return DashboardStats(
        total_employees=len(employees),
        active_employees=sum(1 for e in employees if (e.get("availability") or 0) > 0),
        total_tasks=len(tasks),
        pending_tasks=sum(1 for t in tasks if t.get("status") in OPEN_TASK_STATUSES),
        completed_tasks=sum(1 for t in tasks if t.get("status") == "completed"),
        present_today=sum(1 for a in attendance_today if a.get("status") != "absent"),
        pending_leaves=sum(1 for l in leaves if l.get("status") == "pending"),
        departments=len(departments),
    )


def task_status_breakdown(tasks: Iterable[Dict[str, Any]]) -> Dict[str, int]:
    breakdown = {status: 0 for status in TASK_STATUSES}
    for task in tasks:
        status = task.get("status")
        if status in breakdown:
            breakdown[status] += 1
    return breakdown


def workload_distribution(employees: Iterable[Dict[str, Any]]) -> List[WorkloadEntry]:
    return [
        WorkloadEntry(
            employee_id=e.get("employee_id", ""),
            name=e.get("name", ""),
            tasks=e.get("current_tasks") or 0,
        )
        for e in employees
    ]

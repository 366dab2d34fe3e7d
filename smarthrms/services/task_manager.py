"""
Task Management Service for task creation, assignment and status changes
"""
from datetime import datetime
from typing import Any, Dict, Optional
import uuid

from pymongo import ReturnDocument

from smarthrms.services.db import tasks_coll, employees_coll
from smarthrms.models.payloads import TaskCreate, TaskUpdate
from smarthrms.helpers.records import to_document
from smarthrms.utils.exceptions import NotFoundError, BusinessLogicError
from smarthrms.utils.logging_config import get_logger

logger = get_logger(__name__)


class TaskManager:
    """Manages task lifecycle and keeps employee workload counters in sync"""

    # Task status constants
    STATUS_PENDING = "pending"
    STATUS_ASSIGNED = "assigned"
    STATUS_IN_PROGRESS = "in-progress"
    STATUS_COMPLETED = "completed"
    STATUS_CANCELLED = "cancelled"

    OPEN_STATUSES = (STATUS_PENDING, STATUS_ASSIGNED, STATUS_IN_PROGRESS)
    CLOSED_STATUSES = (STATUS_COMPLETED, STATUS_CANCELLED)

    @staticmethod
    async def _require_employee(employee_id: str) -> Dict[str, Any]:
        employee = await employees_coll.find_one({"employee_id": employee_id})
        if not employee:
            raise NotFoundError(f"Employee {employee_id} not found", resource="employee", resource_id=employee_id)
        return employee

    @staticmethod
    async def _require_task(task_id: str) -> Dict[str, Any]:
        task = await tasks_coll.find_one({"task_id": task_id})
        if not task:
            raise NotFoundError(f"Task {task_id} not found", resource="task", resource_id=task_id)
        return task

    @staticmethod
    async def _adjust_workload(employee_id: Optional[str], delta: int) -> None:
        if not employee_id or delta == 0:
            return
        query: Dict[str, Any] = {"employee_id": employee_id}
        if delta < 0:
            # never drive the counter below zero
            query["current_tasks"] = {"$gte": -delta}
        await employees_coll.update_one(query, {"$inc": {"current_tasks": delta}})

    @staticmethod
    async def create_task(payload: TaskCreate) -> Dict[str, Any]:
        """Store a new task; an initial assignee must exist and moves a pending task to assigned"""
        task_data = to_document(payload.model_dump())
        task_data.update({
            "task_id": str(uuid.uuid4()),
            "created_at": datetime.utcnow(),
            "completed_at": None,
            "updated_at": None,
        })

        if payload.assigned_to:
            await TaskManager._require_employee(payload.assigned_to)
            if task_data["status"] == TaskManager.STATUS_PENDING:
                task_data["status"] = TaskManager.STATUS_ASSIGNED

        if task_data["status"] == TaskManager.STATUS_COMPLETED:
            task_data["completed_at"] = task_data["created_at"]
            task_data["progress"] = 100

        await tasks_coll.insert_one(task_data)

        if payload.assigned_to and task_data["status"] in TaskManager.OPEN_STATUSES:
            await TaskManager._adjust_workload(payload.assigned_to, 1)

        logger.info(f"Created task {task_data['task_id']} ({task_data['title']})")
        return task_data

    @staticmethod
    async def assign_task(task_id: str, employee_id: str) -> Dict[str, Any]:
        """Assign a task to an employee and move it to 'assigned'"""
        task = await TaskManager._require_task(task_id)
        await TaskManager._require_employee(employee_id)

        if task.get("status") in TaskManager.CLOSED_STATUSES:
            raise BusinessLogicError(
                f"Task {task_id} is {task.get('status')} and cannot be assigned",
                rule="closed_task_assignment",
                details={"task_id": task_id, "status": task.get("status")},
            )

        previous = task.get("assigned_to")
        updated = await tasks_coll.find_one_and_update(
            {"task_id": task_id},
            {"$set": {
                "assigned_to": employee_id,
                "status": TaskManager.STATUS_ASSIGNED,
                "updated_at": datetime.utcnow(),
            }},
            return_document=ReturnDocument.AFTER,
        )

        if previous != employee_id:
            await TaskManager._adjust_workload(previous, -1)
            await TaskManager._adjust_workload(employee_id, 1)

        logger.info(f"Assigned task {task_id} to employee {employee_id} (previous: {previous})")
        return updated

    @staticmethod
    async def update_task(task_id: str, updates: TaskUpdate) -> Dict[str, Any]:
        """Apply a partial update; closing a task releases the assignee's workload slot"""
        task = await TaskManager._require_task(task_id)

        changes = to_document(updates.model_dump(exclude_unset=True))
        if not changes:
            return task

        now = datetime.utcnow()
        changes["updated_at"] = now

        new_status = changes.get("status")
        if new_status == TaskManager.STATUS_COMPLETED:
            changes["completed_at"] = now
            changes["progress"] = 100

        updated = await tasks_coll.find_one_and_update(
            {"task_id": task_id},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )

        was_open = task.get("status", TaskManager.STATUS_PENDING) in TaskManager.OPEN_STATUSES
        if was_open and new_status in TaskManager.CLOSED_STATUSES:
            await TaskManager._adjust_workload(task.get("assigned_to"), -1)
        elif not was_open and new_status in TaskManager.OPEN_STATUSES:
            # reopened: the assignee carries it again
            await TaskManager._adjust_workload(task.get("assigned_to"), 1)

        logger.info(f"Updated task {task_id}: {sorted(changes)}")
        return updated

    @staticmethod
    async def delete_task(task_id: str) -> None:
        task = await TaskManager._require_task(task_id)
        await tasks_coll.delete_one({"task_id": task_id})
        if task.get("status", TaskManager.STATUS_PENDING) in TaskManager.OPEN_STATUSES:
            await TaskManager._adjust_workload(task.get("assigned_to"), -1)
        logger.info(f"Deleted task {task_id}")

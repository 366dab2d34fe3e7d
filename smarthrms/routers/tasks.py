from fastapi import APIRouter, HTTPException, Query
from typing import List

from smarthrms.services.db import tasks_coll
from smarthrms.services.task_manager import TaskManager
from smarthrms.models.schemas import TaskModel
from smarthrms.models.payloads import TaskCreate, TaskUpdate, TaskAssignPayload
from smarthrms.helpers.records import task_record

router = APIRouter()


def _newest_first(docs):
    return sorted((task_record(d) for d in docs), key=lambda t: str(t["created_at"]), reverse=True)


@router.post("", response_model=TaskModel)
async def create_task(payload: TaskCreate):
    """Create a task with its required skills"""
    task = await TaskManager.create_task(payload)
    return TaskModel(**task_record(task))


@router.get("/all", response_model=List[TaskModel])
async def list_all_tasks():
    """Get all tasks, newest first"""
    cursor = tasks_coll.find({})
    tasks = await cursor.to_list(length=None)
    return [TaskModel(**t) for t in _newest_first(tasks)]


@router.get("/status", response_model=List[TaskModel])
async def list_tasks_by_status(status: str = Query(..., description="Task status (e.g., 'pending', 'assigned', 'completed')")):
    """Get all tasks with a specific status"""
    cursor = tasks_coll.find({"status": status})
    tasks = await cursor.to_list(length=None)
    return [TaskModel(**t) for t in _newest_first(tasks)]


@router.get("/employee/{employee_id}", response_model=List[TaskModel])
async def list_tasks_for_employee(employee_id: str):
    """Get all tasks assigned to an employee"""
    cursor = tasks_coll.find({"assigned_to": employee_id})
    tasks = await cursor.to_list(length=None)
    return [TaskModel(**t) for t in _newest_first(tasks)]


@router.get("/{task_id}", response_model=TaskModel)
async def get_task(task_id: str):
    """Fetch a task by ID"""
    task = await tasks_coll.find_one({"task_id": task_id})
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return TaskModel(**task_record(task))


@router.patch("/{task_id}", response_model=TaskModel)
async def update_task(task_id: str, updates: TaskUpdate):
    """Update task fields; completing a task stamps completed_at"""
    task = await TaskManager.update_task(task_id, updates)
    return TaskModel(**task_record(task))


@router.post("/{task_id}/assign", response_model=TaskModel)
async def assign_task(task_id: str, payload: TaskAssignPayload):
    """Assign a task to an employee"""
    task = await TaskManager.assign_task(task_id, payload.employee_id)
    return TaskModel(**task_record(task))


@router.delete("/{task_id}")
async def delete_task(task_id: str):
    """Delete a task"""
    await TaskManager.delete_task(task_id)
    return {"task_id": task_id, "deleted": True}

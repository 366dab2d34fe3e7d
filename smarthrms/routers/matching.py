# routers/matching.py
import os
from typing import Optional

from dotenv import load_dotenv
from fastapi import APIRouter, HTTPException, Query

from smarthrms.services.db import employees_coll, tasks_coll
from smarthrms.services.matching import (
    calculate_skill_match,
    find_best_employees_for_task,
    get_skill_gaps,
)
from smarthrms.helpers.records import employee_from_doc, task_from_doc
from smarthrms.models.models import SkillMatch
from smarthrms.models.response import RecommendationResponse, SkillGapResponse
from smarthrms.utils.exceptions import ConfigurationError
from smarthrms.utils.logging_config import get_logger, log_function_call, PerformanceMonitor

load_dotenv()

router = APIRouter(prefix="/match", tags=["matching"])
logger = get_logger(__name__)

try:
    RECOMMENDATION_TOP_N = int(os.getenv("RECOMMENDATION_TOP_N", "5"))
except ValueError as e:
    raise ConfigurationError(
        "RECOMMENDATION_TOP_N must be an integer",
        config_key="RECOMMENDATION_TOP_N",
        config_value=os.getenv("RECOMMENDATION_TOP_N"),
        cause=e,
    )

# tasks that no longer create demand for skills
CLOSED_TASK_STATUSES = ["completed", "cancelled"]


async def _load_task(task_id: str):
    task_doc = await tasks_coll.find_one({"task_id": task_id})
    if not task_doc:
        raise HTTPException(status_code=404, detail="Task not found")
    return task_from_doc(task_doc)


async def _load_employees():
    cursor = employees_coll.find({})
    docs = await cursor.to_list(length=None)
    return [employee_from_doc(d) for d in docs]


@router.get("/tasks/{task_id}/recommendations", response_model=RecommendationResponse)
async def recommend_employees(task_id: str, top_n: Optional[int] = Query(None, description="Number of candidates to return")):
    """Rank employees for a task by skill match and availability"""
    top_n = RECOMMENDATION_TOP_N if top_n is None else top_n
    task = await _load_task(task_id)
    employees = await _load_employees()

    with PerformanceMonitor(f"rank_candidates[{task_id}]", logger, threshold_ms=250):
        recommendations = find_best_employees_for_task(employees, task, top_n)

    logger.info(
        f"Ranked {len(employees)} employees for task {task_id}, returning {len(recommendations)}"
    )
    return RecommendationResponse(
        task_id=task_id,
        top_n=top_n,
        candidates_evaluated=len(employees),
        recommendations=recommendations,
    )


@router.get("/tasks/{task_id}/employees/{employee_id}", response_model=SkillMatch)
async def match_employee_to_task(task_id: str, employee_id: str):
    """Skill match of a single employee against a task"""
    task = await _load_task(task_id)
    employee_doc = await employees_coll.find_one({"employee_id": employee_id})
    if not employee_doc:
        raise HTTPException(status_code=404, detail="Employee not found")
    return calculate_skill_match(employee_from_doc(employee_doc), task)


@log_function_call
async def build_skill_gap_response() -> SkillGapResponse:
    employees = await _load_employees()
    cursor = tasks_coll.find({"status": {"$nin": CLOSED_TASK_STATUSES}})
    tasks = [task_from_doc(d) for d in await cursor.to_list(length=None)]

    with PerformanceMonitor("skill_gap_analysis", logger, threshold_ms=250):
        gaps = get_skill_gaps(employees, tasks)

    return SkillGapResponse(
        employees_evaluated=len(employees),
        tasks_evaluated=len(tasks),
        shortages=sum(1 for g in gaps if g.gap > 0),
        gaps=gaps,
    )


@router.get("/skill-gaps", response_model=SkillGapResponse)
async def skill_gaps():
    """Organization-wide skill demand vs. proficient supply"""
    return await build_skill_gap_response()

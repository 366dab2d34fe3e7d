"""
Skill matching: per-task match scores, candidate ranking and
organization-wide skill gap analysis.

All functions are pure. Missing or malformed input yields low or empty
results instead of errors.
"""
import math
from typing import Dict, List, Optional, Sequence

from smarthrms.models.models import Employee, Task, SkillMatch, SkillGapEntry

IMPORTANCE_WEIGHTS: Dict[str, int] = {"required": 3, "preferred": 2, "nice-to-have": 1}
MAX_SKILL_LEVEL = 5
PROFICIENT_LEVEL = 3
SKILL_WEIGHT = 0.7
AVAILABILITY_WEIGHT = 0.3
DEFAULT_TOP_N = 5


def importance_weight(importance: str) -> int:
    return IMPORTANCE_WEIGHTS.get(importance, 1)


def level_ratio(employee_level: int, required_level: int) -> float:
    """Fraction of the required level the employee reaches, capped at 1."""
    if required_level <= 0:
        return 1.0
    return min(employee_level / required_level, 1.0)


def calculate_skill_match(employee: Employee, task: Task) -> SkillMatch:
    """Score one employee against one task's required skills (0..100)."""
    employee_skills = {}
    for skill in employee.skills or []:
        # first occurrence wins when a name is duplicated
        employee_skills.setdefault(skill.name, skill)

    total_score = 0.0
    max_score = 0.0
    matched_skills = []
    missing_skills = []

    for required in task.required_skills or []:
        weight = importance_weight(required.importance)
        max_score += weight * MAX_SKILL_LEVEL

        held = employee_skills.get(required.name)
        if held is None:
            missing_skills.append(required)
            continue

        skill_score = level_ratio(held.level, required.level) * MAX_SKILL_LEVEL
        total_score += skill_score * weight
        matched_skills.append(held)
        if held.level < required.level:
            missing_skills.append(required)

    # no requirements means no demonstrable match
    match_score = (total_score / max_score) * 100 if max_score > 0 else 0

    return SkillMatch(
        employee_id=employee.id,
        match_score=round_half_up(match_score),
        matched_skills=matched_skills,
        missing_skills=missing_skills,
        availability_score=employee.availability or 0,
    )


def round_half_up(value: float) -> int:
    # round(62.5) would give 62; scores round half up
    return int(math.floor(value + 0.5))


def combined_score(match: SkillMatch) -> float:
    return match.match_score * SKILL_WEIGHT + match.availability_score * AVAILABILITY_WEIGHT


def find_best_employees_for_task(
    employees: Optional[Sequence[Employee]],
    task: Optional[Task],
    top_n: int = DEFAULT_TOP_N,
) -> List[SkillMatch]:
    """Rank employees for a task by skill match blended with availability."""
    if not employees or task is None or top_n <= 0:
        return []

    matches = []
    for employee in employees:
        match = calculate_skill_match(employee, task)
        match.combined_score = combined_score(match)
        matches.append(match)

    # sorted() is stable, so input order breaks ties
    matches = sorted(matches, key=lambda m: m.combined_score, reverse=True)
    return matches[:top_n]


def get_skill_gaps(
    employees: Optional[Sequence[Employee]],
    tasks: Optional[Sequence[Task]],
) -> List[SkillGapEntry]:
    """Demand (tasks requiring a skill) minus supply (proficient employees), largest gap first."""
    if not employees or not tasks:
        return []

    demand: Dict[str, int] = {}
    supply: Dict[str, int] = {}

    for task in tasks:
        for required in task.required_skills or []:
            demand[required.name] = demand.get(required.name, 0) + 1

    for employee in employees:
        for skill in employee.skills or []:
            if skill.level >= PROFICIENT_LEVEL:
                supply[skill.name] = supply.get(skill.name, 0) + 1
            else:
                # held below proficiency: still listed, contributes no supply
                supply.setdefault(skill.name, 0)

    skills = list(demand)
    skills.extend(name for name in supply if name not in demand)

    gaps = [
        SkillGapEntry(
            skill=name,
            demand=demand.get(name, 0),
            supply=supply.get(name, 0),
            gap=demand.get(name, 0) - supply.get(name, 0),
        )
        for name in skills
    ]
    return sorted(gaps, key=lambda g: g.gap, reverse=True)

from pydantic import BaseModel, Field
from typing import List, Literal, Optional

Importance = Literal["required", "preferred", "nice-to-have"]


class Skill(BaseModel):
    name: str
    level: int = 0          # 1 (novice) .. 5 (expert)
    category: str = ""


class RequiredSkill(BaseModel):
    name: str
    level: int = 1          # minimum level required
    importance: Importance = "nice-to-have"
    category: str = ""


class Employee(BaseModel):
    id: str
    name: str = ""
    skills: List[Skill] = Field(default_factory=list)
    availability: int = 0   # free capacity, percent


class Task(BaseModel):
    id: str
    title: str = ""
    required_skills: List[RequiredSkill] = Field(default_factory=list)


class SkillMatch(BaseModel):
    employee_id: str
    match_score: int
    matched_skills: List[Skill] = Field(default_factory=list)
    missing_skills: List[RequiredSkill] = Field(default_factory=list)
    availability_score: int = 0
    combined_score: Optional[float] = None


class SkillGapEntry(BaseModel):
    skill: str
    demand: int
    supply: int
    gap: int

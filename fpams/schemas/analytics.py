# fpams/schemas/analytics.py
from pydantic import BaseModel


class AggregateResult(BaseModel):
    total_marks: float = 0
    avg_feedback: float = 0
    counts: int = 0


class DepartmentAnalytics(BaseModel):
    department_id: int | None = None  # None for the unassigned bucket
    department_name: str
    department_code: str
    total_faculty: int
    total_activities: int
    approved_activities: int
    avg_marks: float
    avg_feedback: float


class FacultyReport(BaseModel):
    faculty_id: int
    name: str
    email: str
    total_activities: int
    total_activity_marks: float
    total_teaching_marks: float
    avg_feedback: float
    overall_score: float


class DepartmentReport(BaseModel):
    department: str
    code: str
    faculty: list[FacultyReport]
    avg_department_score: float


class YearTrend(BaseModel):
    count: int = 0
    total_marks: float = 0


class IqacReport(BaseModel):
    departments: list[DepartmentReport]
    year_wise_trends: dict[str, YearTrend]

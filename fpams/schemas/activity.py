# fpams/schemas/activity.py
from typing import Annotated, Union

from pydantic import BaseModel, Field

from fpams.schemas.submission import SubmissionPublic
from fpams.services.marks_formula import Category

# formula inputs are non-negative counts, flags or supplied marks
DetailValue = Union[
    Annotated[int, Field(ge=0)],
    Annotated[float, Field(ge=0)],
    bool,
]


class ActivityCreate(BaseModel):
    category: Category
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    academic_year: str = Field(min_length=1, max_length=20)
    proof_url: str | None = None
    details: dict[str, DetailValue] = Field(default_factory=dict)


class ActivityUpdate(BaseModel):
    category: Category | None = None
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    academic_year: str | None = Field(default=None, min_length=1, max_length=20)
    proof_url: str | None = None
    details: dict[str, DetailValue] | None = None


class ActivityPublic(SubmissionPublic):
    category: str
    title: str
    description: str | None = None
    details: dict = Field(default_factory=dict)

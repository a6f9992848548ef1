# fpams/schemas/category.py
from pydantic import BaseModel, Field

from fpams.schemas.activity import DetailValue


class CategoryPublic(BaseModel):
    code: str
    name: str
    max_marks: float
    display_max: float
    formula: str
    validator: str


class FormulaPreviewRequest(BaseModel):
    category: str
    details: dict[str, DetailValue] = Field(default_factory=dict)


class FormulaPreviewResult(BaseModel):
    category: str
    marks: float
    max_marks: float | None = None
    has_formula: bool

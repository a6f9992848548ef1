# fpams/api/v1/endpoints/categories.py
from typing import List

from fastapi import APIRouter, Depends

from fpams.core.security import get_current_user
from fpams.models.user import User
from fpams.schemas.category import CategoryPublic, FormulaPreviewRequest, FormulaPreviewResult
from fpams.services import marks_formula

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("/", response_model=List[CategoryPublic])
def list_categories(current_user: User = Depends(get_current_user)):
    return [
        CategoryPublic(
            code=category.value,
            name=rule.name,
            max_marks=rule.max_marks,
            display_max=rule.display_max if rule.display_max is not None else rule.max_marks,
            formula=rule.formula,
            validator=rule.validator,
        )
        for category, rule in marks_formula.CATEGORY_RULES.items()
    ]


@router.post("/preview", response_model=FormulaPreviewResult)
def preview_marks(
    payload: FormulaPreviewRequest,
    current_user: User = Depends(get_current_user),
):
    """
    What the formula would award for the given details; nothing is stored.
    """
    return FormulaPreviewResult(
        category=payload.category,
        marks=marks_formula.compute_marks(payload.category, payload.details),
        max_marks=marks_formula.max_marks(payload.category),
        has_formula=marks_formula.has_formula(payload.category),
    )

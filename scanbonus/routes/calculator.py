"""
Calculator API routes
Bonus calculation for a full report card or a single grade
"""
from fastapi import APIRouter, Depends

from scanbonus.schemas import (
    CalculateRequest,
    CalculateResponse,
    QuickGradeRequest,
    QuickGradeResponse,
)
from scanbonus.services import BonusService
from .deps import get_caller_id, get_bonus_service

router = APIRouter()


@router.post("/calculate", response_model=CalculateResponse)
async def calculate_bonus(
    request: CalculateRequest,
    caller_id: str = Depends(get_caller_id),
    service: BonusService = Depends(get_bonus_service)
):
    """
    Calculate the bonus for a report card
    """
    result = service.calculate(
        grading_system_id=request.grading_system_id,
        class_level=request.class_level,
        term_type=request.term_type,
        subjects=[s.model_dump() for s in request.subjects],
        user_id=caller_id,
        child_id=request.child_id
    )
    return CalculateResponse(success=True, **result.to_dict())


@router.post("/quick", response_model=QuickGradeResponse)
async def calculate_quick_grade(
    request: QuickGradeRequest,
    caller_id: str = Depends(get_caller_id),
    service: BonusService = Depends(get_bonus_service)
):
    """
    Calculate the bonus for one grade (no term factor)
    """
    result = service.calculate_quick(
        grading_system_id=request.grading_system_id,
        class_level=request.class_level,
        subject=request.subject.model_dump(),
        user_id=caller_id,
        child_id=request.child_id
    )
    return QuickGradeResponse(success=True, result=result.to_dict())

"""
Scan API routes
Turns a report card photo into matched subject rows
"""
import logging
from fastapi import APIRouter, Depends

from scanbonus.schemas import ScanRequest, ScanResponse
from scanbonus.services import ScanService
from .deps import get_caller_id, get_scan_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/scan", response_model=ScanResponse)
async def scan_report_card(
    request: ScanRequest,
    caller_id: str = Depends(get_caller_id),
    service: ScanService = Depends(get_scan_service)
):
    """
    Scan a report card image.

    Subjects are matched against the catalog. Unmatched rows that do not
    look like noise are kept for review.
    """
    result = await service.scan_base64(
        caller_id,
        request.image,
        locale=request.locale,
        country_hint=request.grading_system_country
    )
    logger.info(
        f"Scan for {caller_id}: {len(result.subjects)} subjects, "
        f"{result.matched_count} matched"
    )
    return ScanResponse(success=True, **result.to_dict())

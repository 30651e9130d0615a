"""
Face analysis endpoints.

Serves cached analyses, today's usage and fresh analyze requests.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from aiface.core.auth_dependency import get_current_user, get_db
from aiface.core.quota_guard import require_analysis_quota
from aiface.db.models.user import User
from aiface.llm.openai_provider import get_vision_provider
from aiface.llm.provider import LLMProvider
from aiface.schemas.analysis import AnalysisResponse, AnalyzeResponse
from aiface.schemas.usage import ProviderErrorResponse, QuotaExceededResponse, UsageStatus
from aiface.services import analysis_cache, quota_service
from aiface.services.analysis_service import analyze_image
from aiface.services.quota_service import QuotaReservation

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analysis", tags=["Analysis"])


@router.get("/usage/status", status_code=status.HTTP_200_OK, response_model=UsageStatus)
def get_usage_status(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Get today's analysis usage for the authenticated user.
    
    Returns count, limit and remaining. Reading the status never
    creates a usage record.
    """
    usage = quota_service.get_status(db, user.id)
    logger.debug(f"Usage status requested: user_id={user.id}, count={usage['count']}")
    return usage


@router.get("/{image_id}", status_code=status.HTTP_200_OK, response_model=AnalysisResponse)
def get_analysis(
    image_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Return the stored analysis for an image, 404 if it was never analyzed."""
    analysis = analysis_cache.fetch(db, image_id, user.id)
    if not analysis:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No analysis found for this image"
        )
    return AnalysisResponse.model_validate(analysis)


@router.post(
    "/analyze/{image_id}",
    status_code=status.HTTP_200_OK,
    response_model=AnalyzeResponse,
    responses={
        429: {"model": QuotaExceededResponse},
        500: {"model": ProviderErrorResponse},
    },
)
def analyze(
    image_id: int,
    reservation: QuotaReservation = Depends(require_analysis_quota),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    provider: LLMProvider = Depends(get_vision_provider)
):
    """
    Analyze an image and replace any stored analysis for it.
    
    Consumes one unit of today's quota on success. A failed provider call
    consumes nothing and leaves the previous analysis untouched.
    """
    analysis, usage = analyze_image(db, user.id, image_id, reservation, provider)
    payload = AnalysisResponse.model_validate(analysis).model_dump()
    return AnalyzeResponse(**payload, usage=UsageStatus(**usage))

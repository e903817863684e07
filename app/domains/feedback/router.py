"""Feedback domain router"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.dependencies import verify_internal_api_key
from app.core.schemas import (
    APIResponse,
    ListAPIResponse,
    create_list_response,
    create_response,
)
from app.core.utils.pagination import PageParams
from app.domains.feedback.schemas import (
    FeedbackCreate,
    FeedbackRecord,
    InsightType,
    RecommendationAnalytics,
    RecommendationInsight,
    Timeframe,
)
from app.domains.feedback.service import FeedbackService

router = APIRouter()


def get_feedback_service(session: AsyncSession = Depends(get_db)) -> FeedbackService:
    return FeedbackService(session)


@router.post(
    "",
    response_model=APIResponse[FeedbackRecord],
    status_code=201,
    dependencies=[Depends(verify_internal_api_key)],
)
async def submit_feedback(
    data: FeedbackCreate,
    service: FeedbackService = Depends(get_feedback_service),
):
    """Record feedback on an issued recommendation"""
    feedback = await service.record_feedback(data)
    return create_response(
        data=FeedbackRecord.model_validate(feedback),
        message="Feedback recorded.",
    )


@router.get(
    "",
    response_model=ListAPIResponse[FeedbackRecord],
    dependencies=[Depends(verify_internal_api_key)],
)
async def list_feedback(
    page_params: PageParams = Depends(),
    user_id: Optional[str] = None,
    service: FeedbackService = Depends(get_feedback_service),
):
    """Feedback log, newest first"""
    items, total = await service.list_feedback(
        page=page_params.page,
        size=page_params.size,
        user_id=user_id,
    )
    return create_list_response(
        data=[FeedbackRecord.model_validate(i) for i in items],
        total=total,
        page=page_params.page,
        size=page_params.size,
        message="Feedback loaded.",
    )


@router.get(
    "/analytics",
    response_model=APIResponse[RecommendationAnalytics],
    dependencies=[Depends(verify_internal_api_key)],
)
async def get_analytics(
    timeframe: Timeframe = Query(Timeframe.WEEK),
    service: FeedbackService = Depends(get_feedback_service),
):
    """Aggregated feedback for the timeframe"""
    analytics = await service.get_analytics(timeframe)
    return create_response(data=analytics, message="Analytics computed.")


@router.post(
    "/insights",
    response_model=APIResponse[list[RecommendationInsight]],
    status_code=201,
    dependencies=[Depends(verify_internal_api_key)],
)
async def create_insights(
    timeframe: Timeframe = Query(Timeframe.WEEK),
    service: FeedbackService = Depends(get_feedback_service),
):
    """Generate insights from the latest two windows"""
    insights = await service.generate_insights(timeframe)
    return create_response(data=insights, message="Insights generated.")


@router.get(
    "/insights",
    response_model=APIResponse[list[RecommendationInsight]],
    dependencies=[Depends(verify_internal_api_key)],
)
async def list_insights(
    insight_type: Optional[InsightType] = None,
    category: Optional[str] = None,
    service: FeedbackService = Depends(get_feedback_service),
):
    """Insight history"""
    insights = await service.list_insights(insight_type=insight_type, category=category)
    return create_response(data=insights, message="Insights loaded.")

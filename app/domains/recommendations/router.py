"""Recommendations domain router"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.dependencies import verify_internal_api_key
from app.core.schemas import APIResponse, create_response
from app.domains.recommendations.schemas import (
    EngineWeights,
    RecommendationCategory,
    RecommendationList,
)
from app.domains.recommendations.service import RecommendationService

router = APIRouter()


def get_recommendation_service(
    session: AsyncSession = Depends(get_db),
) -> RecommendationService:
    return RecommendationService(session)


@router.get(
    "/users/{user_id}",
    response_model=APIResponse[RecommendationList],
    dependencies=[Depends(verify_internal_api_key)],
)
async def get_recommendations(
    user_id: str,
    current_article_id: Optional[str] = Query(
        None, description="Article the user is reading"
    ),
    size: Optional[int] = Query(None, ge=1, le=50, description="Result size"),
    category: Optional[RecommendationCategory] = Query(
        None, description="Only return this recommendation category"
    ),
    service: RecommendationService = Depends(get_recommendation_service),
):
    """Generate ranked, category-diversified recommendations"""
    result = await service.generate_recommendations(
        user_id=user_id,
        current_article_id=current_article_id,
        size=size,
        category=category,
    )
    return create_response(data=result, message="Recommendations generated.")


@router.get(
    "/settings",
    response_model=APIResponse[EngineWeights],
    dependencies=[Depends(verify_internal_api_key)],
)
async def get_engine_settings(
    service: RecommendationService = Depends(get_recommendation_service),
):
    """Current engine weights"""
    weights = await service.get_weights()
    return create_response(data=weights, message="Engine settings loaded.")


@router.put(
    "/settings",
    response_model=APIResponse[EngineWeights],
    dependencies=[Depends(verify_internal_api_key)],
)
async def update_engine_settings(
    weights: EngineWeights,
    service: RecommendationService = Depends(get_recommendation_service),
):
    """Replace the engine weights"""
    stored = await service.update_weights(weights)
    return create_response(data=stored, message="Engine settings updated.")

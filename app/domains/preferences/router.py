"""Preferences domain router"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.dependencies import verify_internal_api_key
from app.core.schemas import APIResponse, create_response
from app.domains.preferences.schemas import (
    PreferenceResponse,
    PreferenceUpdate,
)
from app.domains.preferences.service import PreferenceService

router = APIRouter()


def get_preference_service(
    session: AsyncSession = Depends(get_db),
) -> PreferenceService:
    return PreferenceService(session)


@router.get(
    "/{user_id}",
    response_model=APIResponse[PreferenceResponse],
    dependencies=[Depends(verify_internal_api_key)],
)
async def get_preferences(
    user_id: str,
    service: PreferenceService = Depends(get_preference_service),
):
    """Get the user's preferences (created with defaults if absent)"""
    preference = await service.get_or_create_preference(user_id)
    return create_response(
        data=PreferenceResponse.model_validate(preference),
        message="Preferences loaded.",
    )


@router.put(
    "/{user_id}",
    response_model=APIResponse[PreferenceResponse],
    dependencies=[Depends(verify_internal_api_key)],
)
async def update_preferences(
    user_id: str,
    data: PreferenceUpdate,
    service: PreferenceService = Depends(get_preference_service),
):
    """Update the user's preferences"""
    preference = await service.update_preference(user_id, data)
    return create_response(
        data=PreferenceResponse.model_validate(preference),
        message="Preferences updated.",
    )

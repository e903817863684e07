"""Preferences domain service"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.core.middlewares.context import get_request_id
from app.domains.preferences.models import UserPreference
from app.domains.preferences.repository import (
    BehaviorRepository,
    PreferenceRepository,
)
from app.domains.preferences.schemas import (
    DEFAULT_PREFERRED_CATEGORIES,
    BehaviorRecord,
    PreferenceUpdate,
    UserPreferenceProfile,
)

logger = get_logger(__name__)


class PreferenceService:
    """Preference profiles and behavior lookups"""

    def __init__(self, session: AsyncSession):
        self.repository = PreferenceRepository(session)
        self.behavior_repository = BehaviorRepository(session)

    async def get_or_create_preference(self, user_id: str) -> UserPreference:
        """Load the user's preferences, creating defaults on first access

        Args:
            user_id: user ID

        Returns:
            existing or newly created preference row
        """
        existing = await self.repository.get_by_user_id(user_id)
        if existing:
            return existing

        preference = UserPreference(
            user_id=user_id,
            preferred_categories=list(DEFAULT_PREFERRED_CATEGORIES),
        )
        created = await self.repository.create(preference)

        logger.info(
            "Default preferences created",
            extra={"request_id": get_request_id(), "user_id": user_id},
        )
        return created

    async def get_or_create_profile(self, user_id: str) -> UserPreferenceProfile:
        preference = await self.get_or_create_preference(user_id)
        return UserPreferenceProfile.model_validate(preference)

    async def update_preference(
        self, user_id: str, data: PreferenceUpdate
    ) -> UserPreference:
        """Apply a partial update

        Args:
            user_id: user ID
            data: fields to change; unset fields are left alone

        Returns:
            updated preference row
        """
        preference = await self.get_or_create_preference(user_id)

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in changes.items():
            setattr(preference, field, value)

        updated = await self.repository.update(preference)

        logger.info(
            "Preferences updated",
            extra={
                "request_id": get_request_id(),
                "user_id": user_id,
                "fields": sorted(changes),
            },
        )
        return updated

    async def get_behavior(self, user_id: str) -> BehaviorRecord:
        """Behavior record, or an empty one when none was reported"""
        behavior = await self.behavior_repository.get_by_user_id(user_id)
        if behavior is None:
            return BehaviorRecord.empty(user_id)
        return BehaviorRecord.model_validate(behavior)

"""Preferences domain repositories"""

from typing import Optional, cast

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.preferences.models import UserBehavior, UserPreference


class PreferenceRepository:
    """User preference store"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_id(self, user_id: str) -> Optional[UserPreference]:
        result = await self.session.execute(
            select(UserPreference).where(UserPreference.user_id == user_id)
        )
        return cast(Optional[UserPreference], result.scalar_one_or_none())

    async def create(self, preference: UserPreference) -> UserPreference:
        self.session.add(preference)
        await self.session.flush()
        await self.session.refresh(preference)
        return preference

    async def update(self, preference: UserPreference) -> UserPreference:
        await self.session.flush()
        await self.session.refresh(preference)
        return preference


class BehaviorRepository:
    """Behavior log (read-only)"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_id(self, user_id: str) -> Optional[UserBehavior]:
        result = await self.session.execute(
            select(UserBehavior).where(UserBehavior.user_id == user_id)
        )
        return cast(Optional[UserBehavior], result.scalar_one_or_none())

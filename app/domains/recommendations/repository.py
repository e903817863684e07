"""Recommendations domain repository"""

from typing import Optional, Sequence, cast

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.recommendations.models import (
    DEFAULT_SETTINGS_SCOPE,
    EngineSettings,
    IssuedRecommendation,
)


class RecommendationRepository:
    """Engine settings and issued recommendations"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_settings(
        self, scope: str = DEFAULT_SETTINGS_SCOPE
    ) -> Optional[EngineSettings]:
        result = await self.session.execute(
            select(EngineSettings).where(EngineSettings.scope == scope)
        )
        return cast(Optional[EngineSettings], result.scalar_one_or_none())

    async def create_settings(self, engine_settings: EngineSettings) -> EngineSettings:
        self.session.add(engine_settings)
        await self.session.flush()
        await self.session.refresh(engine_settings)
        return engine_settings

    async def update_settings(self, engine_settings: EngineSettings) -> EngineSettings:
        await self.session.flush()
        await self.session.refresh(engine_settings)
        return engine_settings

    async def create_issued_many(
        self, issued: Sequence[IssuedRecommendation]
    ) -> None:
        """Persist a batch of issued recommendations"""
        self.session.add_all(list(issued))
        await self.session.flush()

    async def get_issued(
        self, recommendation_id: str
    ) -> Optional[IssuedRecommendation]:
        result = await self.session.execute(
            select(IssuedRecommendation).where(
                IssuedRecommendation.id == recommendation_id
            )
        )
        return cast(Optional[IssuedRecommendation], result.scalar_one_or_none())

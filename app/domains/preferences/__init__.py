"""Preferences domain

Reader preference profiles and the read-only behavior log.

Structure:
    - models.py: SQLAlchemy models (UserPreference, UserBehavior)
    - schemas.py: Pydantic schemas (UserPreferenceProfile, BehaviorRecord, ...)
    - repository.py: data access
    - service.py: lazy profile creation and partial updates
    - router.py: API endpoints
"""

from app.domains.preferences.models import (
    ReadingTime,
    TimeOfDay,
    UserBehavior,
    UserPreference,
)
from app.domains.preferences.router import router
from app.domains.preferences.schemas import (
    BehaviorRecord,
    PreferenceResponse,
    PreferenceUpdate,
    UserPreferenceProfile,
)
from app.domains.preferences.service import PreferenceService

__all__ = [
    "UserPreference",
    "UserBehavior",
    "ReadingTime",
    "TimeOfDay",
    "UserPreferenceProfile",
    "BehaviorRecord",
    "PreferenceUpdate",
    "PreferenceResponse",
    "PreferenceService",
    "router",
]

"""Preferences domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.domains.articles.models import ArticleLanguage
from app.domains.preferences.models import ReadingTime, TimeOfDay

DEFAULT_PREFERRED_CATEGORIES = ["سياسة", "تقنية"]


def _normalize_categories(values: list[str]) -> list[str]:
    """Strip blanks and duplicates, keeping first-seen order"""
    seen: list[str] = []
    for value in values:
        name = value.strip()
        if name and name not in seen:
            seen.append(name)
    return seen


class UserPreferenceProfile(BaseModel):
    """Preference profile consumed by the scoring engine"""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    preferred_categories: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PREFERRED_CATEGORIES)
    )
    reading_time: ReadingTime = ReadingTime.MEDIUM
    language: ArticleLanguage = ArticleLanguage.AR
    time_of_day: TimeOfDay = TimeOfDay.EVENING


class PreferenceUpdate(BaseModel):
    """Partial preference update; omitted fields stay unchanged"""

    preferred_categories: Optional[list[str]] = Field(
        default=None, max_length=50
    )
    reading_time: Optional[ReadingTime] = None
    language: Optional[ArticleLanguage] = None
    time_of_day: Optional[TimeOfDay] = None

    @field_validator("preferred_categories")
    @classmethod
    def normalize_categories(
        cls, v: Optional[list[str]]
    ) -> Optional[list[str]]:
        if v is None:
            return v
        return _normalize_categories(v)


class PreferenceResponse(UserPreferenceProfile):
    created_at: datetime
    updated_at: Optional[datetime] = None


class BehaviorRecord(BaseModel):
    """Reading behavior consumed by the scoring engine

    An empty record stands in for users the analytics pipeline has not
    seen yet.
    """

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    read_article_ids: list[str] = Field(default_factory=list)
    liked_article_ids: list[str] = Field(default_factory=list)
    shared_article_ids: list[str] = Field(default_factory=list)
    average_read_time: float = 0.0
    active_hours: list[int] = Field(default_factory=list)

    @classmethod
    def empty(cls, user_id: str) -> "BehaviorRecord":
        return cls(user_id=user_id)

"""Preferences domain models

``UserPreference`` is owned by this service. ``UserBehavior`` is written by
the external analytics collaborator and only read here.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import ARRAY, DateTime, Float, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class ReadingTime(str, Enum):
    """Preferred article length bucket (estimated minutes)"""

    SHORT = "short"  # < 3
    MEDIUM = "medium"  # 3 to 8
    LONG = "long"  # > 8


class TimeOfDay(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"


class UserPreference(Base):
    """Declared reader preferences"""

    __tablename__ = "user_preferences"

    user_id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        comment="Platform user ID",
    )
    preferred_categories: Mapped[list[str]] = mapped_column(
        ARRAY(String),
        nullable=False,
        default=list,
        server_default="{}",
        comment="Preferred category names",
    )
    reading_time: Mapped[ReadingTime] = mapped_column(
        String(10),
        nullable=False,
        default=ReadingTime.MEDIUM,
        server_default="medium",
    )
    language: Mapped[str] = mapped_column(
        String(5),
        nullable=False,
        default="ar",
        server_default="ar",
    )
    time_of_day: Mapped[TimeOfDay] = mapped_column(
        String(10),
        nullable=False,
        default=TimeOfDay.EVENING,
        server_default="evening",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        onupdate=func.now(),
        nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"<UserPreference(user_id={self.user_id}, "
            f"reading_time={self.reading_time}, language={self.language})>"
        )


class UserBehavior(Base):
    """Aggregated reading behavior"""

    __tablename__ = "user_behaviors"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    read_article_ids: Mapped[list[str]] = mapped_column(
        ARRAY(String), nullable=False, default=list, server_default="{}"
    )
    liked_article_ids: Mapped[list[str]] = mapped_column(
        ARRAY(String), nullable=False, default=list, server_default="{}"
    )
    shared_article_ids: Mapped[list[str]] = mapped_column(
        ARRAY(String), nullable=False, default=list, server_default="{}"
    )
    average_read_time: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        default=0.0,
        server_default="0",
        comment="Rolling average read time (seconds)",
    )
    active_hours: Mapped[list[int]] = mapped_column(
        ARRAY(Integer),
        nullable=False,
        default=list,
        server_default="{}",
        comment="Hours of day (0-23) the user is usually active",
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"<UserBehavior(user_id={self.user_id}, "
            f"liked={len(self.liked_article_ids or [])})>"
        )

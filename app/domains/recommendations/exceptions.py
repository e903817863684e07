"""Recommendations domain exceptions"""

from enum import Enum

from app.core.exceptions import ConflictException, NotFoundException


class RecommendationErrorCode(str, Enum):
    RECOMMENDATION_NOT_FOUND = "RECOMMENDATION_NOT_FOUND"
    STALE_RECOMMENDATION_REQUEST = "STALE_RECOMMENDATION_REQUEST"


class RecommendationNotFoundException(NotFoundException):
    """No recommendation was issued with this ID"""

    def __init__(self, recommendation_id: str | None = None):
        detail = (
            {"recommendation_id": recommendation_id} if recommendation_id else {}
        )
        super().__init__(
            message="Recommendation not found.",
            error_code=RecommendationErrorCode.RECOMMENDATION_NOT_FOUND,
            detail=detail,
        )


class StaleRecommendationRequestException(ConflictException):
    """A newer request for the same viewing context superseded this one"""

    def __init__(self, user_id: str, current_article_id: str | None = None):
        super().__init__(
            message="Superseded by a newer recommendation request.",
            error_code=RecommendationErrorCode.STALE_RECOMMENDATION_REQUEST,
            detail={
                "user_id": user_id,
                "current_article_id": current_article_id,
            },
        )


class SimilarityParseError(ValueError):
    """The similarity classifier returned something that is not a number"""

    def __init__(self, raw: str):
        self.raw = raw
        super().__init__(f"Unparsable similarity response: {raw[:100]!r}")

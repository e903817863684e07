"""Feedback domain exceptions"""

from enum import Enum

from app.core.exceptions import BadRequestException, ForbiddenException


class FeedbackErrorCode(str, Enum):
    FEEDBACK_ARTICLE_MISMATCH = "FEEDBACK_ARTICLE_MISMATCH"
    FEEDBACK_USER_MISMATCH = "FEEDBACK_USER_MISMATCH"


class FeedbackArticleMismatchException(BadRequestException):
    """The feedback's article is not the one that was recommended"""

    def __init__(self, recommendation_id: str, article_id: str):
        super().__init__(
            message="The article does not match the recommendation.",
            error_code=FeedbackErrorCode.FEEDBACK_ARTICLE_MISMATCH,
            detail={
                "recommendation_id": recommendation_id,
                "article_id": article_id,
            },
        )


class FeedbackUserMismatchException(ForbiddenException):
    """The recommendation was issued to another user"""

    def __init__(self, recommendation_id: str, user_id: str):
        super().__init__(
            message="The recommendation was not issued to this user.",
            error_code=FeedbackErrorCode.FEEDBACK_USER_MISMATCH,
            detail={"recommendation_id": recommendation_id, "user_id": user_id},
        )

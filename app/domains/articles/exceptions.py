"""Articles domain exceptions"""

from enum import Enum

from app.core.exceptions import NotFoundException


class ArticleErrorCode(str, Enum):
    ARTICLE_NOT_FOUND = "ARTICLE_NOT_FOUND"


class ArticleNotFoundException(NotFoundException):
    """The article does not exist"""

    def __init__(self, article_id: str | None = None):
        detail = {"article_id": article_id} if article_id else {}
        super().__init__(
            message="Article not found.",
            error_code=ArticleErrorCode.ARTICLE_NOT_FOUND,
            detail=detail,
        )

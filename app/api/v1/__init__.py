"""API v1 router"""

from typing import Any

from fastapi import APIRouter

from app.core.schemas import APIResponse
from app.domains.feedback.router import router as feedback_router
from app.domains.preferences.router import router as preferences_router
from app.domains.recommendations.router import router as recommendations_router

api_router = APIRouter()

api_router.include_router(
    recommendations_router, prefix="/recommendations", tags=["Recommendations"]
)
api_router.include_router(
    preferences_router, prefix="/preferences", tags=["Preferences"]
)
api_router.include_router(feedback_router, prefix="/feedback", tags=["Feedback"])


@api_router.get("/", response_model=APIResponse[dict[str, Any]])
async def api_v1_root():
    return APIResponse(
        success=True,
        message="Recommendation API v1",
        data={
            "version": "1.0.0",
            "docs": "/docs",
        },
    )

from fastapi import APIRouter, status

from websustain.platform.config import settings
from websustain.platform.response import api_response


router = APIRouter()

@router.get("/health", tags=["health"])
async def health_check():
    return api_response(
        data={
            "status": "ok",
            "service": settings.APP_NAME,
            "pagespeed_configured": bool(settings.GOOGLE_PAGESPEED_API_KEY),
        },
        message="Service is healthy",
        status_code=status.HTTP_200_OK,
    )

from fastapi import APIRouter

from websustain.features.analysis.routes.report import router as report_router
from websustain.features.annotation.routes.annotation import router as annotation_router

api_router = APIRouter()

# Register all feature routes
api_router.include_router(report_router)
api_router.include_router(annotation_router)

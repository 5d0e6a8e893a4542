from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from websustain.features.annotation.schemas.annotation import AnnotationRequest
from websustain.features.annotation.services.annotator import ReportAnnotator
from websustain.platform.exceptions import SustainabilityError
from websustain.platform.logger import get_logger

logger = get_logger("annotation_routes")
router = APIRouter()


def get_annotator() -> ReportAnnotator:
    return ReportAnnotator()


@router.post("/ws-annotate", tags=["annotation"])
async def annotate_report(
    request: AnnotationRequest,
    annotator: ReportAnnotator = Depends(get_annotator),
):
    """Forward a precomputed report to the language model and return its raw completion."""
    if request.payload is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing payload")

    try:
        completion = await annotator.annotate(request.payload)
    except SustainabilityError:
        raise
    except Exception as e:
        logger.error(f"Critical internal error annotating report: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    return JSONResponse(status_code=status.HTTP_200_OK, content=completion)

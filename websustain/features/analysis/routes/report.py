from fastapi import APIRouter, Depends, HTTPException, status

from websustain.features.analysis.schemas.report import ReportRequest
from websustain.features.analysis.services.report_service import ReportService
from websustain.platform.exceptions import SustainabilityError, URLValidationError
from websustain.platform.logger import get_logger
from websustain.platform.response import completion_response
from websustain.platform.utils.url_validator import validate_url

logger = get_logger("report_routes")
router = APIRouter()


def get_report_service() -> ReportService:
    return ReportService()


@router.post("/ws-report", tags=["report"])
async def generate_report(
    request: ReportRequest,
    service: ReportService = Depends(get_report_service),
):
    """
    Score a URL's sustainability.

    The report is JSON-encoded inside a chat-completion shaped envelope,
    `{"choices": [{"message": {"content": "<report>"}}]}`.
    """
    raw_url = request.payload.url if request.payload else None
    if not raw_url:
        raise URLValidationError("URL is required")

    is_valid, url, error = validate_url(raw_url)
    if not is_valid:
        logger.warning(f"Rejected URL {raw_url!r}: {error}")
        raise URLValidationError(error)

    logger.info(f"Starting sustainability analysis for: {url}")

    try:
        report = await service.generate_report(url)
    except SustainabilityError:
        raise
    except Exception as e:
        logger.error(f"Critical internal error analyzing {url}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to analyze website. Please try again later.",
        )

    return completion_response(report.to_json_dict())

"""
Report Service

Runs the ordered chain of data producers for a URL and assembles the report
from the first one that succeeds.
"""
import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional

from websustain.features.analysis.schemas.analysis import AnalysisMethod, AnalysisResult
from websustain.features.analysis.schemas.report import SustainabilityReport
from websustain.features.analysis.services.emissions import EmissionsEstimator
from websustain.features.analysis.services.page_fetcher import PageFetcher
from websustain.features.analysis.services.pagespeed import PageSpeedService
from websustain.features.analysis.services.report_builder import build_basic_report, build_pagespeed_report
from websustain.platform.config import settings
from websustain.platform.exceptions import (
    ExhaustedFallbackError,
    ReportAssemblyError,
    ReportTimeoutError,
)
from websustain.platform.logger import get_logger

logger = get_logger(__name__)

Fetch = Callable[[str], Awaitable[AnalysisResult]]
Assemble = Callable[[AnalysisResult, AnalysisMethod], SustainabilityReport]


@dataclass(frozen=True)
class Producer:
    name: str
    analysis_method: AnalysisMethod
    fetch: Fetch
    assemble: Assemble


def default_producers(
    pagespeed: Optional[PageSpeedService] = None,
    fetcher: Optional[PageFetcher] = None,
    estimator: Optional[EmissionsEstimator] = None,
) -> List[Producer]:
    pagespeed = pagespeed or PageSpeedService()
    fetcher = fetcher or PageFetcher()
    estimator = estimator or EmissionsEstimator()

    def pagespeed_assembly(data: AnalysisResult, method: AnalysisMethod) -> SustainabilityReport:
        return build_pagespeed_report(data, method, estimator)

    return [
        Producer("pagespeed", AnalysisMethod.PAGESPEED, pagespeed.fetch_real, pagespeed_assembly),
        Producer("simulated-pagespeed", AnalysisMethod.SIMULATED, pagespeed.fetch_simulated, pagespeed_assembly),
        Producer("basic", AnalysisMethod.BASIC, fetcher.fetch, build_basic_report),
        Producer("simulated-basic", AnalysisMethod.SIMULATED, fetcher.simulate, build_basic_report),
    ]


class ReportService:
    """Generates a sustainability report, falling back through producers in order."""

    def __init__(self, producers: Optional[List[Producer]] = None, timeout: Optional[float] = None):
        self.producers = producers if producers is not None else default_producers()
        self.timeout = timeout if timeout is not None else settings.REPORT_TIMEOUT

    async def generate_report(self, url: str) -> SustainabilityReport:
        try:
            return await asyncio.wait_for(self._run_chain(url), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Report for {url} timed out after {self.timeout:g}s")
            raise ReportTimeoutError(
                "Analysis timeout. The website took too long to analyze. Please try again."
            ) from e

    async def _run_chain(self, url: str) -> SustainabilityReport:
        failures = []

        for producer in self.producers:
            try:
                data = await producer.fetch(url)
            except Exception as e:
                logger.warning(f"Producer '{producer.name}' failed for {url}: {type(e).__name__}: {e}")
                failures.append(f"{producer.name}: {e}")
                continue

            logger.info(f"Producer '{producer.name}' supplied data for {url}")
            try:
                report = producer.assemble(data, producer.analysis_method)
            except Exception as e:
                logger.error(f"Report assembly failed for {url} ({producer.name}): {e}", exc_info=True)
                raise ReportAssemblyError("Failed to assemble the sustainability report") from e

            logger.info(
                f"Report for {url}: overall={report.overall_score} "
                f"energy={report.energy_efficiency} carbon={report.carbon_footprint} "
                f"resources={report.resource_optimization} accessibility={report.accessibility} "
                f"method={report.analysis_method.value}"
            )
            return report

        logger.error(f"All data sources failed for {url}: {'; '.join(failures)}")
        raise ExhaustedFallbackError(
            "Unable to analyze website. All analysis methods failed. Please try again later."
        )

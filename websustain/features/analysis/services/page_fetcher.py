import time
from typing import Mapping, Optional

import httpx
from bs4 import BeautifulSoup

from websustain.features.analysis.schemas.analysis import AnalysisResult
from websustain.features.analysis.utils.hosting import has_cdn, has_compression, is_green_host
from websustain.features.analysis.utils.numbers import round_half_up, round_to
from websustain.features.analysis.utils.seeded_random import seed_from_url, seeded_int, seeded_random
from websustain.platform.config import settings
from websustain.platform.exceptions import FetchError, UpstreamTimeoutError
from websustain.platform.logger import get_logger

logger = get_logger(__name__)

SEMANTIC_ELEMENTS = "header, nav, main, section, article, aside, footer"
HEADINGS = "h1, h2, h3, h4, h5, h6"
FONT_LINKS = 'link[rel~="preload"][as="font"], link[rel~="stylesheet"][href*="font"]'
VIDEOS = 'video, iframe[src*="youtube"], iframe[src*="vimeo"]'

# Offset keeps the basic simulation independent of the PageSpeed one
SIMULATION_INDEX_OFFSET = 100


# ============================================================================
# Markup heuristics
# ============================================================================

def count_resources(soup: BeautifulSoup) -> dict:
    return {
        "image_count": len(soup.select("img")),
        "script_count": len(soup.select("script[src]")),
        "css_count": len(soup.select('link[rel~="stylesheet"]')),
        "font_count": len(soup.select(FONT_LINKS)),
        "video_count": len(soup.select(VIDEOS)),
    }


def accessibility_score(soup: BeautifulSoup) -> int:
    score = 100.0

    images = soup.select("img")
    if images:
        with_alt = len(soup.select("img[alt]"))
        score -= (1 - with_alt / len(images)) * 20

    if len(soup.select(SEMANTIC_ELEMENTS)) < 3:
        score -= 15

    if not soup.select(HEADINGS):
        score -= 20

    inputs = soup.select("input, textarea, select")
    labels = soup.select("label")
    if inputs and len(labels) < len(inputs):
        score -= 15

    return max(0, round_half_up(score))


def seo_score(soup: BeautifulSoup) -> int:
    score = 100

    title = soup.find("title")
    if title is None or not title.get_text(strip=True):
        score -= 20

    if soup.select_one('meta[name="description"]') is None:
        score -= 15

    h1_count = len(soup.select("h1"))
    if h1_count == 0:
        score -= 15
    elif h1_count > 1:
        score -= 10

    if soup.select_one('link[rel~="canonical"]') is None:
        score -= 10

    return max(0, score)


def performance_score(load_time_ms: float, page_size_kb: float) -> int:
    score = 100

    if load_time_ms > 3000:
        score -= 30
    elif load_time_ms > 2000:
        score -= 20
    elif load_time_ms > 1000:
        score -= 10

    if page_size_kb > 2000:
        score -= 25
    elif page_size_kb > 1000:
        score -= 15
    elif page_size_kb > 500:
        score -= 5

    return max(0, score)


def carbon_footprint(page_size_kb: float, image_count: int, video_count: int) -> float:
    """Rough grams per page view: 0.5 g/MB, 0.02 g per image, 0.5 g per video."""
    grams = (page_size_kb / 1000) * 0.5
    grams += image_count * 0.02
    grams += video_count * 0.5
    return round_to(grams, 2)


def analyze_markup(
    url: str,
    html: str,
    load_time_ms: float,
    size_bytes: int,
    headers: Mapping[str, str],
) -> AnalysisResult:
    soup = BeautifulSoup(html, "html.parser")
    counts = count_resources(soup)
    page_size_kb = size_bytes / 1024

    return AnalysisResult(
        url=url,
        load_time=load_time_ms,
        page_size=round_to(page_size_kb, 2),
        total_resource_size=size_bytes,
        **counts,
        accessibility_score=accessibility_score(soup),
        seo_score=seo_score(soup),
        performance_score=performance_score(load_time_ms, page_size_kb),
        carbon_footprint=carbon_footprint(page_size_kb, counts["image_count"], counts["video_count"]),
        green_hosting=is_green_host(url, settings.GREEN_HOSTS),
        compression_enabled=has_compression(headers),
        cdn_enabled=has_cdn(headers),
    )


# ============================================================================
# Fetcher
# ============================================================================

class PageFetcher:
    """Fetches a page directly and scores it from its markup and response headers."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout if timeout is not None else settings.PAGE_FETCH_TIMEOUT
        self.transport = transport

    async def fetch(self, url: str) -> AnalysisResult:
        logger.info(f"Starting basic website analysis for: {url}")
        started = time.perf_counter()

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self.transport,
                follow_redirects=True,
                headers={"User-Agent": settings.USER_AGENT},
            ) as client:
                response = await client.get(url)
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(
                "Website analysis timed out. The website took too long to respond."
            ) from e
        except httpx.RequestError as e:
            raise FetchError(
                f"Unable to fetch website. The website may be blocking external requests or unavailable: {e}"
            ) from e

        if not response.is_success:
            raise FetchError(f"Website returned an error: HTTP {response.status_code} {response.reason_phrase}")

        html = response.text
        load_time_ms = round_half_up((time.perf_counter() - started) * 1000)
        size_bytes = len(response.content)

        logger.info(f"Website fetched successfully: {size_bytes / 1024:.2f}KB, {load_time_ms}ms")
        return analyze_markup(url, html, load_time_ms, size_bytes, response.headers)

    async def simulate(self, url: str) -> AnalysisResult:
        logger.info(f"Using simulated basic analysis for: {url}")
        seed = seed_from_url(url)

        def r(index: int) -> float:
            return seeded_random(seed, SIMULATION_INDEX_OFFSET + index)

        def n(index: int, low: int, span: int) -> int:
            return seeded_int(seed, SIMULATION_INDEX_OFFSET + index, low, span)

        load_time = round_half_up(r(0) * 2000 + 500)
        page_size_kb = round_to(r(1) * 1500 + 300, 2)

        accessibility = max(60.0, min(95.0, 80 + (r(7) - 0.5) * 30))
        seo = max(65.0, min(95.0, 75 + (r(8) - 0.5) * 20))
        performance = max(60.0, min(95.0, 75 + (r(9) - 0.5) * 30))

        return AnalysisResult(
            url=url,
            load_time=load_time,
            page_size=page_size_kb,
            total_resource_size=round_half_up(page_size_kb * 1024),
            image_count=n(2, 3, 15),
            script_count=n(3, 2, 12),
            css_count=n(4, 1, 6),
            font_count=n(5, 1, 4),
            video_count=n(6, 0, 2),
            accessibility_score=round_half_up(accessibility),
            seo_score=round_half_up(seo),
            performance_score=round_half_up(performance),
            carbon_footprint=round_to((page_size_kb / 1000) * 0.5, 2),
            green_hosting=r(10) > 0.7,
            compression_enabled=r(11) > 0.4,
            cdn_enabled=r(12) > 0.5,
        )

from typing import Any, Dict, List, Optional, Tuple

import httpx

from websustain.features.analysis.schemas.analysis import AnalysisResult
from websustain.features.analysis.utils.hosting import is_green_host
from websustain.features.analysis.utils.numbers import round_half_up, round_to, to_number
from websustain.features.analysis.utils.seeded_random import seed_from_url, seeded_int, seeded_random
from websustain.platform.config import settings
from websustain.platform.exceptions import ConfigurationError, RemoteServiceError, UpstreamTimeoutError
from websustain.platform.logger import get_logger

logger = get_logger(__name__)

CATEGORIES = ["performance", "accessibility", "best-practices", "seo"]


def _audit(audits: Dict[str, Any], key: str) -> Dict[str, Any]:
    audit = audits.get(key)
    return audit if isinstance(audit, dict) else {}


def _details(audits: Dict[str, Any], key: str) -> Dict[str, Any]:
    details = _audit(audits, key).get("details")
    return details if isinstance(details, dict) else {}


def _numeric_value(audits: Dict[str, Any], key: str) -> float:
    return to_number(_audit(audits, key).get("numericValue"))


def _items(audits: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    items = _details(audits, key).get("items")
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]


def _category_score(categories: Dict[str, Any], key: str) -> int:
    category = categories.get(key)
    if not isinstance(category, dict):
        return 0
    return round_half_up(to_number(category.get("score")) * 100)


def _resource_breakdown(audits: Dict[str, Any]) -> Tuple[Dict[str, int], Dict[str, int]]:
    """Bytes and request counts per resource type, from resource-summary or network-requests."""
    sizes = {"total": 0, "image": 0, "script": 0, "stylesheet": 0, "font": 0}
    counts = {"total": 0, "image": 0, "script": 0, "stylesheet": 0, "font": 0, "media": 0}

    for item in _items(audits, "resource-summary"):
        resource_type = str(item.get("resourceType") or "").lower()
        if resource_type == "total":
            continue
        transfer_size = int(to_number(item.get("transferSize")))
        request_count = int(to_number(item.get("requestCount")))

        sizes["total"] += transfer_size
        counts["total"] += request_count
        if resource_type in sizes:
            sizes[resource_type] += transfer_size
        if resource_type in counts:
            counts[resource_type] += request_count

    if sizes["total"] == 0:
        sizes = dict.fromkeys(sizes, 0)
        counts = dict.fromkeys(counts, 0)

        for request in _items(audits, "network-requests"):
            transfer_size = int(to_number(request.get("transferSize")))
            resource_type = str(request.get("resourceType") or "").lower()
            mime_type = str(request.get("mimeType") or "").lower()

            sizes["total"] += transfer_size
            counts["total"] += 1

            if "image" in mime_type or resource_type == "image":
                kind = "image"
            elif "javascript" in mime_type or resource_type == "script":
                kind = "script"
            elif "css" in mime_type or resource_type == "stylesheet":
                kind = "stylesheet"
            elif "font" in mime_type or resource_type == "font":
                kind = "font"
            elif "video" in mime_type or resource_type == "media":
                kind = "media"
            else:
                continue

            counts[kind] += 1
            if kind in sizes:
                sizes[kind] += transfer_size

    return sizes, counts


def _longest_chain_length(audits: Dict[str, Any]) -> int:
    longest = _details(audits, "critical-request-chains").get("longestChain")
    if isinstance(longest, dict):
        return int(to_number(longest.get("length")))
    if isinstance(longest, list):
        return len(longest)
    return 0


def extract_pagespeed_data(response: Dict[str, Any], url: str) -> AnalysisResult:
    """
    Map a PageSpeed Insights v5 response onto an AnalysisResult.

    Missing categories, audits or detail payloads read as zero rather than
    failing the extraction.
    """
    lighthouse = response.get("lighthouseResult") if isinstance(response, dict) else None
    if not isinstance(lighthouse, dict):
        lighthouse = {}
    audits = lighthouse.get("audits") if isinstance(lighthouse.get("audits"), dict) else {}
    categories = lighthouse.get("categories") if isinstance(lighthouse.get("categories"), dict) else {}

    sizes, counts = _resource_breakdown(audits)
    final_url = lighthouse.get("finalUrl") or lighthouse.get("finalDisplayedUrl") or url

    first_input_delay = _numeric_value(audits, "max-potential-fid") or _numeric_value(audits, "first-input-delay")
    largest_contentful_paint = _numeric_value(audits, "largest-contentful-paint")

    return AnalysisResult(
        url=str(final_url),
        load_time=largest_contentful_paint,
        page_size=round_to(sizes["total"] / 1024, 2),
        total_resource_size=sizes["total"],
        image_count=counts["image"],
        script_count=counts["script"],
        css_count=counts["stylesheet"],
        font_count=counts["font"],
        video_count=counts["media"],
        request_count=counts["total"],
        performance_score=_category_score(categories, "performance"),
        accessibility_score=_category_score(categories, "accessibility"),
        best_practices_score=_category_score(categories, "best-practices"),
        seo_score=_category_score(categories, "seo"),
        green_hosting=is_green_host(str(final_url), settings.GREEN_HOSTS),
        first_contentful_paint=_numeric_value(audits, "first-contentful-paint"),
        largest_contentful_paint=largest_contentful_paint,
        first_input_delay=first_input_delay,
        cumulative_layout_shift=_numeric_value(audits, "cumulative-layout-shift"),
        speed_index=_numeric_value(audits, "speed-index"),
        total_blocking_time=_numeric_value(audits, "total-blocking-time"),
        image_resource_size=sizes["image"],
        script_resource_size=sizes["script"],
        stylesheet_resource_size=sizes["stylesheet"],
        font_resource_size=sizes["font"],
        unused_css_bytes=int(to_number(_details(audits, "unused-css-rules").get("overallSavingsBytes"))),
        unused_js_bytes=int(to_number(_details(audits, "unused-javascript").get("overallSavingsBytes"))),
        unoptimized_image_bytes=int(to_number(_details(audits, "uses-optimized-images").get("overallSavingsBytes"))),
        server_response_time=_numeric_value(audits, "server-response-time"),
        render_blocking_resources=len(_items(audits, "render-blocking-resources")),
        dom_size=int(to_number(_audit(audits, "dom-size").get("numericValue"))),
        critical_request_chains=_longest_chain_length(audits),
    )


class PageSpeedService:
    """
    Google PageSpeed Insights client, plus a deterministic simulation of its
    output for when the API can't be used.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        strategy: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else (settings.GOOGLE_PAGESPEED_API_KEY or "")
        self.strategy = strategy or settings.PAGESPEED_STRATEGY
        self.timeout = timeout if timeout is not None else settings.PAGESPEED_TIMEOUT
        self.transport = transport

    def _params(self, url: str) -> List[Tuple[str, str]]:
        params = [
            ("url", url),
            ("key", self.api_key),
            ("strategy", self.strategy),
            ("locale", settings.PAGESPEED_LOCALE),
        ]
        params += [("category", category) for category in CATEGORIES]
        return params

    async def fetch_real(self, url: str) -> AnalysisResult:
        if not self.api_key:
            raise ConfigurationError("Google PageSpeed Insights API key is not configured")

        logger.info(f"Calling PageSpeed Insights API for: {url}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(
                    settings.PAGESPEED_API_URL,
                    params=self._params(url),
                    headers={"Accept": "application/json"},
                )
        except httpx.TimeoutException as e:
            logger.warning(f"PageSpeed API timed out after {self.timeout}s for {url}")
            raise UpstreamTimeoutError(
                f"PageSpeed Insights API timed out after {self.timeout:g} seconds"
            ) from e
        except httpx.RequestError as e:
            raise RemoteServiceError(f"PageSpeed Insights request failed: {e}", detail=str(e)) from e

        if not response.is_success:
            detail = response.text[:500]
            logger.error(f"PageSpeed API Error: {response.status_code} {detail}")
            raise RemoteServiceError(
                f"PageSpeed API Error: {response.status_code}",
                upstream_status=response.status_code,
                detail=detail,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise RemoteServiceError(
                "PageSpeed API returned a non-JSON body",
                upstream_status=response.status_code,
                detail=response.text[:500],
            ) from e

        if not isinstance(data, dict):
            raise RemoteServiceError("PageSpeed API returned an unexpected payload", upstream_status=response.status_code)

        logger.info("PageSpeed API response received successfully")
        return extract_pagespeed_data(data, url)

    async def fetch_simulated(self, url: str) -> AnalysisResult:
        logger.info(f"Using simulated PageSpeed analysis for: {url}")
        seed = seed_from_url(url)

        def r(index: int) -> float:
            return seeded_random(seed, index)

        total_size = r(10) * 2_000_000 + 500_000
        image_size = total_size * (0.3 + r(11) * 0.4)
        script_size = total_size * (0.1 + r(12) * 0.3)
        stylesheet_size = total_size * (0.05 + r(13) * 0.1)
        font_size = total_size * (0.02 + r(14) * 0.05)

        images = seeded_int(seed, 15, 5, 20)
        scripts = seeded_int(seed, 16, 3, 15)
        stylesheets = seeded_int(seed, 17, 2, 8)
        fonts = seeded_int(seed, 18, 1, 5)
        videos = seeded_int(seed, 19, 0, 3)

        largest_contentful_paint = round_half_up(r(5) * 3000 + 1500)
        total_bytes = round_half_up(total_size)

        return AnalysisResult(
            url=url,
            load_time=largest_contentful_paint,
            page_size=round_to(total_bytes / 1024, 2),
            total_resource_size=total_bytes,
            image_count=images,
            script_count=scripts,
            css_count=stylesheets,
            font_count=fonts,
            video_count=videos,
            request_count=images + scripts + stylesheets + fonts + videos,
            performance_score=seeded_int(seed, 0, 50, 40),
            accessibility_score=seeded_int(seed, 1, 65, 30),
            best_practices_score=seeded_int(seed, 2, 60, 35),
            seo_score=seeded_int(seed, 3, 70, 25),
            green_hosting=is_green_host(url, settings.GREEN_HOSTS),
            first_contentful_paint=round_half_up(r(4) * 2000 + 800),
            largest_contentful_paint=largest_contentful_paint,
            first_input_delay=round_half_up(r(6) * 100 + 50),
            cumulative_layout_shift=round_to(r(7) * 0.15, 3),
            speed_index=round_half_up(r(8) * 2000 + 1000),
            total_blocking_time=round_half_up(r(9) * 300 + 100),
            image_resource_size=round_half_up(image_size),
            script_resource_size=round_half_up(script_size),
            stylesheet_resource_size=round_half_up(stylesheet_size),
            font_resource_size=round_half_up(font_size),
            unused_css_bytes=round_half_up(stylesheet_size * (r(20) * 0.3)),
            unused_js_bytes=round_half_up(script_size * (r(21) * 0.25)),
            unoptimized_image_bytes=round_half_up(image_size * (r(22) * 0.4)),
            server_response_time=round_half_up(r(23) * 500 + 100),
            render_blocking_resources=seeded_int(seed, 24, 2, 8),
            dom_size=seeded_int(seed, 25, 500, 1000),
            critical_request_chains=seeded_int(seed, 26, 2, 5),
        )

import httpx
import pytest

from websustain.features.analysis.services.pagespeed import (
    CATEGORIES,
    PageSpeedService,
    extract_pagespeed_data,
)
from websustain.platform.exceptions import ConfigurationError, RemoteServiceError, UpstreamTimeoutError


PAGESPEED_RESPONSE = {
    "lighthouseResult": {
        "finalUrl": "https://example.com/",
        "categories": {
            "performance": {"score": 0.87},
            "accessibility": {"score": 0.9},
            "best-practices": {"score": 1.0},
            "seo": {"score": 0.8},
        },
        "audits": {
            "first-contentful-paint": {"numericValue": 1200},
            "largest-contentful-paint": {"numericValue": 2400},
            "max-potential-fid": {"numericValue": 130},
            "cumulative-layout-shift": {"numericValue": 0.05},
            "speed-index": {"numericValue": 2000},
            "total-blocking-time": {"numericValue": 210},
            "server-response-time": {"numericValue": 320},
            "dom-size": {"numericValue": 850},
            "render-blocking-resources": {"details": {"items": [{}, {}, {}]}},
            "unused-css-rules": {"details": {"overallSavingsBytes": 20000}},
            "unused-javascript": {"details": {"overallSavingsBytes": 60000}},
            "uses-optimized-images": {"details": {"overallSavingsBytes": 150000}},
            "critical-request-chains": {"details": {"longestChain": {"length": 4}}},
            "resource-summary": {
                "details": {
                    "items": [
                        {"resourceType": "total", "transferSize": 900000, "requestCount": 25},
                        {"resourceType": "image", "transferSize": 400000, "requestCount": 10},
                        {"resourceType": "script", "transferSize": 300000, "requestCount": 8},
                        {"resourceType": "stylesheet", "transferSize": 50000, "requestCount": 3},
                        {"resourceType": "font", "transferSize": 40000, "requestCount": 2},
                        {"resourceType": "media", "transferSize": 100000, "requestCount": 1},
                        {"resourceType": "document", "transferSize": 10000, "requestCount": 1},
                    ]
                }
            },
        },
    }
}


def test_extract_full_response():
    data = extract_pagespeed_data(PAGESPEED_RESPONSE, "https://example.com")

    assert data.url == "https://example.com/"
    assert data.performance_score == 87
    assert data.accessibility_score == 90
    assert data.best_practices_score == 100
    assert data.seo_score == 80

    assert data.load_time == 2400
    assert data.largest_contentful_paint == 2400
    assert data.first_contentful_paint == 1200
    assert data.first_input_delay == 130
    assert data.total_blocking_time == 210

    assert data.total_resource_size == 900000
    assert data.image_resource_size == 400000
    assert data.script_resource_size == 300000
    assert data.stylesheet_resource_size == 50000
    assert data.font_resource_size == 40000
    assert data.image_count == 10
    assert data.script_count == 8
    assert data.css_count == 3
    assert data.font_count == 2
    assert data.video_count == 1
    assert data.request_count == 25

    assert data.unused_css_bytes == 20000
    assert data.unused_js_bytes == 60000
    assert data.unoptimized_image_bytes == 150000
    assert data.server_response_time == 320
    assert data.render_blocking_resources == 3
    assert data.dom_size == 850
    assert data.critical_request_chains == 4
    assert data.green_hosting is False


def test_extract_missing_fields_default_to_zero():
    data = extract_pagespeed_data({"lighthouseResult": {}}, "https://example.com")

    assert data.url == "https://example.com"
    assert data.load_time == 0
    assert data.total_resource_size == 0
    assert data.performance_score == 0
    assert data.accessibility_score == 0
    assert data.seo_score == 0
    assert data.largest_contentful_paint == 0
    assert data.total_blocking_time == 0
    assert data.unused_css_bytes == 0
    assert data.unused_js_bytes == 0
    assert data.unoptimized_image_bytes == 0
    assert data.render_blocking_resources == 0
    assert data.dom_size == 0


def test_extract_tolerates_garbage():
    data = extract_pagespeed_data(
        {"lighthouseResult": {"audits": {"dom-size": "broken", "largest-contentful-paint": {"numericValue": None}}}},
        "https://example.com",
    )
    assert data.dom_size == 0
    assert data.load_time == 0


def test_extract_falls_back_to_network_requests():
    response = {
        "lighthouseResult": {
            "audits": {
                "network-requests": {
                    "details": {
                        "items": [
                            {"transferSize": 1000, "mimeType": "text/html"},
                            {"transferSize": 2000, "mimeType": "image/png"},
                            {"transferSize": 3000, "mimeType": "application/javascript"},
                            {"transferSize": 4000, "resourceType": "Stylesheet"},
                            {"transferSize": 500, "mimeType": "font/woff2"},
                        ]
                    }
                }
            }
        }
    }
    data = extract_pagespeed_data(response, "https://example.com")

    assert data.total_resource_size == 10500
    assert data.request_count == 5
    assert data.image_resource_size == 2000
    assert data.script_resource_size == 3000
    assert data.stylesheet_resource_size == 4000
    assert data.font_resource_size == 500
    assert data.image_count == 1
    assert data.css_count == 1


@pytest.mark.asyncio
async def test_fetch_real_sends_expected_query():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = request.url.params
        return httpx.Response(200, json=PAGESPEED_RESPONSE)

    service = PageSpeedService(api_key="test-key", transport=httpx.MockTransport(handler))
    data = await service.fetch_real("https://example.com")

    params = seen["params"]
    assert params["url"] == "https://example.com"
    assert params["key"] == "test-key"
    assert params["strategy"] == "mobile"
    assert params.get_list("category") == CATEGORIES
    assert data.performance_score == 87


@pytest.mark.asyncio
async def test_fetch_real_without_key_raises_configuration_error():
    service = PageSpeedService(api_key="")
    with pytest.raises(ConfigurationError):
        await service.fetch_real("https://example.com")


@pytest.mark.asyncio
async def test_fetch_real_non_success_raises_remote_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="backend exploded")

    service = PageSpeedService(api_key="test-key", transport=httpx.MockTransport(handler))
    with pytest.raises(RemoteServiceError) as exc_info:
        await service.fetch_real("https://example.com")

    assert exc_info.value.upstream_status == 500
    assert "backend exploded" in exc_info.value.detail


@pytest.mark.asyncio
async def test_fetch_real_non_json_raises_remote_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>not json</html>")

    service = PageSpeedService(api_key="test-key", transport=httpx.MockTransport(handler))
    with pytest.raises(RemoteServiceError):
        await service.fetch_real("https://example.com")


@pytest.mark.asyncio
async def test_fetch_real_timeout_raises_upstream_timeout():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    service = PageSpeedService(api_key="test-key", timeout=1.0, transport=httpx.MockTransport(handler))
    with pytest.raises(UpstreamTimeoutError):
        await service.fetch_real("https://example.com")


@pytest.mark.asyncio
async def test_fetch_simulated_is_deterministic_and_bounded():
    service = PageSpeedService(api_key="")
    first = await service.fetch_simulated("https://example.com")
    second = await service.fetch_simulated("https://www.example.com")

    assert first.model_dump(exclude={"url"}) == second.model_dump(exclude={"url"})

    assert 50 <= first.performance_score < 90
    assert 65 <= first.accessibility_score < 95
    assert 1500 <= first.largest_contentful_paint <= 4500
    assert 500_000 <= first.total_resource_size <= 2_500_000
    assert first.image_resource_size < first.total_resource_size
    assert first.load_time == first.largest_contentful_paint


@pytest.mark.asyncio
async def test_fetch_simulated_accepts_lone_surrogate_url():
    service = PageSpeedService(api_key="")
    first = await service.fetch_simulated("https://example.com/\ud800")
    second = await service.fetch_simulated("https://example.com/\ud800")

    assert first == second
    assert 50 <= first.performance_score < 90

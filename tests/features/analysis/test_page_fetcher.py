import httpx
import pytest

from websustain.features.analysis.services.page_fetcher import (
    PageFetcher,
    analyze_markup,
    carbon_footprint,
    performance_score,
)
from websustain.features.analysis.utils.hosting import has_cdn, has_compression, is_green_host
from websustain.platform.config import settings
from websustain.platform.exceptions import FetchError, UpstreamTimeoutError


RICH_PAGE = """
<html>
<head>
  <title>Home</title>
  <meta name="description" content="A test page">
  <link rel="canonical" href="https://example.com/">
  <link rel="stylesheet" href="/site.css">
  <link rel="stylesheet" href="https://fonts.googleapis.com/css?family=Roboto">
  <link rel="preload" as="font" href="/font.woff2">
  <script src="/app.js"></script>
  <script>console.log("inline")</script>
</head>
<body>
  <header></header>
  <nav></nav>
  <main>
    <h1>Title</h1>
    <img src="a.png" alt="a">
    <img src="b.png">
    <video src="clip.mp4"></video>
    <iframe src="https://www.youtube.com/embed/abc"></iframe>
    <form><label>Name</label><input name="name"></form>
  </main>
  <footer></footer>
</body>
</html>
"""

BARE_PAGE = "<html><body><p>hello</p></body></html>"


def test_analyze_rich_markup():
    data = analyze_markup(
        "https://www.netlify.com",
        RICH_PAGE,
        load_time_ms=500,
        size_bytes=2048,
        headers={"content-encoding": "gzip", "cf-cache-status": "HIT"},
    )

    assert data.image_count == 2
    assert data.script_count == 1
    assert data.css_count == 2
    assert data.font_count == 2
    assert data.video_count == 2

    assert data.accessibility_score == 90
    assert data.seo_score == 100
    assert data.performance_score == 100
    assert data.page_size == 2.0
    assert data.total_resource_size == 2048
    assert data.carbon_footprint == 1.04

    assert data.green_hosting is True
    assert data.compression_enabled is True
    assert data.cdn_enabled is True


def test_analyze_bare_markup():
    data = analyze_markup("https://example.com", BARE_PAGE, 100, 200, {})

    assert data.image_count == 0
    assert data.accessibility_score == 65
    assert data.seo_score == 40
    assert data.green_hosting is False
    assert data.compression_enabled is False
    assert data.cdn_enabled is False


def test_unlabelled_inputs_are_penalized():
    html = "<main><header></header><footer></footer><h2>x</h2><input><input><label>a</label></main>"
    data = analyze_markup("https://example.com", html, 100, 200, {})
    assert data.accessibility_score == 85


def test_duplicate_h1_penalty():
    html = (
        '<title>t</title><meta name="description" content="d">'
        '<link rel="canonical" href="/"><h1>a</h1><h1>b</h1>'
    )
    data = analyze_markup("https://example.com", html, 100, 200, {})
    assert data.seo_score == 90


@pytest.mark.parametrize(
    "load_time, size_kb, expected",
    [
        (500, 100, 100),
        (1500, 100, 90),
        (2500, 600, 75),
        (3500, 1500, 55),
        (5000, 5000, 45),
    ],
)
def test_performance_heuristic(load_time, size_kb, expected):
    assert performance_score(load_time, size_kb) == expected


def test_carbon_formula():
    assert carbon_footprint(1000, 0, 0) == 0.5
    assert carbon_footprint(2000, 10, 1) == 1.7


def test_green_host_allow_list():
    hosts = settings.GREEN_HOSTS
    assert is_green_host("https://www.netlify.com", hosts) is True
    assert is_green_host("https://app.netlify.com/path", hosts) is True
    assert is_green_host("https://example.com", hosts) is False
    assert is_green_host("https://notnetlify.com", hosts) is False


def test_header_flags():
    assert has_compression({"content-encoding": "br"}) is True
    assert has_compression({"content-encoding": "identity"}) is False
    assert has_cdn({"x-amz-cf-id": "abc"}) is True
    assert has_cdn({"server": "nginx"}) is False


@pytest.mark.asyncio
async def test_fetch_parses_response():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["user_agent"] = request.headers["user-agent"]
        return httpx.Response(200, text=RICH_PAGE, headers={"x-vercel-cache": "HIT"})

    fetcher = PageFetcher(transport=httpx.MockTransport(handler))
    data = await fetcher.fetch("https://example.com")

    assert seen["user_agent"] == settings.USER_AGENT
    assert data.image_count == 2
    assert data.cdn_enabled is True
    assert data.compression_enabled is False
    assert data.total_resource_size == len(RICH_PAGE.encode("utf-8"))
    assert data.load_time >= 0


@pytest.mark.asyncio
async def test_fetch_non_success_raises_fetch_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, text="forbidden")

    fetcher = PageFetcher(transport=httpx.MockTransport(handler))
    with pytest.raises(FetchError):
        await fetcher.fetch("https://example.com")


@pytest.mark.asyncio
async def test_fetch_network_failure_raises_fetch_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    fetcher = PageFetcher(transport=httpx.MockTransport(handler))
    with pytest.raises(FetchError):
        await fetcher.fetch("https://example.com")


@pytest.mark.asyncio
async def test_fetch_timeout_raises_upstream_timeout():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("too slow", request=request)

    fetcher = PageFetcher(timeout=1.0, transport=httpx.MockTransport(handler))
    with pytest.raises(UpstreamTimeoutError):
        await fetcher.fetch("https://example.com")


@pytest.mark.asyncio
async def test_simulate_is_deterministic_and_bounded():
    fetcher = PageFetcher()
    first = await fetcher.simulate("https://example.com")
    second = await fetcher.simulate("https://example.com")

    assert first == second
    assert 500 <= first.load_time <= 2500
    assert 300 <= first.page_size <= 1800
    assert 3 <= first.image_count < 18
    assert 0 <= first.video_count < 2
    assert 60 <= first.accessibility_score <= 95
    assert 65 <= first.seo_score <= 95
    assert 60 <= first.performance_score <= 95


@pytest.mark.asyncio
async def test_simulate_accepts_lone_surrogate_url():
    data = await PageFetcher().simulate("https://example.com/\ud800")
    assert 500 <= data.load_time <= 2500


def test_carbon_rounds_half_up():
    # 250 KB -> exactly 0.125 g, which banker's rounding would take to 0.12
    assert carbon_footprint(250, 0, 0) == 0.13

"""
Test configuration and fixtures for the Web Sustainability Checker API.

Outbound calls are never made from tests: services take an httpx transport
or are swapped out through FastAPI dependency overrides.
"""

import os
from typing import Generator

from dotenv import load_dotenv

import pytest
from fastapi.testclient import TestClient

load_dotenv()

# Keep tests off the real PageSpeed and OpenAI APIs whatever the local .env says
os.environ["GOOGLE_PAGESPEED_API_KEY"] = ""
os.environ["OPENAI_API_KEY"] = ""


@pytest.fixture(scope="session")
def test_app():
    """Create FastAPI test application."""
    from websustain.main import app

    return app


@pytest.fixture(scope="function")
def client(test_app) -> Generator[TestClient, None, None]:
    """
    Create a test client for making HTTP requests.
    Dependency overrides set by a test are cleared afterwards.
    """
    with TestClient(test_app) as test_client:
        yield test_client
    test_app.dependency_overrides.clear()


def make_analysis(**overrides):
    """A neutral AnalysisResult that triggers no penalties or bonuses."""
    from websustain.features.analysis.schemas.analysis import AnalysisResult

    fields = dict(
        url="https://example.com",
        load_time=1000,
        page_size=500,
        total_resource_size=500 * 1024,
        image_count=5,
        script_count=5,
        css_count=2,
        font_count=1,
        video_count=0,
        performance_score=80,
        accessibility_score=90,
        seo_score=90,
        carbon_footprint=0.5,
    )
    fields.update(overrides)
    return AnalysisResult(**fields)


@pytest.fixture
def analysis_factory():
    return make_analysis

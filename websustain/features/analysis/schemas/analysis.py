"""
Analysis Schemas

The normalized measurement set every data source produces.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AnalysisMethod(str, Enum):
    PAGESPEED = "pagespeed"
    BASIC = "basic"
    SIMULATED = "simulated"


class AnalysisResult(CamelModel):
    url: str

    # Timing in milliseconds, sizes in bytes unless noted
    load_time: float
    page_size: float = Field(description="Transferred size in KB")
    total_resource_size: int

    image_count: int = 0
    script_count: int = 0
    css_count: int = 0
    font_count: int = 0
    video_count: int = 0
    request_count: Optional[int] = None

    performance_score: int
    accessibility_score: int
    seo_score: int
    best_practices_score: Optional[int] = None

    carbon_footprint: Optional[float] = Field(default=None, alias="actualCarbonFootprint")
    green_hosting: bool = False
    compression_enabled: bool = False
    cdn_enabled: bool = False

    # Core Web Vitals and lab timings (PageSpeed-shaped producers only)
    first_contentful_paint: Optional[float] = None
    largest_contentful_paint: Optional[float] = None
    first_input_delay: Optional[float] = None
    cumulative_layout_shift: Optional[float] = None
    speed_index: Optional[float] = None
    total_blocking_time: Optional[float] = None

    # Resource breakdown
    image_resource_size: Optional[int] = None
    script_resource_size: Optional[int] = None
    stylesheet_resource_size: Optional[int] = None
    font_resource_size: Optional[int] = None

    # Optimization opportunities
    unused_css_bytes: Optional[int] = None
    unused_js_bytes: Optional[int] = None
    unoptimized_image_bytes: Optional[int] = None

    server_response_time: Optional[float] = None
    render_blocking_resources: Optional[int] = None
    dom_size: Optional[int] = None
    critical_request_chains: Optional[int] = None

    @property
    def page_size_mb(self) -> float:
        return self.total_resource_size / (1024 * 1024)

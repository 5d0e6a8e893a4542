"""
Report Schemas

Request and response models for the report endpoint.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from websustain.features.analysis.schemas.analysis import AnalysisMethod, AnalysisResult, CamelModel
from websustain.features.analysis.schemas.emissions import EmissionsEstimate


class ReportPayload(BaseModel):
    url: Optional[str] = None


class ReportRequest(BaseModel):
    payload: Optional[ReportPayload] = None

    class Config:
        json_schema_extra = {
            "example": {
                "payload": {"url": "https://example.com"}
            }
        }


class SustainabilityReport(CamelModel):
    overall_score: int
    energy_efficiency: int
    carbon_footprint: int
    resource_optimization: int
    accessibility: int
    recommendations: List[str]
    analysis_method: AnalysisMethod
    analysis_data: AnalysisResult
    co2_data: Optional[EmissionsEstimate] = None

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

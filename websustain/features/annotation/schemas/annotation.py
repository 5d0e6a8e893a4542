from typing import Any, Dict, Optional

from pydantic import BaseModel


class AnnotationRequest(BaseModel):
    payload: Optional[Dict[str, Any]] = None

    class Config:
        json_schema_extra = {
            "example": {
                "payload": {
                    "overall_score": 72,
                    "grade": "B",
                    "est_co2_g_per_view": 0.31,
                    "dimensions": {
                        "performance_efficiency": 68,
                        "accessibility": 81,
                        "energy_carbon": 70,
                        "hosting_policy": 50,
                        "responsible_ux": 77,
                    },
                    "context": {"signal_counts": {"webp": 4, "cdn": 1}},
                }
            }
        }

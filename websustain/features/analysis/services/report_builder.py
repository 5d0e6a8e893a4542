from typing import Optional

from websustain.features.analysis.schemas.analysis import AnalysisMethod, AnalysisResult
from websustain.features.analysis.schemas.report import SustainabilityReport
from websustain.features.analysis.services.emissions import EmissionsEstimator
from websustain.features.analysis.services.scoring import (
    BASIC_RECOMMENDATION_CAP,
    EMISSIONS_WEIGHTED,
    EQUAL_WEIGHT,
    PAGESPEED_RECOMMENDATION_CAP,
    basic_recommendations,
    basic_sub_scores,
    finalize_recommendations,
    pagespeed_recommendations,
    pagespeed_sub_scores,
)


def build_basic_report(data: AnalysisResult, method: AnalysisMethod) -> SustainabilityReport:
    """Report for heuristic data (direct fetch or its simulation), equal-weight overall."""
    scores = basic_sub_scores(data)
    recommendations = finalize_recommendations(
        method,
        basic_recommendations(data, scores),
        BASIC_RECOMMENDATION_CAP,
    )

    return SustainabilityReport(
        overall_score=EQUAL_WEIGHT.overall(scores, data),
        energy_efficiency=scores.energy_efficiency,
        carbon_footprint=scores.carbon_footprint,
        resource_optimization=scores.resource_optimization,
        accessibility=scores.accessibility,
        recommendations=recommendations,
        analysis_method=method,
        analysis_data=data,
    )


def build_pagespeed_report(
    data: AnalysisResult,
    method: AnalysisMethod,
    estimator: Optional[EmissionsEstimator] = None,
) -> SustainabilityReport:
    """
    Report for PageSpeed-shaped data (real or simulated).

    Estimates emissions from the total transfer size, scores with the
    emissions-weighted overall formula, and reports the per-visit CO2 as the
    analysis' carbon footprint.
    """
    estimator = estimator or EmissionsEstimator()
    co2 = estimator.estimate(data.total_resource_size, data.green_hosting, data)

    scores = pagespeed_sub_scores(data, co2)
    recommendations = finalize_recommendations(
        method,
        pagespeed_recommendations(data, scores, co2),
        PAGESPEED_RECOMMENDATION_CAP,
    )

    return SustainabilityReport(
        overall_score=EMISSIONS_WEIGHTED.overall(scores, data),
        energy_efficiency=scores.energy_efficiency,
        carbon_footprint=scores.carbon_footprint,
        resource_optimization=scores.resource_optimization,
        accessibility=scores.accessibility,
        recommendations=recommendations,
        analysis_method=method,
        analysis_data=data.model_copy(update={"carbon_footprint": co2.co2_per_visit}),
        co2_data=co2,
    )

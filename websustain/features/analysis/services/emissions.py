from typing import Optional

from websustain.features.analysis.schemas.analysis import AnalysisResult
from websustain.features.analysis.schemas.emissions import (
    EmissionsBreakdown,
    EmissionsEstimate,
    GreenHostingImpact,
    OptimizationPotential,
)
from websustain.features.analysis.utils.swd_model import (
    EmissionResult,
    SustainableWebDesignModel,
    VisitOptions,
)
from websustain.platform.config import settings
from websustain.platform.logger import get_logger

logger = get_logger(__name__)

# 75% first-time visitors, 25% returning, 2% of data re-fetched on return
VISIT_MIX = VisitOptions(
    first_visit_percentage=0.75,
    return_visit_percentage=0.25,
    data_reload_ratio=0.02,
)

# Upper bound of grams per visit for each rating
RATING_THRESHOLDS = [
    (0.095, "A+"),
    (0.186, "A"),
    (0.341, "B"),
    (0.493, "C"),
    (0.656, "D"),
    (0.846, "E"),
]


def _total(result: EmissionResult) -> float:
    if isinstance(result, (int, float)):
        return float(result)
    return float(result.total)


def rating_for(co2_grams_per_visit: float) -> str:
    for limit, rating in RATING_THRESHOLDS:
        if co2_grams_per_visit <= limit:
            return rating
    return "F"


class EmissionsEstimator:
    """Turns transferred byte counts into CO2 grams, a rating and savings estimates."""

    def __init__(self, model: Optional[SustainableWebDesignModel] = None):
        self.model = model or SustainableWebDesignModel(results=settings.EMISSIONS_RESULTS)

    def estimate(
        self,
        bytes_transferred: float,
        is_green_hosting: bool = False,
        analysis: Optional[AnalysisResult] = None,
    ) -> EmissionsEstimate:
        per_byte = self.model.per_byte(bytes_transferred, is_green_hosting)
        per_visit = self.model.per_visit(bytes_transferred, is_green_hosting, VISIT_MIX)

        if isinstance(per_byte, (int, float)):
            breakdown = EmissionsBreakdown()
        else:
            breakdown = EmissionsBreakdown(
                data_center_co2=per_byte.data_center_co2e,
                network_co2=per_byte.network_co2e,
                device_co2=per_byte.consumer_device_co2e,
                operational_co2=per_byte.total_operational_co2e,
                embodied_co2=per_byte.total_embodied_co2e,
            )

        total_co2 = _total(per_byte)
        visit_co2 = _total(per_visit)
        rating = rating_for(visit_co2)

        if analysis is not None:
            optimization = self.optimization_potential(analysis)
        else:
            optimization = OptimizationPotential(
                unused_css_savings=0.0,
                unused_js_savings=0.0,
                image_optimization_savings=0.0,
                total_potential_savings=0.0,
            )

        logger.info(
            f"CO2 estimate for {bytes_transferred / 1024 / 1024:.2f}MB: "
            f"{total_co2:.4f}g per transfer, {visit_co2:.4f}g per visit, rating {rating}"
        )

        return EmissionsEstimate(
            total_co2=total_co2,
            co2_per_visit=visit_co2,
            co2_rating=rating,
            breakdown=breakdown,
            green_hosting_impact=self.green_hosting_impact(bytes_transferred, is_green_hosting),
            optimization_potential=optimization,
        )

    def green_hosting_impact(self, bytes_transferred: float, is_currently_green: bool) -> GreenHostingImpact:
        current = _total(self.model.per_byte(bytes_transferred, is_currently_green))
        green = _total(self.model.per_byte(bytes_transferred, True))

        potential_savings = abs(current - green)
        savings_percentage = (potential_savings / current) * 100 if current > 0 else 0.0

        return GreenHostingImpact(
            current_co2=current,
            with_green_hosting=green,
            potential_savings=potential_savings,
            savings_percentage=savings_percentage,
        )

    def optimization_potential(self, analysis: AnalysisResult) -> OptimizationPotential:
        css = _total(self.model.per_byte(analysis.unused_css_bytes or 0, False))
        js = _total(self.model.per_byte(analysis.unused_js_bytes or 0, False))
        images = _total(self.model.per_byte(analysis.unoptimized_image_bytes or 0, False))

        return OptimizationPotential(
            unused_css_savings=css,
            unused_js_savings=js,
            image_optimization_savings=images,
            total_potential_savings=css + js + images,
        )

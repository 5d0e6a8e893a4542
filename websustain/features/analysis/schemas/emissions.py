from pydantic import Field

from websustain.features.analysis.schemas.analysis import CamelModel


class EmissionsBreakdown(CamelModel):
    data_center_co2: float = Field(default=0.0, alias="dataCenterCO2")
    network_co2: float = Field(default=0.0, alias="networkCO2")
    device_co2: float = Field(default=0.0, alias="deviceCO2")
    operational_co2: float = Field(default=0.0, alias="operationalCO2")
    embodied_co2: float = Field(default=0.0, alias="embodiedCO2")


class GreenHostingImpact(CamelModel):
    current_co2: float = Field(alias="currentCO2")
    with_green_hosting: float
    potential_savings: float
    savings_percentage: float


class OptimizationPotential(CamelModel):
    unused_css_savings: float
    unused_js_savings: float
    image_optimization_savings: float
    total_potential_savings: float


class EmissionsEstimate(CamelModel):
    total_co2: float = Field(alias="totalCO2")
    co2_per_visit: float = Field(alias="co2PerVisit")
    co2_rating: str = Field(alias="co2Rating")
    breakdown: EmissionsBreakdown
    green_hosting_impact: GreenHostingImpact
    optimization_potential: OptimizationPotential

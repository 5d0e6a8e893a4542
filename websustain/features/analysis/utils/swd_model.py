"""
Sustainable Web Design model (v4), per-byte and per-visit CO2e.

Energy per GB transferred is split across data centre, network and user
device, each with an operational and an embodied share. Operational energy
is converted with the grid intensity (renewable intensity for a green data
centre); embodied energy always uses the global grid intensity.
"""
from dataclasses import dataclass
from typing import Union

GIGABYTE = 1000 * 1000 * 1000

# kWh per GB
OPERATIONAL_KWH_PER_GB_DATACENTER = 0.055
OPERATIONAL_KWH_PER_GB_NETWORK = 0.059
OPERATIONAL_KWH_PER_GB_DEVICE = 0.080
EMBODIED_KWH_PER_GB_DATACENTER = 0.012
EMBODIED_KWH_PER_GB_NETWORK = 0.013
EMBODIED_KWH_PER_GB_DEVICE = 0.081

# gCO2e per kWh
GLOBAL_GRID_INTENSITY = 494
RENEWABLES_GRID_INTENSITY = 50


@dataclass(frozen=True)
class VisitOptions:
    first_visit_percentage: float = 1.0
    return_visit_percentage: float = 0.0
    data_reload_ratio: float = 0.0


@dataclass(frozen=True)
class EmissionSegments:
    data_center_operational_co2e: float
    network_operational_co2e: float
    consumer_device_operational_co2e: float
    data_center_embodied_co2e: float
    network_embodied_co2e: float
    consumer_device_embodied_co2e: float

    @property
    def data_center_co2e(self) -> float:
        return self.data_center_operational_co2e + self.data_center_embodied_co2e

    @property
    def network_co2e(self) -> float:
        return self.network_operational_co2e + self.network_embodied_co2e

    @property
    def consumer_device_co2e(self) -> float:
        return self.consumer_device_operational_co2e + self.consumer_device_embodied_co2e

    @property
    def total_operational_co2e(self) -> float:
        return (
            self.data_center_operational_co2e
            + self.network_operational_co2e
            + self.consumer_device_operational_co2e
        )

    @property
    def total_embodied_co2e(self) -> float:
        return (
            self.data_center_embodied_co2e
            + self.network_embodied_co2e
            + self.consumer_device_embodied_co2e
        )

    @property
    def total(self) -> float:
        return self.total_operational_co2e + self.total_embodied_co2e


EmissionResult = Union[float, EmissionSegments]


class SustainableWebDesignModel:
    """
    results="segment" returns EmissionSegments, results="total" a bare float.
    """

    def __init__(
        self,
        results: str = "segment",
        grid_intensity: float = GLOBAL_GRID_INTENSITY,
        green_intensity: float = RENEWABLES_GRID_INTENSITY,
    ):
        if results not in ("segment", "total"):
            raise ValueError(f"Unknown results mode: {results}")
        self.results = results
        self.grid_intensity = grid_intensity
        self.green_intensity = green_intensity

    def _segments(self, bytes_transferred: float, green: bool) -> EmissionSegments:
        gb = max(0.0, float(bytes_transferred)) / GIGABYTE
        dc_intensity = self.green_intensity if green else self.grid_intensity

        return EmissionSegments(
            data_center_operational_co2e=gb * OPERATIONAL_KWH_PER_GB_DATACENTER * dc_intensity,
            network_operational_co2e=gb * OPERATIONAL_KWH_PER_GB_NETWORK * self.grid_intensity,
            consumer_device_operational_co2e=gb * OPERATIONAL_KWH_PER_GB_DEVICE * self.grid_intensity,
            data_center_embodied_co2e=gb * EMBODIED_KWH_PER_GB_DATACENTER * self.grid_intensity,
            network_embodied_co2e=gb * EMBODIED_KWH_PER_GB_NETWORK * self.grid_intensity,
            consumer_device_embodied_co2e=gb * EMBODIED_KWH_PER_GB_DEVICE * self.grid_intensity,
        )

    def _shape(self, segments: EmissionSegments) -> EmissionResult:
        return segments if self.results == "segment" else segments.total

    def per_byte(self, bytes_transferred: float, green: bool = False) -> EmissionResult:
        return self._shape(self._segments(bytes_transferred, green))

    def per_visit(
        self,
        bytes_transferred: float,
        green: bool = False,
        options: VisitOptions = VisitOptions(),
    ) -> EmissionResult:
        effective_bytes = (
            bytes_transferred * options.first_visit_percentage
            + bytes_transferred * options.return_visit_percentage * options.data_reload_ratio
        )
        return self._shape(self._segments(effective_bytes, green))

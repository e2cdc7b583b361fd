"""
Area resolution from temperature, humidity and light/depth readings.

This module implements:
- The neutral override for the (0°, 50%) reading
- Sea lookup (humidity 100) by ocean side and normalized depth
- Land lookup through a 9x9 temperature/humidity band matrix
- Batch resolution of step grids for environment previews
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np
import structlog

from .areas import DEFAULT_CATALOG, NEUTRAL, AreaCatalog, DepthBand, SeaSide

logger = structlog.get_logger()

SEA_HUMIDITY = 100


@dataclass(frozen=True)
class Band:
    """Closed integer range [low, high]; single values have low == high."""

    key: str
    low: int
    high: int

    def contains(self, value: float) -> bool:
        return self.low <= value <= self.high


# Temperature bands, hottest row first
TEMPERATURE_BANDS = [
    Band("999", 999, 999),
    Band("40-45", 40, 45),
    Band("35", 35, 35),
    Band("5-30", 5, 30),
    Band("0", 0, 0),
    Band("-5--30", -30, -5),
    Band("-35", -35, -35),
    Band("-40--45", -45, -40),
    Band("-273", -273, -273),
]

# Humidity bands, driest column first
HUMIDITY_BANDS = [
    Band("0", 0, 0),
    Band("5-10", 5, 10),
    Band("15-20", 15, 20),
    Band("25-45", 25, 45),
    Band("50", 50, 50),
    Band("55-75", 55, 75),
    Band("80-85", 80, 85),
    Band("90-95", 90, 95),
    Band("99", 99, 99),
]

SEA_TABLE = {
    SeaSide.SOUTH: {
        DepthBand.SHALLOW: "SS_SHALLOW",
        DepthBand.MID: "SS_MID",
        DepthBand.DEEP: "SS_DEEP",
    },
    SeaSide.NORTH: {
        DepthBand.SHALLOW: "SN_SHALLOW",
        DepthBand.MID: "SN_MID",
        DepthBand.DEEP: "SN_DEEP",
    },
}


def default_land_matrix() -> List[List[str]]:
    """
    Land area matrix [temperature_band][humidity_band].

    The centre cell (0°, 50%) holds NEUTRAL; the resolver overrides that
    reading before the matrix is consulted anyway.
    """
    return [
        # 999
        ["V1", "V2", "V3", "V3", "V3", "E3", "E3", "E2", "E1"],
        # 40..45
        ["V2", "V2", "V3", "V3", "V3", "E3", "E3", "E2", "E2"],
        # 35
        ["V3", "V3", "V3", "V3", "V3", "E3", "E3", "E3", "E3"],
        # 5..30
        ["V3", "V3", "V3", "V4", "V4", "E4", "E4", "E3", "E3"],
        # 0
        ["T3", "T3", "T3", "T4", NEUTRAL, "E4", "E4", "E3", "E3"],
        # -5..-30
        ["T3", "T3", "T3", "T4", "S4", "S4", "S3", "S3", "S3"],
        # -35
        ["T3", "T3", "T3", "T4", "S4", "S4", "S3", "S3", "S3"],
        # -40..-45
        ["T2", "T2", "T3", "T3", "S3", "S3", "S3", "S2", "S2"],
        # -273
        ["T1", "T2", "T3", "T3", "S3", "S3", "S3", "S2", "S1"],
    ]


def to_number(value) -> Optional[float]:
    """Coerce a reading component to a finite number, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def normalize_depth(value) -> DepthBand:
    """Snap a depth reading to 0/50/100 using midpoint thresholds."""
    depth = to_number(value)
    if depth is None:
        return DepthBand.MID
    if depth <= 25:
        return DepthBand.SHALLOW
    if depth <= 75:
        return DepthBand.MID
    return DepthBand.DEEP


def sea_side(temperature: float) -> SeaSide:
    return SeaSide.SOUTH if temperature >= 0 else SeaSide.NORTH


class AreaResolver:
    """Maps environment readings to area ids."""

    def __init__(
        self,
        catalog: Optional[AreaCatalog] = None,
        land_matrix: Optional[Sequence[Sequence[Optional[str]]]] = None,
    ):
        """
        Initialize area resolver.

        Args:
            catalog: Area catalog used to validate resolved ids
            land_matrix: Override for the 9x9 land matrix
        """
        self.catalog = catalog or DEFAULT_CATALOG
        self.land_matrix = [list(row) for row in (land_matrix or default_land_matrix())]
        self.temperature_bands = TEMPERATURE_BANDS
        self.humidity_bands = HUMIDITY_BANDS

    def _get_temperature_band(self, temperature: float) -> Optional[int]:
        """Get temperature band index (0-8), or None when uncovered."""
        for i, band in enumerate(self.temperature_bands):
            if band.contains(temperature):
                return i
        return None

    def _get_humidity_band(self, humidity: float) -> Optional[int]:
        """Get humidity band index (0-8), or None when uncovered."""
        for i, band in enumerate(self.humidity_bands):
            if band.contains(humidity):
                return i
        return None

    def resolve(self, temperature, humidity, light_or_depth=None) -> str:
        """
        Resolve a reading to an area id.

        Args:
            temperature: Temperature in °C
            humidity: Humidity 0-100; exactly 100 means underwater
            light_or_depth: Light level on land, water depth at sea

        Returns:
            Catalog area id, or NEUTRAL
        """
        t = to_number(temperature)
        h = to_number(humidity)
        if t is None or h is None:
            return NEUTRAL

        if t == 0 and h == 50:
            return NEUTRAL

        if h == SEA_HUMIDITY:
            area_id = SEA_TABLE[sea_side(t)][normalize_depth(light_or_depth)]
            return self._guard(area_id, t, h, light_or_depth)

        t_band = self._get_temperature_band(t)
        h_band = self._get_humidity_band(h)
        if t_band is None or h_band is None:
            return NEUTRAL

        area_id = self.land_matrix[t_band][h_band]
        if not area_id or area_id == NEUTRAL:
            return NEUTRAL

        return self._guard(
            area_id,
            t,
            h,
            light_or_depth,
            temperature_band=self.temperature_bands[t_band].key,
            humidity_band=self.humidity_bands[h_band].key,
        )

    def _guard(self, area_id: str, temperature, humidity, light, **bands) -> str:
        """Degrade ids missing from the catalog to NEUTRAL."""
        if area_id in self.catalog:
            return area_id

        logger.warning(
            "Unknown area id",
            area_id=area_id,
            temperature=temperature,
            humidity=humidity,
            light=light,
            **bands,
        )
        return NEUTRAL

    def resolve_grid(
        self,
        temperatures: Sequence[float],
        humidities: Sequence[float],
        light_or_depth=50,
    ) -> np.ndarray:
        """
        Resolve every temperature/humidity combination.

        Returns:
            Object array of area ids shaped (len(temperatures), len(humidities))
        """
        grid = np.full((len(temperatures), len(humidities)), NEUTRAL, dtype=object)

        for i, temperature in enumerate(temperatures):
            for j, humidity in enumerate(humidities):
                grid[i, j] = self.resolve(temperature, humidity, light_or_depth)

        logger.debug(
            "Resolved area grid",
            shape=grid.shape,
            unique_areas=len(np.unique(grid)),
        )
        return grid

    def area_statistics(self, grid: np.ndarray) -> Dict[str, int]:
        """
        Count cells per area id in a resolved grid.

        Returns:
            Dictionary of area id to cell count
        """
        if grid.size == 0:
            return {}

        unique_ids, counts = np.unique(grid.astype(str), return_counts=True)
        return {str(area_id): int(count) for area_id, count in zip(unique_ids, counts)}


default_resolver = AreaResolver()


def resolve_area(temperature, humidity, light_or_depth=None) -> str:
    """Resolve a reading with the default catalog and land matrix."""
    return default_resolver.resolve(temperature, humidity, light_or_depth)

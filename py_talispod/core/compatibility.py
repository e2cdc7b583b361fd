"""
Compatibility ranking between a creature and its current area.

This module implements:
- Light expectation by hour of day (land areas only)
- Super-best and best matching against the creature's ideal environment
- Elemental relation tiers from the two opposing attribute pairs
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

import structlog

from .area_resolver import AreaResolver, default_resolver, to_number
from .areas import ATTRIBUTE_META, NEUTRAL, Attribute, coerce_attribute
from .creature import Creature, IdealEnvironment
from .environment import EnvironmentReading

logger = structlog.get_logger()

# Stand-in light level used when deriving a best area from a land ideal.
# The ideal environment carries no light value, so this is a modeling
# simplification rather than a physical expectation.
LAND_FALLBACK_LIGHT = 50

OPPOSITE_ATTRIBUTES = {
    Attribute.VOLCANO: Attribute.STORM,
    Attribute.STORM: Attribute.VOLCANO,
    Attribute.TORNADO: Attribute.EARTHQUAKE,
    Attribute.EARTHQUAKE: Attribute.TORNADO,
}


class Rank(str, Enum):
    """Compatibility tiers, best first; neutral is orthogonal."""

    SUPERBEST = "superbest"
    BEST = "best"
    GOOD = "good"
    NORMAL = "normal"
    BAD = "bad"
    NEUTRAL = "neutral"

    @property
    def en(self) -> str:
        return RANK_LABELS[self]


RANK_LABELS = {
    Rank.SUPERBEST: "SuperBest",
    Rank.BEST: "Best",
    Rank.GOOD: "Good",
    Rank.NORMAL: "Normal",
    Rank.BAD: "Bad",
    Rank.NEUTRAL: "Neutral",
}


@dataclass
class RankInfo:
    """Ranking of one reading for one creature; recomputed every tick."""

    rank: Rank
    area_id: str
    env_attribute: Attribute
    area_name: Optional[str]
    area_en_name: Optional[str]
    is_sea: bool
    expected_light: Optional[int]
    light_ok: bool

    @property
    def env_attribute_en(self) -> str:
        return ATTRIBUTE_META[self.env_attribute].en

    @property
    def env_attribute_jp(self) -> str:
        return ATTRIBUTE_META[self.env_attribute].jp


def expected_light_by_time(now: datetime) -> int:
    """
    Light level a land area should have at this hour.

    06:00-09:59 -> 50, 10:00-15:59 -> 100, otherwise 0.
    """
    hour = now.hour
    if 6 <= hour <= 9:
        return 50
    if 10 <= hour <= 15:
        return 100
    return 0


def opposite_attribute(attribute: Optional[Attribute]) -> Optional[Attribute]:
    return OPPOSITE_ATTRIBUTES.get(attribute) if attribute is not None else None


def relation_rank(creature_attribute, env_attribute, weak_attribute=None) -> Rank:
    """
    Relation tier between a creature's attribute and an area's attribute.

    Args:
        creature_attribute: The creature's own attribute (None = attribute-less)
        env_attribute: Attribute of the resolved area
        weak_attribute: Optional override for the creature's opposite

    Returns:
        NEUTRAL, GOOD, BAD or NORMAL
    """
    env_attribute = coerce_attribute(env_attribute)
    if env_attribute is None or env_attribute == Attribute.NEUTRAL:
        return Rank.NEUTRAL

    creature_attribute = coerce_attribute(creature_attribute)
    if creature_attribute is None or creature_attribute == Attribute.NEUTRAL:
        return Rank.NORMAL

    if env_attribute == creature_attribute:
        return Rank.GOOD

    # A missing or unrecognized override keeps the fixed pairing
    adverse = coerce_attribute(weak_attribute)
    if adverse is None or adverse == Attribute.NEUTRAL:
        adverse = opposite_attribute(creature_attribute)
    if adverse is not None and env_attribute == adverse:
        return Rank.BAD

    return Rank.NORMAL


def is_super_best(ideal: Optional[IdealEnvironment], temperature, humidity, light) -> bool:
    """Exact temperature and humidity match, plus depth when underwater."""
    if ideal is None:
        return False

    if to_number(temperature) != ideal.temperature or to_number(humidity) != ideal.humidity:
        return False

    if ideal.humidity == 100:
        return to_number(light) == ideal.water_depth
    return True


class CompatibilityEngine:
    """Ranks creature/area compatibility for a reading at a given time."""

    def __init__(self, resolver: Optional[AreaResolver] = None):
        self.resolver = resolver or default_resolver
        self.catalog = self.resolver.catalog

    def best_area_fallback(self, ideal: Optional[IdealEnvironment]) -> Optional[str]:
        """Area the ideal environment resolves to, or None when neutral."""
        if ideal is None:
            return None

        light = ideal.water_depth if ideal.humidity == 100 else LAND_FALLBACK_LIGHT
        area_id = self.resolver.resolve(ideal.temperature, ideal.humidity, light)
        return None if area_id == NEUTRAL else area_id

    def is_best(self, creature: Creature, area_id: str) -> bool:
        if creature.best_area_id:
            return str(creature.best_area_id) == str(area_id)

        fallback = self.best_area_fallback(creature.ideal_environment)
        return fallback is not None and fallback == str(area_id)

    def compute_rank(
        self,
        creature: Creature,
        environment: EnvironmentReading,
        now: datetime,
        creature_attribute=None,
    ) -> RankInfo:
        """
        Rank a creature against the area of a reading.

        Args:
            creature: Creature being ranked
            environment: Current reading
            now: Wall-clock time supplied by the caller
            creature_attribute: Attribute to rank with; defaults to the creature's

        Returns:
            RankInfo for this reading
        """
        if creature_attribute is None:
            creature_attribute = creature.attribute

        temperature = environment.temperature
        humidity = environment.humidity
        light = environment.light

        area_id = self.resolver.resolve(temperature, humidity, light)

        if area_id == NEUTRAL:
            return RankInfo(
                rank=Rank.NEUTRAL,
                area_id=NEUTRAL,
                env_attribute=Attribute.NEUTRAL,
                area_name=None,
                area_en_name=None,
                is_sea=False,
                expected_light=expected_light_by_time(now),
                light_ok=True,
            )

        area = self.catalog.get(area_id)
        env_attribute = area.attribute if area else Attribute.NEUTRAL
        is_sea = bool(area) and area.is_sea

        def ranked(rank: Rank, expected_light: Optional[int], light_ok: bool) -> RankInfo:
            return RankInfo(
                rank=rank,
                area_id=area_id,
                env_attribute=env_attribute,
                area_name=area.name if area else None,
                area_en_name=area.en_name if area else None,
                is_sea=is_sea,
                expected_light=expected_light,
                light_ok=light_ok,
            )

        if is_sea:
            expected_light = None
        else:
            # Light gate pre-empts every other match on land
            expected_light = expected_light_by_time(now)
            if to_number(light) != expected_light:
                logger.debug(
                    "Light gate failed",
                    area_id=area_id,
                    light=light,
                    expected_light=expected_light,
                )
                return ranked(Rank.BAD, expected_light, False)

        if is_super_best(creature.ideal_environment, temperature, humidity, light):
            return ranked(Rank.SUPERBEST, expected_light, True)

        if self.is_best(creature, area_id):
            return ranked(Rank.BEST, expected_light, True)

        rank = relation_rank(creature_attribute, env_attribute, creature.weak_attribute)
        return ranked(rank, expected_light, True)


default_engine = CompatibilityEngine()


def compute_rank(
    creature: Creature,
    environment: EnvironmentReading,
    now: datetime,
    creature_attribute=None,
) -> RankInfo:
    """Rank with the default resolver and catalog."""
    return default_engine.compute_rank(creature, environment, now, creature_attribute)

"""
Area catalog for environment classification.

This module defines:
- The four elemental attributes and their display metadata
- Immutable Area records (land areas and the six sea areas)
- AreaCatalog, a read-only registry consulted by the resolver
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional

NEUTRAL = "NEUTRAL"


class Attribute(str, Enum):
    """Elemental attributes of areas and creatures."""

    VOLCANO = "volcano"
    TORNADO = "tornado"
    EARTHQUAKE = "earthquake"
    STORM = "storm"
    NEUTRAL = "neutral"


class ElementKey(str, Enum):
    """Growth buckets fed by each elemental attribute."""

    FIRE = "fire"
    WIND = "wind"
    EARTH = "earth"
    WATER = "water"


class AreaType(str, Enum):
    LAND = "land"
    SEA = "sea"


class SeaSide(str, Enum):
    NORTH = "north"
    SOUTH = "south"


class DepthBand(IntEnum):
    """Normalized water depth of a sea area."""

    SHALLOW = 0
    MID = 50
    DEEP = 100


@dataclass(frozen=True)
class AttributeMeta:
    """Display names and growth bucket for an attribute."""

    jp: str
    en: str
    key: Optional[ElementKey]
    stat_label: Optional[str]


ATTRIBUTE_META: Dict[Attribute, AttributeMeta] = {
    Attribute.VOLCANO: AttributeMeta("ヴォルケーノ", "Volcano", ElementKey.FIRE, "Magic"),
    Attribute.TORNADO: AttributeMeta("トルネード", "Tornado", ElementKey.WIND, "Counter"),
    Attribute.EARTHQUAKE: AttributeMeta("アースクエイク", "Earthquake", ElementKey.EARTH, "Attack"),
    Attribute.STORM: AttributeMeta("ストーム", "Storm", ElementKey.WATER, "Recover"),
    Attribute.NEUTRAL: AttributeMeta("無属性", "Neutral", None, None),
}


def coerce_attribute(value) -> Optional[Attribute]:
    """
    Normalize an attribute given as enum, name or value.

    Returns None for a missing attribute and NEUTRAL for anything unknown.
    """
    if value is None or value == "":
        return None
    if isinstance(value, Attribute):
        return value
    text = str(value).strip().lower()
    try:
        return Attribute(text)
    except ValueError:
        return Attribute.NEUTRAL


def element_key_for(attribute) -> Optional[ElementKey]:
    """Growth bucket for an attribute, or None for neutral/unknown."""
    attribute = coerce_attribute(attribute)
    if attribute is None:
        return None
    return ATTRIBUTE_META[attribute].key


@dataclass(frozen=True)
class Area:
    """A discrete environmental zone with a fixed elemental attribute."""

    id: str
    name: str
    en_name: str
    attribute: Attribute
    type: AreaType = AreaType.LAND
    side: Optional[SeaSide] = None
    depth: Optional[DepthBand] = None

    @property
    def is_sea(self) -> bool:
        return self.type == AreaType.SEA


class AreaCatalog:
    """Read-only registry of Area records keyed by id."""

    def __init__(self, areas: Mapping[str, Area]):
        self._areas = MappingProxyType(dict(areas))

    @property
    def areas(self) -> Mapping[str, Area]:
        return self._areas

    def __contains__(self, area_id) -> bool:
        return area_id in self._areas

    def __iter__(self) -> Iterator[Area]:
        return iter(self._areas.values())

    def __len__(self) -> int:
        return len(self._areas)

    def get(self, area_id: Optional[str]) -> Optional[Area]:
        if area_id is None:
            return None
        return self._areas.get(str(area_id))

    def name(self, area_id: Optional[str]) -> Optional[str]:
        area = self.get(area_id)
        return area.name if area else None

    def en_name(self, area_id: Optional[str]) -> Optional[str]:
        area = self.get(area_id)
        return area.en_name if area else None

    def attribute(self, area_id: Optional[str]) -> Attribute:
        area = self.get(area_id)
        return area.attribute if area else Attribute.NEUTRAL

    def is_sea(self, area_id: Optional[str]) -> bool:
        area = self.get(area_id)
        return bool(area) and area.is_sea

    def by_attribute(self, attribute: Attribute) -> List[Area]:
        return [area for area in self._areas.values() if area.attribute == attribute]


def _land(area_id: str, name: str, en_name: str, attribute: Attribute) -> Area:
    return Area(id=area_id, name=name, en_name=en_name, attribute=attribute)


def _sea(area_id: str, name: str, en_name: str, side: SeaSide, depth: DepthBand) -> Area:
    return Area(
        id=area_id,
        name=name,
        en_name=en_name,
        attribute=Attribute.STORM,
        type=AreaType.SEA,
        side=side,
        depth=depth,
    )


def build_default_catalog() -> AreaCatalog:
    """
    Assemble the standard area catalog.

    Land ids use the attribute initial (V/T/E/S) with 1 as the most extreme
    zone; sea ids are SS_* (south) and SN_* (north) by depth band.
    """
    areas = [
        # Volcano
        _land("V1", "火山", "volcano", Attribute.VOLCANO),
        _land("V2", "砂漠", "desert", Attribute.VOLCANO),
        _land("V3", "乾燥帯", "arid zone", Attribute.VOLCANO),
        _land("V4", "広葉樹林", "broadleaf forest", Attribute.VOLCANO),
        # Tornado
        _land("T1", "成層圏", "stratosphere", Attribute.TORNADO),
        _land("T2", "山岳地帯", "mountain region", Attribute.TORNADO),
        _land("T3", "高原", "plateau", Attribute.TORNADO),
        _land("T4", "針葉樹林", "conifer forest", Attribute.TORNADO),
        # Earthquake
        _land("E1", "地底", "underground", Attribute.EARTHQUAKE),
        _land("E2", "熱帯雨林", "tropical rainforest", Attribute.EARTHQUAKE),
        _land("E3", "熱帯", "tropics", Attribute.EARTHQUAKE),
        _land("E4", "温帯草原", "temperate grassland", Attribute.EARTHQUAKE),
        # Storm (land)
        _land("S1", "絶対零度", "absolute zero", Attribute.STORM),
        _land("S2", "極寒地帯", "polar region", Attribute.STORM),
        _land("S3", "寒帯", "subarctic", Attribute.STORM),
        _land("S4", "寒帯草原", "cold steppe", Attribute.STORM),
        # South sea
        _sea("SS_SHALLOW", "南海浅瀬", "south sea (shallow)", SeaSide.SOUTH, DepthBand.SHALLOW),
        _sea("SS_MID", "南海水中", "south sea (mid)", SeaSide.SOUTH, DepthBand.MID),
        _sea("SS_DEEP", "南海深海", "south sea (deep)", SeaSide.SOUTH, DepthBand.DEEP),
        # North sea
        _sea("SN_SHALLOW", "北海浅瀬", "north sea (shallow)", SeaSide.NORTH, DepthBand.SHALLOW),
        _sea("SN_MID", "北海水中", "north sea (mid)", SeaSide.NORTH, DepthBand.MID),
        _sea("SN_DEEP", "北海深海", "north sea (deep)", SeaSide.NORTH, DepthBand.DEEP),
    ]
    return AreaCatalog({area.id: area for area in areas})


def is_sea_area_id(area_id: Optional[str]) -> bool:
    """Classify an id as sea by its prefix, without a catalog lookup."""
    return bool(area_id) and str(area_id).startswith(("SS_", "SN_"))


def is_land_area_id(area_id: Optional[str]) -> bool:
    return bool(area_id) and not is_sea_area_id(area_id) and area_id != NEUTRAL


DEFAULT_CATALOG = build_default_catalog()

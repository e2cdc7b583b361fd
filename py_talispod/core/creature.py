"""
Creature state and species defaults.

The creature is owned by the caller and mutated in place only by the growth
engine. Construction normalizes every numeric field into its legal range so a
freshly built or freshly loaded creature always satisfies
0 <= current_hp <= base_hp + grow_hp.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .areas import Attribute, ElementKey, coerce_attribute

HP_GROW_CAP = 5110
ELEM_GROW_CAP = 630


def clamp_int(value, low: int, high: int, default: Optional[int] = None) -> int:
    """
    Coerce value to an int inside [low, high].

    Non-numeric and non-finite values become default (low when omitted);
    fractions are floored.
    """
    fallback = low if default is None else default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(number):
        return fallback
    return max(low, min(high, math.floor(number)))


def empty_element_stats() -> Dict[ElementKey, int]:
    return {key: 0 for key in ElementKey}


class IdealEnvironment(BaseModel):
    """Exact reading that earns the super-best tier."""

    temperature: int = Field(description="Ideal temperature in °C")
    humidity: int = Field(description="Ideal humidity; 100 means underwater")
    water_depth: int = Field(default=50, description="Ideal depth when underwater")


@dataclass(frozen=True)
class SpeciesProfile:
    """Static description of a species."""

    id: str
    name: str
    en_name: str
    attribute: Attribute
    base_hp: int
    base_stats: Dict[ElementKey, int] = field(default_factory=empty_element_stats)
    ideal_environment: Optional[IdealEnvironment] = None
    best_area_id: Optional[str] = None


WINDRAGON = SpeciesProfile(
    id="windragon",
    name="ウインドラゴン",
    en_name="Windragon",
    attribute=Attribute.TORNADO,
    base_hp=400,
    base_stats={
        ElementKey.FIRE: 60,
        ElementKey.WIND: 100,
        ElementKey.EARTH: 60,
        ElementKey.WATER: 20,
    },
    ideal_environment=IdealEnvironment(temperature=-45, humidity=5, water_depth=50),
)

DEFAULT_SPECIES = WINDRAGON


class Creature(BaseModel):
    """Mutable creature state consumed by the compatibility and growth engines."""

    # Identity
    saga_name: str = Field(default="", description="Owner-chosen saga name")
    species_id: str = Field(default=DEFAULT_SPECIES.id, description="Species identifier")
    species_name: str = Field(default=DEFAULT_SPECIES.name, description="Species display name")
    nickname: str = Field(default="", description="Optional nickname")
    attribute: Optional[Attribute] = Field(
        default=None, description="Own elemental attribute; None is attribute-less"
    )
    ideal_environment: Optional[IdealEnvironment] = Field(
        default=None, description="Super-best target reading"
    )
    best_area_id: Optional[str] = Field(
        default=None, description="Explicit best area; derived from the ideal when absent"
    )
    weak_attribute: Optional[Attribute] = Field(
        default=None, description="Overrides the opposite attribute in relation ranking"
    )

    # Stats
    base_hp: int = Field(default=DEFAULT_SPECIES.base_hp, ge=0, description="Base HP")
    base_stats: Dict[ElementKey, int] = Field(default_factory=empty_element_stats)
    grow_hp: int = Field(default=0, description=f"Grown HP (0..{HP_GROW_CAP})")
    grow_stats: Dict[ElementKey, int] = Field(default_factory=empty_element_stats)
    current_hp: Optional[int] = Field(default=None, description="Current HP; None means full")

    # Throttle counters for elemental growth
    element_tick_counters: Dict[ElementKey, int] = Field(default_factory=empty_element_stats)

    @field_validator("attribute", "weak_attribute", mode="before")
    @classmethod
    def _coerce_attribute(cls, value):
        return coerce_attribute(value)

    @field_validator("base_stats", "grow_stats", "element_tick_counters", mode="before")
    @classmethod
    def _fill_element_stats(cls, value):
        stats = empty_element_stats()
        for raw_key, raw_value in dict(value or {}).items():
            try:
                key = ElementKey(str(getattr(raw_key, "value", raw_key)).lower())
            except ValueError:
                continue
            stats[key] = clamp_int(raw_value, 0, 2**31 - 1)
        return stats

    @field_validator("grow_hp", mode="before")
    @classmethod
    def _coerce_grow_hp(cls, value):
        return clamp_int(value, 0, HP_GROW_CAP)

    @field_validator("current_hp", mode="before")
    @classmethod
    def _coerce_current_hp(cls, value):
        if value is None:
            return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        if not math.isfinite(number):
            return None
        return math.floor(number)

    @model_validator(mode="after")
    def _normalize(self) -> "Creature":
        self.grow_hp = clamp_int(self.grow_hp, 0, HP_GROW_CAP)
        for key in ElementKey:
            self.grow_stats[key] = clamp_int(self.grow_stats.get(key, 0), 0, ELEM_GROW_CAP)
        max_hp = self.max_hp
        current = max_hp if self.current_hp is None else self.current_hp
        self.current_hp = clamp_int(current, 0, max_hp)
        return self

    @property
    def max_hp(self) -> int:
        return self.base_hp + self.grow_hp

    def stat_total(self, key: ElementKey) -> int:
        """Base plus grown value of an elemental stat."""
        return self.base_stats.get(key, 0) + self.grow_stats.get(key, 0)


def new_creature(
    saga_name: str,
    nickname: str = "",
    species: SpeciesProfile = DEFAULT_SPECIES,
) -> Creature:
    """
    Create a freshly born creature of the given species.

    Raises:
        ValueError: If saga_name is blank
    """
    saga = str(saga_name or "").strip()
    if not saga:
        raise ValueError("Saga name is empty")

    return Creature(
        saga_name=saga,
        species_id=species.id,
        species_name=species.name,
        nickname=str(nickname or "").strip(),
        attribute=species.attribute,
        ideal_environment=(
            species.ideal_environment.model_copy() if species.ideal_environment else None
        ),
        best_area_id=species.best_area_id,
        base_hp=species.base_hp,
        base_stats=dict(species.base_stats),
        grow_hp=0,
        grow_stats=empty_element_stats(),
        current_hp=species.base_hp,
    )

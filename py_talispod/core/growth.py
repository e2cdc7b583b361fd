"""
Per-tick growth, healing and damage.

One tick applies, in order:
1. Heal up to the tier's heal cap
2. HP growth (current HP rises by the same amount)
3. Elemental growth, throttled to every Nth qualifying tick
4. Damage on the bad tier
5. Final clamp of current HP into [0, max HP]

Preview and apply share the same planning routine, so a preview always
matches what an apply at the same instant would do.
"""

from dataclasses import dataclass
from typing import Dict, MutableMapping, Optional

import structlog
from pydantic import BaseModel, Field

from .areas import ElementKey, element_key_for
from .compatibility import Rank, RankInfo
from .creature import ELEM_GROW_CAP, HP_GROW_CAP, Creature, clamp_int

logger = structlog.get_logger()

# HP growth on the bad tier. Two variants of the rule table exist (0 and 10);
# this is the configured default, override it through GrowthOptions.
BAD_TIER_HP_GROW = 10


@dataclass(frozen=True)
class GrowthProfile:
    """Per-tick growth parameters for one tier."""

    hp_grow: int = 0
    elem_grow: int = 0
    elem_interval: int = 0
    heal_cap: int = 0
    hp_damage: int = 0


class GrowthOptions(BaseModel):
    """Growth engine options."""

    bad_hp_grow: int = Field(
        default=BAD_TIER_HP_GROW, ge=0, description="HP growth per tick on the bad tier"
    )
    hp_grow_cap: int = Field(default=HP_GROW_CAP, ge=0, description="Maximum grown HP")
    elem_grow_cap: int = Field(
        default=ELEM_GROW_CAP, ge=0, description="Maximum grown value per element"
    )


def build_growth_profiles(bad_hp_grow: int = BAD_TIER_HP_GROW) -> Dict[Rank, GrowthProfile]:
    return {
        Rank.SUPERBEST: GrowthProfile(hp_grow=50, elem_grow=20, elem_interval=1, heal_cap=500),
        Rank.BEST: GrowthProfile(hp_grow=30, elem_grow=10, elem_interval=1, heal_cap=300),
        Rank.GOOD: GrowthProfile(hp_grow=20, elem_grow=10, elem_interval=2, heal_cap=200),
        Rank.NORMAL: GrowthProfile(hp_grow=10, elem_grow=10, elem_interval=3, heal_cap=100),
        Rank.BAD: GrowthProfile(hp_grow=bad_hp_grow, elem_grow=10, elem_interval=5, hp_damage=10),
        Rank.NEUTRAL: GrowthProfile(),
    }


@dataclass
class TickPreview:
    """What one tick would do to a creature."""

    rank: Rank
    heal: int = 0
    hp_damage: int = 0
    hp_growth: int = 0
    element_key: Optional[ElementKey] = None
    element_growth: int = 0


@dataclass
class TickResult(TickPreview):
    """What one tick did, plus the resulting HP."""

    current_hp: int = 0
    max_hp: int = 0


@dataclass
class _TickPlan:
    preview: TickPreview
    grow_hp: int
    current_hp: int
    counter: Optional[int]
    element_total: Optional[int]


class GrowthEngine:
    """Applies tier-driven growth to a creature."""

    def __init__(self, options: Optional[GrowthOptions] = None):
        """
        Initialize growth engine.

        Args:
            options: Growth options (bad-tier HP growth and caps)
        """
        self.options = options or GrowthOptions()
        self.profiles = build_growth_profiles(self.options.bad_hp_grow)

    def growth_profile(self, rank: Rank) -> GrowthProfile:
        return self.profiles.get(rank, self.profiles[Rank.NEUTRAL])

    def _plan(
        self,
        creature: Creature,
        rank_info: RankInfo,
        counters: MutableMapping[ElementKey, int],
    ) -> _TickPlan:
        """Run the ordered tick arithmetic on local copies."""
        hp_cap = self.options.hp_grow_cap
        elem_cap = self.options.elem_grow_cap

        grow_hp = clamp_int(creature.grow_hp, 0, hp_cap)
        max_before = creature.base_hp + grow_hp
        current = creature.current_hp if creature.current_hp is not None else max_before

        plan = _TickPlan(
            preview=TickPreview(rank=rank_info.rank),
            grow_hp=grow_hp,
            current_hp=current,
            counter=None,
            element_total=None,
        )
        if rank_info.rank == Rank.NEUTRAL:
            return plan

        profile = self.growth_profile(rank_info.rank)
        preview = plan.preview

        # 1) Heal
        if profile.heal_cap > 0:
            missing = max(0, max_before - current)
            preview.heal = min(profile.heal_cap, missing)
            current += preview.heal

        # 2) HP growth, reflected in current HP
        if profile.hp_grow > 0 and grow_hp < hp_cap:
            preview.hp_growth = min(profile.hp_grow, hp_cap - grow_hp)
            grow_hp += preview.hp_growth
            current += preview.hp_growth
        grow_hp = max(0, min(hp_cap, grow_hp))

        # 3) Elemental growth
        key = element_key_for(rank_info.env_attribute)
        preview.element_key = key
        if key is not None and profile.elem_interval > 0:
            counter = max(0, int(counters.get(key, 0) or 0)) + 1
            if counter >= profile.elem_interval:
                counter = 0
                before = clamp_int(creature.grow_stats.get(key, 0), 0, elem_cap)
                preview.element_growth = max(0, min(profile.elem_grow, elem_cap - before))
                plan.element_total = before + preview.element_growth
            plan.counter = counter

        # 4) Damage
        max_after = creature.base_hp + grow_hp
        if rank_info.rank == Rank.BAD and profile.hp_damage > 0:
            damaged = max(0, min(max_after, current - profile.hp_damage))
            preview.hp_damage = max(0, current - damaged)
            current = damaged

        # 5) Final clamp
        plan.current_hp = max(0, min(max_after, current))
        plan.grow_hp = grow_hp
        return plan

    def preview_tick(
        self,
        creature: Creature,
        rank_info: RankInfo,
        counters: Optional[MutableMapping[ElementKey, int]] = None,
    ) -> TickPreview:
        """
        Forecast one tick without touching the creature or its counters.

        Args:
            creature: Creature to forecast for
            rank_info: Ranking of the current reading
            counters: Element tick counters; defaults to the creature's own

        Returns:
            TickPreview with the would-be deltas
        """
        if counters is None:
            counters = creature.element_tick_counters
        return self._plan(creature, rank_info, counters).preview

    def apply_tick(
        self,
        creature: Creature,
        rank_info: RankInfo,
        counters: Optional[MutableMapping[ElementKey, int]] = None,
    ) -> TickResult:
        """
        Apply one tick to the creature in place.

        Args:
            creature: Creature to mutate
            rank_info: Ranking of the current reading
            counters: Element tick counters; defaults to the creature's own

        Returns:
            TickResult with the realized deltas
        """
        if counters is None:
            counters = creature.element_tick_counters

        plan = self._plan(creature, rank_info, counters)
        preview = plan.preview

        if rank_info.rank != Rank.NEUTRAL:
            creature.grow_hp = plan.grow_hp
            creature.current_hp = plan.current_hp
            if preview.element_key is not None and plan.counter is not None:
                counters[preview.element_key] = plan.counter
                if plan.element_total is not None:
                    creature.grow_stats[preview.element_key] = plan.element_total

        result = TickResult(
            rank=preview.rank,
            heal=preview.heal,
            hp_damage=preview.hp_damage,
            hp_growth=preview.hp_growth,
            element_key=preview.element_key,
            element_growth=preview.element_growth,
            current_hp=creature.current_hp,
            max_hp=creature.max_hp,
        )

        logger.debug(
            "Tick applied",
            rank=result.rank.value,
            heal=result.heal,
            hp_growth=result.hp_growth,
            hp_damage=result.hp_damage,
            element=result.element_key.value if result.element_key else None,
            element_growth=result.element_growth,
            current_hp=result.current_hp,
        )
        return result


default_growth_engine = GrowthEngine()


def preview_tick(creature, rank_info, counters=None) -> TickPreview:
    """Preview with the default growth options."""
    return default_growth_engine.preview_tick(creature, rank_info, counters)


def apply_tick(creature, rank_info, counters=None) -> TickResult:
    """Apply with the default growth options."""
    return default_growth_engine.apply_tick(creature, rank_info, counters)

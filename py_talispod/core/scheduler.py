"""Tick timer: turns elapsed real time into serialized growth ticks."""

import math
from datetime import datetime, timedelta
from typing import List, Optional

import structlog

from .compatibility import CompatibilityEngine, Rank, default_engine
from .creature import Creature
from .environment import EnvironmentReading
from .growth import GrowthEngine, TickResult, default_growth_engine

logger = structlog.get_logger()


class GrowthTimer:
    """
    Accumulates elapsed seconds and fires one tick per whole interval.

    Each tick re-ranks the reading before applying it, so a creature never
    grows from a stale RankInfo.
    """

    def __init__(
        self,
        tick_seconds: float = 60.0,
        compatibility: Optional[CompatibilityEngine] = None,
        growth: Optional[GrowthEngine] = None,
    ):
        if tick_seconds <= 0:
            raise ValueError("tick_seconds must be positive")

        self.tick_seconds = float(tick_seconds)
        self.compatibility = compatibility or default_engine
        self.growth = growth or default_growth_engine
        self.elapsed = 0.0

    @property
    def seconds_until_tick(self) -> int:
        """Whole seconds left before the next tick, for countdown displays."""
        return max(0, math.floor(self.tick_seconds - self.elapsed))

    def reset(self) -> None:
        self.elapsed = 0.0

    def advance(
        self,
        creature: Creature,
        environment: EnvironmentReading,
        dt_seconds: float,
        now: datetime,
    ) -> List[TickResult]:
        """
        Add elapsed time and apply every tick that became due.

        Args:
            creature: Creature to grow
            environment: Reading in effect during the elapsed time
            dt_seconds: Real seconds elapsed since the last call
            now: Wall-clock time at the end of the elapsed span; each tick is
                ranked at the boundary it fired on

        Returns:
            Results of the ticks applied, in order
        """
        try:
            dt = float(dt_seconds)
        except (TypeError, ValueError):
            return []
        if not math.isfinite(dt) or dt <= 0:
            return []

        self.elapsed += dt
        due = math.floor(self.elapsed / self.tick_seconds)
        self.elapsed -= due * self.tick_seconds
        results = []

        # Tick i fired at its own boundary, (due - 1 - i) intervals before the last one
        for i in range(due):
            offset = self.elapsed + (due - 1 - i) * self.tick_seconds
            tick_time = now - timedelta(seconds=offset)
            rank_info = self.compatibility.compute_rank(creature, environment, tick_time)
            results.append(self.growth.apply_tick(creature, rank_info))

        if results:
            logger.info(
                "Growth ticks applied",
                ticks=len(results),
                rank=results[-1].rank.value,
                current_hp=creature.current_hp,
                grow_hp=creature.grow_hp,
            )
        return results

    def is_idle(self, creature: Creature, environment: EnvironmentReading, now: datetime) -> bool:
        """True when the reading is neutral and no growth would happen."""
        return self.compatibility.compute_rank(creature, environment, now).rank == Rank.NEUTRAL

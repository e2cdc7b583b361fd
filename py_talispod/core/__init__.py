"""
Core creature growth simulation.
"""

from .areas import NEUTRAL, Area, AreaCatalog, Attribute, ElementKey, DEFAULT_CATALOG
from .area_resolver import AreaResolver, resolve_area
from .compatibility import CompatibilityEngine, Rank, RankInfo, compute_rank
from .creature import Creature, IdealEnvironment, new_creature
from .environment import EnvironmentReading, NEUTRAL_READING
from .growth import GrowthEngine, GrowthOptions, TickPreview, TickResult, apply_tick, preview_tick
from .scheduler import GrowthTimer

__all__ = ['NEUTRAL', 'Area', 'AreaCatalog', 'Attribute', 'ElementKey', 'DEFAULT_CATALOG',
           'AreaResolver', 'resolve_area',
           'CompatibilityEngine', 'Rank', 'RankInfo', 'compute_rank',
           'Creature', 'IdealEnvironment', 'new_creature',
           'EnvironmentReading', 'NEUTRAL_READING',
           'GrowthEngine', 'GrowthOptions', 'TickPreview', 'TickResult', 'apply_tick', 'preview_tick',
           'GrowthTimer']

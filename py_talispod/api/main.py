"""FastAPI main application."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from typing import Dict, List, Optional

import structlog
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..config import settings
from ..core.areas import ATTRIBUTE_META, NEUTRAL, Area, Attribute, ElementKey
from ..core.area_resolver import default_resolver
from ..core.compatibility import CompatibilityEngine, Rank, RankInfo
from ..core.creature import Creature, new_creature
from ..core.environment import HUM_STEPS, TEMP_STEPS, EnvironmentReading
from ..core.growth import GrowthEngine, GrowthOptions, TickPreview, TickResult
from ..persistence.soul_code import (
    SoulCodeError,
    assert_saga_match,
    make_soul_code,
    parse_soul_code,
)

# Configure logging
logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        (
            structlog.processors.JSONRenderer()
            if settings.log_format == "json"
            else structlog.dev.ConsoleRenderer(colors=False)
        ),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

compatibility_engine = CompatibilityEngine(default_resolver)
growth_engine = GrowthEngine(GrowthOptions(bad_hp_grow=settings.bad_tier_hp_grow))


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "Starting TalisPod API",
        bad_tier_hp_grow=settings.bad_tier_hp_grow,
        tick_seconds=settings.tick_seconds,
    )
    yield
    logger.info("Shutting down TalisPod API")


# Initialize FastAPI app
app = FastAPI(
    title="TalisPod API",
    description="Environment-driven creature growth simulation",
    version="0.1.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
class EnvironmentModel(BaseModel):
    """A temperature/humidity/light reading."""

    temperature: int = Field(0, description="Temperature in °C")
    humidity: int = Field(50, description="Humidity 0-100; 100 is underwater")
    light: int = Field(50, description="Light level, or water depth when underwater")

    def to_reading(self) -> EnvironmentReading:
        return EnvironmentReading(
            temperature=self.temperature, humidity=self.humidity, light=self.light
        )


class AreaInfo(BaseModel):
    """Catalog entry for an area."""

    id: str
    name: str
    en_name: str
    attribute: Attribute
    type: str
    side: Optional[str] = None
    depth: Optional[int] = None


class ResolveResponse(BaseModel):
    """Result of resolving a reading."""

    area_id: str
    area: Optional[AreaInfo] = None


class AreaChartResponse(BaseModel):
    """Area ids for every temperature/humidity step at one light level."""

    light: int
    temperatures: List[int]
    humidities: List[int]
    grid: List[List[str]]
    statistics: Dict[str, int]


class NewCreatureRequest(BaseModel):
    """Request to create a new creature."""

    saga_name: str = Field(..., description="Saga name the creature is bound to")
    nickname: str = Field("", description="Optional nickname")


class EvaluationRequest(BaseModel):
    """A creature, a reading and an optional wall-clock time."""

    creature: Creature
    environment: EnvironmentModel = Field(default_factory=EnvironmentModel)
    now: Optional[datetime] = Field(None, description="Defaults to the server clock")


class TickRequest(EvaluationRequest):
    """Request to apply one or more ticks."""

    ticks: int = Field(1, ge=1, description="Number of consecutive ticks to apply")


class RankInfoResponse(BaseModel):
    """Compatibility of a creature with the area of a reading."""

    rank: Rank
    rank_en: str
    area_id: str
    env_attribute: Attribute
    env_attribute_en: str
    area_name: Optional[str] = None
    area_en_name: Optional[str] = None
    is_sea: bool
    expected_light: Optional[int] = None
    light_ok: bool


class PreviewResponse(BaseModel):
    """Forecast of the next tick."""

    rank: Rank
    heal: int
    hp_damage: int
    hp_growth: int
    element_key: Optional[ElementKey] = None
    element_growth: int
    stat_label: Optional[str] = None


class TickResultModel(PreviewResponse):
    """Realized effect of one tick."""

    current_hp: int
    max_hp: int


class TickResponse(BaseModel):
    """Creature state after the requested ticks."""

    creature: Creature
    results: List[TickResultModel]


class SoulCodeEncodeRequest(BaseModel):
    creature: Creature


class SoulCodeDecodeRequest(BaseModel):
    code: str = Field(..., description="Save code text as pasted by the user")
    saga_name: Optional[str] = Field(None, description="When given, must match the saved saga")


class SoulCodeResponse(BaseModel):
    code: str


def _area_info(area: Area) -> AreaInfo:
    return AreaInfo(
        id=area.id,
        name=area.name,
        en_name=area.en_name,
        attribute=area.attribute,
        type=area.type.value,
        side=area.side.value if area.side else None,
        depth=int(area.depth) if area.depth is not None else None,
    )


def _rank_response(info: RankInfo) -> RankInfoResponse:
    return RankInfoResponse(
        rank=info.rank,
        rank_en=info.rank.en,
        area_id=info.area_id,
        env_attribute=info.env_attribute,
        env_attribute_en=info.env_attribute_en,
        area_name=info.area_name,
        area_en_name=info.area_en_name,
        is_sea=info.is_sea,
        expected_light=info.expected_light,
        light_ok=info.light_ok,
    )


def _stat_label(preview: TickPreview) -> Optional[str]:
    for meta in ATTRIBUTE_META.values():
        if preview.element_key is not None and meta.key == preview.element_key:
            return meta.stat_label
    return None


def _preview_response(preview: TickPreview) -> PreviewResponse:
    return PreviewResponse(
        rank=preview.rank,
        heal=preview.heal,
        hp_damage=preview.hp_damage,
        hp_growth=preview.hp_growth,
        element_key=preview.element_key,
        element_growth=preview.element_growth,
        stat_label=_stat_label(preview),
    )


def _tick_result_model(result: TickResult) -> TickResultModel:
    return TickResultModel(
        **_preview_response(result).model_dump(),
        current_hp=result.current_hp,
        max_hp=result.max_hp,
    )


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "TalisPod API",
        "version": "0.1.0",
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "areas": len(default_resolver.catalog)}


@app.get("/areas", response_model=List[AreaInfo])
async def list_areas():
    """List every catalog area."""
    return [_area_info(area) for area in default_resolver.catalog]


@app.get("/areas/chart", response_model=AreaChartResponse)
async def get_area_chart(light: int = Query(50, description="Light level for land cells")):
    """Resolve every temperature/humidity step at one light level."""
    grid = default_resolver.resolve_grid(TEMP_STEPS, HUM_STEPS, light)
    return AreaChartResponse(
        light=light,
        temperatures=TEMP_STEPS,
        humidities=HUM_STEPS,
        grid=[[str(area_id) for area_id in row] for row in grid.tolist()],
        statistics=default_resolver.area_statistics(grid),
    )


@app.get("/areas/{area_id}", response_model=AreaInfo)
async def get_area(area_id: str):
    """Get a single catalog area."""
    area = default_resolver.catalog.get(area_id)
    if not area:
        raise HTTPException(status_code=404, detail="Area not found")
    return _area_info(area)


@app.get("/resolve", response_model=ResolveResponse)
async def resolve_reading(
    temperature: int = Query(..., description="Temperature in °C"),
    humidity: int = Query(..., description="Humidity 0-100"),
    light: int = Query(50, description="Light level, or depth when humidity is 100"),
):
    """Resolve a reading to its area."""
    area_id = default_resolver.resolve(temperature, humidity, light)
    area = default_resolver.catalog.get(area_id) if area_id != NEUTRAL else None
    return ResolveResponse(area_id=area_id, area=_area_info(area) if area else None)


@app.post("/creatures", response_model=Creature)
async def create_creature(request: NewCreatureRequest):
    """Create a newly born creature of the default species."""
    try:
        creature = new_creature(request.saga_name, nickname=request.nickname)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info("Creature created", saga_name=creature.saga_name, species=creature.species_id)
    return creature


@app.post("/rank", response_model=RankInfoResponse)
async def rank_creature(request: EvaluationRequest):
    """Rank a creature against the area of a reading."""
    now = request.now or datetime.now()
    info = compatibility_engine.compute_rank(
        request.creature, request.environment.to_reading(), now
    )
    return _rank_response(info)


@app.post("/preview", response_model=PreviewResponse)
async def preview_growth(request: EvaluationRequest):
    """Forecast the next tick without changing the creature."""
    now = request.now or datetime.now()
    info = compatibility_engine.compute_rank(
        request.creature, request.environment.to_reading(), now
    )
    return _preview_response(growth_engine.preview_tick(request.creature, info))


@app.post("/tick", response_model=TickResponse)
async def apply_growth(request: TickRequest):
    """
    Apply consecutive ticks to the creature.

    Tick n is ranked at now + n * tick_seconds, so long runs cross the
    daytime light schedule.
    """
    if request.ticks > settings.max_ticks_per_request:
        raise HTTPException(
            status_code=400,
            detail=f"At most {settings.max_ticks_per_request} ticks per request",
        )

    creature = request.creature
    reading = request.environment.to_reading()
    start = request.now or datetime.now()

    results = []
    for index in range(request.ticks):
        now = start + timedelta(seconds=settings.tick_seconds * index)
        info = compatibility_engine.compute_rank(creature, reading, now)
        results.append(_tick_result_model(growth_engine.apply_tick(creature, info)))

    logger.info(
        "Ticks applied",
        ticks=request.ticks,
        saga_name=creature.saga_name,
        current_hp=creature.current_hp,
        grow_hp=creature.grow_hp,
    )
    return TickResponse(creature=creature, results=results)


@app.post("/soul-code/encode", response_model=SoulCodeResponse)
async def encode_soul_code(request: SoulCodeEncodeRequest):
    """Encode a creature as a save code."""
    try:
        return SoulCodeResponse(code=make_soul_code(request.creature))
    except SoulCodeError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/soul-code/decode", response_model=Creature)
async def decode_soul_code(request: SoulCodeDecodeRequest):
    """Decode a save code, optionally checking its saga name."""
    try:
        creature = parse_soul_code(request.code)
        if request.saga_name is not None:
            assert_saga_match(creature, request.saga_name)
    except SoulCodeError as e:
        logger.warning("Save code rejected", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))
    return creature


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)

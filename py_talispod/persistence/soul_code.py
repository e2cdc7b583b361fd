"""
Portable save codes for a creature.

A code is "SOUL1:" followed by the unpadded base64url encoding of a compact
JSON payload. Parsing tolerates the usual copy/paste damage: zero-width
characters, full-width colons, line breaks, any SOUL<n>: prefix, and a code
pasted inside surrounding text.
"""

import base64
import binascii
import json
import re
from typing import Any, Dict, Optional

import structlog
from pydantic import ValidationError

from ..core.areas import ElementKey
from ..core.creature import (
    DEFAULT_SPECIES,
    ELEM_GROW_CAP,
    HP_GROW_CAP,
    Creature,
    IdealEnvironment,
    clamp_int,
)

logger = structlog.get_logger()

CODE_PREFIX = "SOUL1:"
PAYLOAD_VERSION = 1
COUNTER_CAP = 1000
BASE_VALUE_CAP = 2**31 - 1

_ZERO_WIDTH = re.compile(r"[\u200b-\u200d\ufeff]")
_PREFIX = re.compile(r"^SOUL\d*:", re.IGNORECASE)
_EMBEDDED = re.compile(r"SOUL\d*:[A-Za-z0-9\-_]+", re.IGNORECASE)
_BODY = re.compile(r"[A-Za-z0-9\-_]*")


class SoulCodeError(ValueError):
    """Raised when a save code cannot be produced or read."""


def _b64url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _b64url_decode(text: str) -> bytes:
    padded = text + "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


def _element_payload(stats: Dict[ElementKey, int], cap: int) -> Dict[str, int]:
    return {key.value: clamp_int(stats.get(key, 0), 0, cap) for key in ElementKey}


def _element_stats(raw: Any, cap: int) -> Dict[ElementKey, int]:
    if not isinstance(raw, dict):
        raise SoulCodeError("Save data is corrupted")
    return {key: clamp_int(raw.get(key.value, 0), 0, cap) for key in ElementKey}


def _ideal_payload(ideal: Optional[IdealEnvironment]) -> Optional[Dict[str, int]]:
    if ideal is None:
        return None
    return {"t": ideal.temperature, "h": ideal.humidity, "d": ideal.water_depth}


def _ideal_from_payload(raw: Any) -> Optional[IdealEnvironment]:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise SoulCodeError("Save data is corrupted")
    return IdealEnvironment(
        temperature=clamp_int(raw.get("t"), -273, 999, default=0),
        humidity=clamp_int(raw.get("h"), 0, 100, default=50),
        water_depth=clamp_int(raw.get("d"), 0, 100, default=50),
    )


def normalize_for_save(creature: Creature) -> Dict[str, Any]:
    """
    Build the compact payload for a creature.

    Raises:
        SoulCodeError: If the creature has no saga name or an unsupported species
    """
    saga = str(creature.saga_name or "").strip()
    if not saga:
        raise SoulCodeError("Saga name is invalid")
    if creature.species_id != DEFAULT_SPECIES.id:
        raise SoulCodeError("Species is not supported")

    base_hp = clamp_int(creature.base_hp, 0, BASE_VALUE_CAP)
    grow_hp = clamp_int(creature.grow_hp, 0, HP_GROW_CAP)
    max_hp = base_hp + grow_hp

    return {
        "v": PAYLOAD_VERSION,
        "sp": creature.species_id,
        "sn": creature.species_name,
        "s": saga,
        "nn": str(creature.nickname or "").strip(),
        "a": creature.attribute.value if creature.attribute else None,
        "wa": creature.weak_attribute.value if creature.weak_attribute else None,
        "ie": _ideal_payload(creature.ideal_environment),
        "ba": creature.best_area_id,
        "bhp": base_hp,
        "bs": _element_payload(creature.base_stats, BASE_VALUE_CAP),
        "chp": clamp_int(creature.current_hp, 0, max_hp, default=max_hp),
        "ghp": grow_hp,
        "gs": _element_payload(creature.grow_stats, ELEM_GROW_CAP),
        "ec": _element_payload(creature.element_tick_counters, COUNTER_CAP),
    }


def inflate_from_payload(payload: Any) -> Creature:
    """
    Rebuild a creature from a decoded payload, clamping every number.

    Identity keys missing from older payloads fall back to the species
    defaults.

    Raises:
        SoulCodeError: On a malformed payload, wrong version or unknown species
    """
    if not isinstance(payload, dict):
        raise SoulCodeError("Save data is corrupted")
    if payload.get("v") != PAYLOAD_VERSION:
        raise SoulCodeError("Save data version is not supported")
    if payload.get("sp") != DEFAULT_SPECIES.id:
        raise SoulCodeError("Species is not supported")

    species = DEFAULT_SPECIES
    saga = str(payload.get("s") or "").strip()
    if not saga:
        raise SoulCodeError("Saga name is invalid")

    best_area = payload.get("ba", species.best_area_id)
    species_name = payload.get("sn")
    if not isinstance(species_name, str) or not species_name:
        species_name = species.name
    if not isinstance(best_area, str) or not best_area:
        best_area = None
    default_ideal = species.ideal_environment.model_copy() if species.ideal_environment else None
    try:
        return Creature(
            saga_name=saga,
            species_id=species.id,
            species_name=species_name,
            nickname=str(payload.get("nn") or "").strip(),
            attribute=payload["a"] if "a" in payload else species.attribute,
            weak_attribute=payload.get("wa"),
            ideal_environment=_ideal_from_payload(payload["ie"]) if "ie" in payload else default_ideal,
            best_area_id=best_area,
            base_hp=clamp_int(payload.get("bhp", species.base_hp), 0, BASE_VALUE_CAP),
            base_stats=(
                _element_stats(payload["bs"], BASE_VALUE_CAP)
                if "bs" in payload
                else dict(species.base_stats)
            ),
            grow_hp=clamp_int(payload.get("ghp", 0), 0, HP_GROW_CAP),
            grow_stats=_element_stats(payload.get("gs") or {}, ELEM_GROW_CAP),
            element_tick_counters=_element_stats(payload.get("ec") or {}, COUNTER_CAP),
            current_hp=payload.get("chp"),
        )
    except ValidationError as e:
        raise SoulCodeError("Save data is corrupted") from e


def make_soul_code(creature: Creature) -> str:
    """Encode a creature as a portable save code."""
    payload = normalize_for_save(creature)
    raw = json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    return CODE_PREFIX + _b64url_encode(raw)


def sanitize_soul_text(raw: Any) -> str:
    """Strip invisible characters, whitespace and the SOUL prefix from pasted text."""
    original = "" if raw is None else str(raw)

    text = _ZERO_WIDTH.sub("", original).strip()
    text = text.replace("\uff1a", ":")
    text = re.sub(r"\s+", "", text)
    text = _PREFIX.sub("", text)

    # A code pasted inside surrounding text: keep the embedded token
    match = _EMBEDDED.search(_ZERO_WIDTH.sub("", original).replace("\uff1a", ":"))
    if match:
        picked = _PREFIX.sub("", match.group(0))
        if len(picked) > len(text) or not _BODY.fullmatch(text):
            text = picked

    return text


def parse_soul_code(code: Any) -> Creature:
    """
    Decode a save code into a creature.

    Raises:
        SoulCodeError: If the code is empty, undecodable or invalid
    """
    body = sanitize_soul_text(code)
    if not body:
        raise SoulCodeError("Save code is empty")

    try:
        payload = json.loads(_b64url_decode(body).decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError) as e:
        logger.warning("Failed to decode save code", error=str(e), length=len(body))
        raise SoulCodeError("Save code could not be read (wrong format or corrupted)") from e

    creature = inflate_from_payload(payload)
    logger.info("Save code loaded", saga_name=creature.saga_name, species=creature.species_id)
    return creature


def assert_saga_match(creature: Creature, saga_name: str) -> None:
    """
    Check that a loaded creature belongs to the given saga.

    Raises:
        SoulCodeError: If either name is blank or they differ
    """
    wanted = str(saga_name or "").strip()
    if not wanted:
        raise SoulCodeError("Saga name is empty")

    saved = str(creature.saga_name or "").strip()
    if not saved:
        raise SoulCodeError("Saved saga name is invalid")
    if saved != wanted:
        raise SoulCodeError("Saga name does not match")

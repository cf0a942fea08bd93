"""
universal_config.py — Hardcoded universal bathroom configuration and the
helpers that derive design settings and toggle snapshots from it.

The database row (universal_bath_config, id=1) overrides everything here;
DEFAULT_UNIVERSAL_CONFIG is what callers get when no row has been saved.
"""

import copy
import logging
from typing import Any, Dict, Optional

from renoquote.config import (
    ALL_CATEGORIES,
    FLOOR_TO_CEILING_MIN_WET_WALL_SQFT,
    INTAKE_TO_DESIGN_BATHROOM_TYPE,
    LARGE_BATHROOM_MIN_SQFT,
    SMALL_BATHROOM_MAX_SQFT,
)
from renoquote.errors import QuoteValidationError
from renoquote.models.schemas import (
    BathroomTypeConfig,
    UniversalBathConfig,
    UniversalToggles,
)

logger = logging.getLogger("renoquote.materials")


def _included(**excluded: bool) -> Dict[str, bool]:
    items = {category: True for category in ALL_CATEGORIES}
    items.update(excluded)
    return items


# ---------------------------------------------------------------------------
# Default configuration (camelCase, same shape as the stored JSONB row)
# ---------------------------------------------------------------------------

DEFAULT_UNIVERSAL_CONFIG: Dict[str, Any] = {
    "bathroomTypes": [
        {"id": "bathtub", "name": "Bathtub", "includedItems": _included()},
        {
            "id": "walk-in-shower",
            "name": "Walk-in Shower",
            "includedItems": _included(tub=False, tubFiller=False),
        },
        {"id": "tub-and-shower", "name": "Tub & Shower", "includedItems": _included()},
        {
            "id": "sink-and-toilet",
            "name": "Sink & Toilet",
            "includedItems": _included(
                wallTile=False, showerFloorTile=False, accentTile=False,
                tub=False, tubFiller=False, shower=False, glazing=False,
            ),
        },
    ],
    "squareFootageConfig": {
        "small": {
            "floorTile": 40,
            "wallTile": {
                "Bathtub":        {"none": 20, "halfwayUp": 55, "floorToCeiling": 110},
                "Walk-in Shower": {"none": 30, "halfwayUp": 65, "floorToCeiling": 120},
                "Tub & Shower":   {"none": 40, "halfwayUp": 75, "floorToCeiling": 130},
                "Sink & Toilet":  {"none": 0,  "halfwayUp": 30, "floorToCeiling": 85},
            },
            "showerFloorTile": 9,
            "accentTile": 15,
        },
        "normal": {
            "floorTile": 60,
            "wallTile": {
                "Bathtub":        {"none": 25, "halfwayUp": 60, "floorToCeiling": 115},
                "Walk-in Shower": {"none": 30, "halfwayUp": 65, "floorToCeiling": 120},
                "Tub & Shower":   {"none": 40, "halfwayUp": 75, "floorToCeiling": 130},
                "Sink & Toilet":  {"none": 0,  "halfwayUp": 30, "floorToCeiling": 85},
            },
            "showerFloorTile": 9,
            "accentTile": 20,
        },
        "large": {
            "floorTile": 80,
            "wallTile": {
                "Bathtub":        {"none": 30, "halfwayUp": 70, "floorToCeiling": 130},
                "Walk-in Shower": {"none": 35, "halfwayUp": 80, "floorToCeiling": 150},
                "Tub & Shower":   {"none": 45, "halfwayUp": 90, "floorToCeiling": 160},
                "Sink & Toilet":  {"none": 0,  "halfwayUp": 40, "floorToCeiling": 100},
            },
            "showerFloorTile": 9,
            "accentTile": 25,
        },
    },
    "wallTileCoverages": [
        {"id": "none", "name": "None", "multiplier": 0,
         "description": "No wall tiles in dry areas"},
        {"id": "half-way", "name": "Half way up", "multiplier": 0.5,
         "description": "Wall tiles up to 4 feet high"},
        {"id": "floor-to-ceiling", "name": "Floor to ceiling", "multiplier": 1.0,
         "description": "Wall tiles from floor to ceiling"},
    ],
    "defaultSettings": {
        "bathroomType": "tub-and-shower",
        "wallTileCoverage": "floor-to-ceiling",
        "bathroomSize": "normal",
    },
}

# Used when the stored config has no row for the requested coverage
DEFAULT_COVERAGE_MULTIPLIERS: Dict[str, float] = {
    "None": 0.0,
    "Half way up": 0.5,
    "Floor to ceiling": 1.0,
}


def default_universal_config() -> UniversalBathConfig:
    """A fresh, validated copy of the hardcoded configuration."""
    return UniversalBathConfig.model_validate(copy.deepcopy(DEFAULT_UNIVERSAL_CONFIG))


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def find_bathroom_type(
    config: Optional[UniversalBathConfig], bathroom_type: str
) -> Optional[BathroomTypeConfig]:
    if config is None:
        return None
    for row in config.bathroom_types:
        if row.name == bathroom_type:
            return row
    return None


def coverage_multiplier(config: Optional[UniversalBathConfig], coverage: str) -> float:
    if config is not None:
        for row in config.wall_tile_coverages:
            if row.name == coverage:
                return float(row.multiplier)
    return DEFAULT_COVERAGE_MULTIPLIERS.get(coverage, 1.0)


def resolve_default_settings(config: UniversalBathConfig) -> Dict[str, str]:
    """Translate defaultSettings ids into display names."""
    settings = config.default_settings
    if settings is None:
        return {"bathroomType": "Tub & Shower", "wallTileCoverage": "Floor to ceiling",
                "bathroomSize": "normal"}
    type_name = next(
        (bt.name for bt in config.bathroom_types if bt.id == settings.bathroom_type),
        "Tub & Shower",
    )
    coverage_name = next(
        (c.name for c in config.wall_tile_coverages if c.id == settings.wall_tile_coverage),
        "Floor to ceiling",
    )
    return {
        "bathroomType": type_name,
        "wallTileCoverage": coverage_name,
        "bathroomSize": settings.bathroom_size,
    }


# ---------------------------------------------------------------------------
# Intake form derivations
# ---------------------------------------------------------------------------

def derive_bathroom_size(floor_sqft: Optional[float]) -> str:
    sqft = floor_sqft or 0.0
    if sqft <= SMALL_BATHROOM_MAX_SQFT:
        return "small"
    if sqft >= LARGE_BATHROOM_MIN_SQFT:
        return "large"
    return "normal"


def derive_wall_coverage(wet_wall_sqft: Optional[float]) -> str:
    """Only an explicit 0 means no wall tile; an unknown area is half height."""
    if wet_wall_sqft is None:
        return "Half way up"
    if wet_wall_sqft <= 0:
        return "None"
    if wet_wall_sqft >= FLOOR_TO_CEILING_MIN_WET_WALL_SQFT:
        return "Floor to ceiling"
    return "Half way up"


def design_bathroom_type(intake_bathroom_type: str) -> str:
    try:
        return INTAKE_TO_DESIGN_BATHROOM_TYPE[intake_bathroom_type]
    except KeyError:
        raise QuoteValidationError(
            f"Unknown bathroom_type '{intake_bathroom_type}'", field="bathroom_type"
        ) from None


# ---------------------------------------------------------------------------
# Toggle snapshot
# ---------------------------------------------------------------------------

def build_universal_toggles(
    config: UniversalBathConfig,
    bathroom_type: str,
    wall_tile_coverage: str,
    bathroom_size: Optional[str] = None,
) -> UniversalToggles:
    """
    Build the snapshot the toggle applier pushes onto every package.

    Sink & Toilet rooms tile walls only when coverage is not "None", so
    their wallTile/accentTile toggles follow the coverage.
    """
    row = find_bathroom_type(config, bathroom_type)
    if row is None:
        raise QuoteValidationError(
            f"Bathroom type configuration not found for: {bathroom_type}",
            field="bathroomType",
        )
    if not any(c.name == wall_tile_coverage for c in config.wall_tile_coverages):
        raise QuoteValidationError(
            f"Wall tile coverage configuration not found for: {wall_tile_coverage}",
            field="wallTileCoverage",
        )

    included = {
        category: value is not False
        for category, value in row.included_items.items()
    }
    if bathroom_type == "Sink & Toilet":
        tiled = wall_tile_coverage != "None"
        included["wallTile"] = tiled
        included["accentTile"] = tiled

    return UniversalToggles(
        bathroom_type=bathroom_type,
        wall_tile_coverage=wall_tile_coverage,
        bathroom_size=bathroom_size,
        included_items=included,
    )

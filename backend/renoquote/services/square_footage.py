"""Square footage per tile category, looked up from the universal size table."""

import logging
from typing import Optional

from renoquote.config import COVERAGE_KEYS, FALLBACK_WALL_TILE_BATHROOM_TYPE
from renoquote.models.schemas import SizeSquareFootage, UniversalBathConfig

logger = logging.getLogger("renoquote.materials")


def coverage_key(coverage: str) -> str:
    """'Half way up' -> 'halfwayUp'. Unknown labels resolve to floorToCeiling."""
    key = COVERAGE_KEYS.get(coverage)
    if key is None:
        logger.warning("Unknown wall tile coverage '%s', using 'Floor to ceiling'", coverage)
        key = "floorToCeiling"
    return key


def resolve_wall_tile_sqft(size_config: SizeSquareFootage, coverage: str, bathroom_type: str) -> float:
    """
    Exact table lookup of wall tile sqft for (size, bathroom type, coverage).

    A bathroom type missing from the table uses the Walk-in Shower row.
    """
    row = size_config.wall_tile.get(bathroom_type)
    if row is None:
        logger.warning(
            "No wall tile row for bathroom type '%s', using '%s'",
            bathroom_type, FALLBACK_WALL_TILE_BATHROOM_TYPE,
        )
        row = size_config.wall_tile.get(FALLBACK_WALL_TILE_BATHROOM_TYPE)
        if row is None:
            return 0.0
    return float(row.model_dump(by_alias=True)[coverage_key(coverage)])


def resolve_tile_sqft(
    category: str,
    config: UniversalBathConfig,
    bathroom_size: str,
    coverage: str,
    bathroom_type: str,
) -> float:
    size_config: Optional[SizeSquareFootage] = config.square_footage_config.get(bathroom_size)
    if size_config is None:
        size_config = config.square_footage_config["normal"]
    if category == "wallTile":
        return resolve_wall_tile_sqft(size_config, coverage, bathroom_type)
    if category == "floorTile":
        return float(size_config.floor_tile)
    if category == "showerFloorTile":
        return float(size_config.shower_floor_tile)
    if category == "accentTile":
        return float(size_config.accent_tile)
    return 0.0

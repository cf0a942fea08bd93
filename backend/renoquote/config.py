"""
Pricing configuration — single source of truth for line codes, multiplier
codes, item categories, estimate constants and environment-driven settings.

Import from here in engines and routes rather than hardcoding values.
"""
from __future__ import annotations

import os

# ── Environment ────────────────────────────────────────────────────────────────

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT: str = os.getenv("LOG_FORMAT", "json").lower()

_cors_default = "http://localhost:3000,http://localhost:8000"
CORS_ORIGINS: list[str] = [
    o.strip() for o in os.getenv("CORS_ORIGINS", _cors_default).split(",") if o.strip()
]

# Catalog Store calls that take longer than this fail the whole calculation
CATALOG_FETCH_TIMEOUT_S: float = float(os.getenv("CATALOG_FETCH_TIMEOUT_S", "10"))

DB_SEED_ON_STARTUP: bool = os.getenv("DB_SEED_ON_STARTUP", "").lower() in ("1", "true", "yes")


# ── Labour line codes ──────────────────────────────────────────────────────────

UPGRADE_LINE_CODES: dict[str, str] = {
    "heated_floors":       "HEATED-FLR",
    "heated_towel_rack":   "HEATED-RACK",
    "bidet_addon":         "BIDET-ADDON",
    "smart_mirror":        "SMART-MIRROR",
    "premium_exhaust_fan": "PREMIUM-FAN",
    "built_in_niche":      "NICHE",
    "shower_bench":        "BENCH",
    "safety_grab_bars":    "GRAB-BARS",
}

# Codes a healthy rate card must carry (reported, never enforced at calc time)
REQUIRED_RATE_CODES: list[str] = [
    "DEM", "PLM", "ELE", "SUB-GRB", "WPF-KER", "TILE-WET", "TILE-DRY", "TILE-FLR",
    "DUMP", "VAN", "RECESS", "NICHE", "BENCH", "ASB-T",
]

# Bathroom types that carry wet walls and therefore require wet_wall_sqft
WET_BATHROOM_TYPES: frozenset[str] = frozenset({"walk_in", "tub_shower", "tub_only"})


# ── Project multipliers ────────────────────────────────────────────────────────

CONTINGENCY_CODE = "CONTINGENCY"
CONDO_CODE = "CONDO-FCTR"
OLDHOME_CODE = "OLDHOME-ASB"
PM_FEE_CODE = "PM-FEE"


# ── Materials categories (declaration order is pricing order) ─────────────────

TILE_CATEGORIES: tuple[str, ...] = ("floorTile", "wallTile", "showerFloorTile", "accentTile")

FIXTURE_CATEGORIES: tuple[str, ...] = (
    "vanity", "tub", "tubFiller", "toilet", "shower", "faucet",
    "glazing", "mirror", "towelBar", "toiletPaperHolder", "hook", "lighting",
)

ALL_CATEGORIES: tuple[str, ...] = TILE_CATEGORIES + FIXTURE_CATEGORIES

# Canonical item-map key -> legacy flat package column
LEGACY_SKU_FIELDS: dict[str, str] = {
    "floorTile":         "TILES_FLOOR_SKU",
    "wallTile":          "TILES_WALL_SKU",
    "showerFloorTile":   "TILES_SHOWER_FLOOR_SKU",
    "accentTile":        "TILES_ACCENT_SKU",
    "vanity":            "VANITY_SKU",
    "tub":               "TUB_SKU",
    "tubFiller":         "TUB_FILLER_SKU",
    "toilet":            "TOILET_SKU",
    "shower":            "SHOWER_SKU",
    "faucet":            "FAUCET_SKU",
    "glazing":           "GLAZING_SKU",
    "mirror":            "MIRROR_SKU",
    "towelBar":          "TOWEL_BAR_SKU",
    "toiletPaperHolder": "TOILET_PAPER_HOLDER_SKU",
    "hook":              "HOOK_SKU",
    "lighting":          "LIGHTING_SKU",
}

# Toggle applier groups. Bathroom-type and wall-tile groups are destructive
# (they null the legacy column); everything else only edits the item map.
BATHROOM_TYPE_CATEGORIES: tuple[str, ...] = ("tub", "tubFiller", "shower", "glazing")
WALL_TILE_CATEGORIES: tuple[str, ...] = ("wallTile", "accentTile")
GENERIC_CATEGORIES: tuple[str, ...] = tuple(
    c for c in ALL_CATEGORIES
    if c not in BATHROOM_TYPE_CATEGORIES and c not in WALL_TILE_CATEGORIES
)


# ── Design vocabulary ──────────────────────────────────────────────────────────

BATHROOM_TYPES: tuple[str, ...] = ("Bathtub", "Walk-in Shower", "Tub & Shower", "Sink & Toilet")
WALL_COVERAGES: tuple[str, ...] = ("None", "Half way up", "Floor to ceiling")
BATHROOM_SIZES: tuple[str, ...] = ("small", "normal", "large")

# Unknown bathroom types resolve wall tile sqft against this row
FALLBACK_WALL_TILE_BATHROOM_TYPE = "Walk-in Shower"

COVERAGE_KEYS: dict[str, str] = {
    "None": "none",
    "Half way up": "halfwayUp",
    "Floor to ceiling": "floorToCeiling",
}

# Intake form bathroom_type -> design bathroomType
INTAKE_TO_DESIGN_BATHROOM_TYPE: dict[str, str] = {
    "walk_in":    "Walk-in Shower",
    "tub_shower": "Tub & Shower",
    "tub_only":   "Bathtub",
    "powder":     "Sink & Toilet",
    # older stored quotes
    "tub_and_shower": "Tub & Shower",
}

# Size/coverage derivation thresholds (sqft)
SMALL_BATHROOM_MAX_SQFT: float = 35.0
LARGE_BATHROOM_MIN_SQFT: float = 65.0
FLOOR_TO_CEILING_MIN_WET_WALL_SQFT: float = 80.0


# ── Materials estimate fallback (packages without resolvable SKUs) ────────────

ESTIMATE_FIXTURE_BASE_MID: int = 8_000
ESTIMATE_FIXTURE_BASE_DEFAULT: int = 12_000
ESTIMATE_TUB_SHOWER_ADDER: int = 2_000
TUB_SHOWER_ALIASES: frozenset[str] = frozenset({"tub_shower", "tub_and_shower", "Tub & Shower"})

CATALOG_MISSING_ISSUE = "MISSING_FROM_CATALOG"

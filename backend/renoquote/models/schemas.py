"""
Pydantic domain models for the pricing core.

Labour-side models (intake form, rate card, quote) use snake_case on the
wire. Materials-side models (design configuration, universal config,
pricing result) are camelCase on the wire and snake_case in Python.
"""
import re
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from renoquote.config import (
    ALL_CATEGORIES,
    BATHROOM_SIZES,
    LEGACY_SKU_FIELDS,
)

BathroomTypeName = Literal["Bathtub", "Walk-in Shower", "Tub & Shower", "Sink & Toilet"]
WallCoverageName = Literal["None", "Half way up", "Floor to ceiling"]
BathroomSize = Literal["small", "normal", "large"]
UnitKind = Literal["unit", "sqft", "item", "point"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def parse_price_value(value: Any) -> float:
    """Coerce catalog price cells ("$1,299.00", 42, None) to a float."""
    if value is None or value == "":
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    cleaned = re.sub(r"[^0-9.\-]+", "", str(value))
    try:
        return float(cleaned)
    except ValueError:
        return 0.0


# ═══════════════════════════════════════════════════════════════════════════
# Labour quote
# ═══════════════════════════════════════════════════════════════════════════

class Upgrades(BaseModel):
    heated_floors: bool = False
    heated_towel_rack: bool = False
    bidet_addon: bool = False
    smart_mirror: bool = False
    premium_exhaust_fan: bool = False
    built_in_niche: bool = False
    shower_bench: bool = False
    safety_grab_bars: bool = False


class IntakeForm(BaseModel):
    """Renovation intake form as submitted by a customer or contractor."""
    model_config = ConfigDict(extra="ignore")

    bathroom_type: Literal["walk_in", "tub_shower", "tub_only", "powder"]
    building_type: Literal["house", "condo"] = "house"
    year_built: Literal["pre_1980", "post_1980", "unknown"] = "unknown"

    floor_sqft: Optional[float] = Field(None, ge=0)
    shower_floor_sqft: Optional[float] = Field(None, ge=0)
    wet_wall_sqft: Optional[float] = Field(None, ge=0)
    tile_other_walls: bool = False
    tile_other_walls_sqft: Optional[float] = Field(None, ge=0)
    add_accent_feature: bool = False
    accent_feature_sqft: Optional[float] = Field(None, ge=0)
    ceiling_height: Optional[float] = Field(None, gt=0)
    vanity_width_in: Optional[float] = Field(None, ge=0)
    electrical_items: Optional[int] = Field(None, ge=0)
    upgrades: Upgrades = Field(default_factory=Upgrades)

    quote_name: Optional[str] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    project_address: Optional[str] = None

    @field_validator("upgrades", mode="before")
    @classmethod
    def _none_upgrades(cls, v):
        return {} if v is None else v


class RateLine(BaseModel):
    line_code: str
    line_name: str
    unit: UnitKind = "unit"
    base_price: float = Field(0.0, ge=0)
    price_per_unit: float = Field(0.0, ge=0)
    notes: Optional[str] = None
    active: bool = True
    # Per-line switch for the one-off base fee
    apply_base: bool = True


class ProjectMultiplier(BaseModel):
    code: str
    name: str
    basis: Literal["percent_of_labour", "percent_of_sell", "labour_subtotal"] = "percent_of_labour"
    default_percent: float = 0.0


class LineItem(BaseModel):
    line_code: str
    line_name: str
    quantity: float
    unit: UnitKind
    unit_price: float
    base_applied: bool
    extended: float


class QuoteTotals(BaseModel):
    labour_subtotal: float
    contingency: float
    condo_uplift: float
    oldhome_uplift: float
    pm_fee: float
    grand_total: float


class CalculationMeta(BaseModel):
    rate_card_version: str
    bathroom_type: str
    building_type: str
    year_built: str
    plumbing_points: int
    electrical_items: int
    total_floor_sqft: float
    wet_wall_sqft: float
    dry_wall_sqft: float
    accent_feature_sqft: float
    ceiling_height: Optional[float] = None
    omitted_codes: List[str] = Field(default_factory=list)


class CalculatedQuote(BaseModel):
    line_items: List[LineItem]
    totals: QuoteTotals
    calculation_meta: CalculationMeta
    raw_form_data: Dict[str, Any]


# ═══════════════════════════════════════════════════════════════════════════
# Materials catalog and design configuration
# ═══════════════════════════════════════════════════════════════════════════

class Product(CamelModel):
    sku: str
    name: str = ""
    brand: Optional[str] = None
    category: str = ""
    price: float = 0.0
    price_per_sqft: float = 0.0
    cost: float = 0.0
    cost_per_sqft: float = 0.0
    description: Optional[str] = None
    images: List[str] = Field(default_factory=list)

    @field_validator("price", "price_per_sqft", "cost", "cost_per_sqft", mode="before")
    @classmethod
    def _coerce_price(cls, v):
        return parse_price_value(v)


def _check_categories(mapping: Optional[Dict[str, Any]], field: str) -> None:
    if not mapping:
        return
    unknown = sorted(k for k in mapping if k not in ALL_CATEGORIES)
    if unknown:
        raise ValueError(f"unknown item categories in {field}: {', '.join(unknown)}")


class DesignConfiguration(CamelModel):
    bathroom_type: BathroomTypeName
    wall_tile_coverage: WallCoverageName = "Floor to ceiling"
    bathroom_size: BathroomSize = "normal"
    items: Dict[str, Optional[str]] = Field(default_factory=dict)
    included_items: Optional[Dict[str, bool]] = None

    @model_validator(mode="after")
    def _known_categories(self):
        _check_categories(self.items, "items")
        _check_categories(self.included_items, "includedItems")
        return self


class BathroomTypeConfig(CamelModel):
    id: str
    name: str
    included_items: Dict[str, Optional[bool]] = Field(default_factory=dict)


class WallTileCoverageConfig(CamelModel):
    id: str
    name: str
    multiplier: float
    description: str = ""


class WallTileCoverageValues(CamelModel):
    none: float = 0.0
    halfway_up: float = 0.0
    floor_to_ceiling: float = 0.0


class SizeSquareFootage(CamelModel):
    floor_tile: float
    wall_tile: Dict[str, WallTileCoverageValues]
    shower_floor_tile: float
    accent_tile: float


class DefaultSettings(CamelModel):
    bathroom_type: str
    wall_tile_coverage: str
    bathroom_size: str


class UniversalBathConfig(CamelModel):
    bathroom_types: List[BathroomTypeConfig]
    wall_tile_coverages: List[WallTileCoverageConfig]
    square_footage_config: Dict[str, SizeSquareFootage]
    default_settings: Optional[DefaultSettings] = None
    updated_at: Optional[str] = None

    @model_validator(mode="after")
    def _all_sizes_present(self):
        missing = [s for s in BATHROOM_SIZES if s not in self.square_footage_config]
        if missing:
            raise ValueError(f"squareFootageConfig missing sizes: {', '.join(missing)}")
        return self


class UniversalToggles(CamelModel):
    """Snapshot pushed onto every package by the toggle applier."""
    bathroom_type: BathroomTypeName
    wall_tile_coverage: WallCoverageName
    bathroom_size: Optional[BathroomSize] = None
    included_items: Dict[str, bool] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _known_categories(self):
        _check_categories(self.included_items, "includedItems")
        return self


# ═══════════════════════════════════════════════════════════════════════════
# Materials pricing result
# ═══════════════════════════════════════════════════════════════════════════

class TileBreakdown(CamelModel):
    sku: str
    sqft: float
    price_per_sqft: float
    total: int
    found: bool = True


class FixtureBreakdown(CamelModel):
    sku: str
    price: int
    found: bool = True


class PricingBreakdown(CamelModel):
    tiles: Dict[str, TileBreakdown] = Field(default_factory=dict)
    fixtures: Dict[str, FixtureBreakdown] = Field(default_factory=dict)


class PricingItem(CamelModel):
    sku: str
    name: str
    category: str
    price: int
    price_type: Literal["PRICE", "PRICE_SQF"]
    brand: Optional[str] = None
    image: Optional[str] = None
    description: Optional[str] = None


class CatalogWarning(CamelModel):
    category: str
    sku: str
    issue: str


class PricingResult(CamelModel):
    """Itemised materials price. Money fields are integral cents."""
    subtotal: int
    items: List[PricingItem]
    breakdown: PricingBreakdown
    catalog_version: str
    signature: str
    warnings: List[CatalogWarning] = Field(default_factory=list)


# ═══════════════════════════════════════════════════════════════════════════
# Package catalog rows
# ═══════════════════════════════════════════════════════════════════════════

class Package(BaseModel):
    """
    A curated package. ``items`` is the canonical selection; ``legacy_skus``
    holds the flat ``*_SKU`` columns kept for older readers.
    """
    id: str
    name: str
    category: str = ""
    items: Dict[str, Optional[str]] = Field(default_factory=dict)
    legacy_skus: Dict[str, Optional[str]] = Field(default_factory=dict)
    universal_toggles: Optional[Dict[str, Any]] = None
    wall_tile_multiplier: float = 1.0

    def legacy_sku(self, category: str) -> Optional[str]:
        return self.legacy_skus.get(LEGACY_SKU_FIELDS[category]) or None

    def selected_skus(self) -> Dict[str, str]:
        """
        Non-empty SKU per category in pricing order. The item map is
        canonical; legacy columns are read only for rows with no item map.
        """
        out: Dict[str, str] = {}
        for category in ALL_CATEGORIES:
            sku = self.items.get(category) if self.items else self.legacy_sku(category)
            if sku:
                out[category] = sku
        return out


# ═══════════════════════════════════════════════════════════════════════════
# Stored-package pricing
# ═══════════════════════════════════════════════════════════════════════════

class PackagePricingRequest(CamelModel):
    """Measured dimensions from a quote, priced against one stored package."""
    package_id: str
    floor_sqft: float = Field(..., gt=0)
    wet_wall_sqft: Optional[float] = Field(None, ge=0)
    dry_wall_sqft: Optional[float] = Field(None, ge=0)
    shower_floor_sqft: Optional[float] = Field(None, ge=0)
    accent_tile_sqft: Optional[float] = Field(None, ge=0)
    bathroom_type: Optional[str] = None


class PackagePricing(CamelModel):
    """Dollar totals for a stored package; ``subtotal_cents`` is exact."""
    package_id: str
    package_name: str
    subtotal: float
    total: float
    subtotal_cents: int
    breakdown: Dict[str, Any]
    items: List[PricingItem] = Field(default_factory=list)
    is_estimate: bool = False
    warnings: List[CatalogWarning] = Field(default_factory=list)
    catalog_version: Optional[str] = None
    signature: Optional[str] = None

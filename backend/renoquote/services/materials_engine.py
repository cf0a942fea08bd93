"""
materials_engine.py — Materials pricing for a bathroom design.

Given a DesignConfiguration, a MaterialsCatalog snapshot and (optionally)
the universal configuration, prices every included category:

  Tiles    (floorTile, wallTile, showerFloorTile, accentTile)
           total = price_per_sqft * sqft       sqft from the size table,
                                               or measured when supplied
  Fixtures (vanity ... lighting)
           total = flat catalog price

Money is converted to integral cents per item (ROUND_HALF_UP) and summed
as integers. Categories are evaluated in declaration order, so identical
inputs give identical breakdowns.

A selected SKU that the catalog does not carry contributes zero; it still
appears in the breakdown (found=False) and in ``warnings``.
"""

import hashlib
import json
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from renoquote.config import (
    BATHROOM_TYPES,
    CATALOG_MISSING_ISSUE,
    ESTIMATE_FIXTURE_BASE_DEFAULT,
    ESTIMATE_FIXTURE_BASE_MID,
    ESTIMATE_TUB_SHOWER_ADDER,
    FIXTURE_CATEGORIES,
    INTAKE_TO_DESIGN_BATHROOM_TYPE,
    TILE_CATEGORIES,
    TUB_SHOWER_ALIASES,
)
from renoquote.models.schemas import (
    CatalogWarning,
    DesignConfiguration,
    FixtureBreakdown,
    Package,
    PackagePricing,
    PackagePricingRequest,
    PricingBreakdown,
    PricingItem,
    PricingResult,
    TileBreakdown,
    UniversalBathConfig,
)
from renoquote.services.catalog_engine import MaterialsCatalog
from renoquote.services.inclusion_policy import should_include
from renoquote.services.square_footage import resolve_tile_sqft
from renoquote.services.universal_config import (
    default_universal_config,
    derive_bathroom_size,
    derive_wall_coverage,
    resolve_default_settings,
)

logger = logging.getLogger("renoquote.materials")

CENT = Decimal("0.01")


def to_cents(amount: Any) -> int:
    """Decimal dollars -> integral cents, rounded half up once."""
    return int((Decimal(str(amount)) / CENT).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def design_signature(design_config: DesignConfiguration, extra: Optional[Dict[str, Any]] = None) -> str:
    """Stable hash over the design configuration, for caching and audit."""
    payload: Dict[str, Any] = design_config.model_dump(by_alias=True, mode="json")
    if extra:
        payload["measuredSqft"] = extra
    blob = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(blob.encode("utf-8")).hexdigest()[:16]


def normalize_design_bathroom_type(value: Optional[str]) -> Optional[str]:
    """Accept both intake codes (tub_shower) and design names (Tub & Shower)."""
    if not value:
        return None
    if value in BATHROOM_TYPES:
        return value
    return INTAKE_TO_DESIGN_BATHROOM_TYPE.get(value)


def measured_tile_sqft(request: PackagePricingRequest) -> Dict[str, float]:
    """
    Tile areas the request actually measured:
        floorTile       = floor_sqft
        wallTile        = wet_wall_sqft + dry_wall_sqft   (either given)
        showerFloorTile = shower_floor_sqft
        accentTile      = accent_tile_sqft
    Omitted fields are left out so pricing falls back to the size table.
    """
    measured: Dict[str, float] = {"floorTile": request.floor_sqft}
    if request.wet_wall_sqft is not None or request.dry_wall_sqft is not None:
        measured["wallTile"] = (request.wet_wall_sqft or 0.0) + (request.dry_wall_sqft or 0.0)
    if request.shower_floor_sqft is not None:
        measured["showerFloorTile"] = request.shower_floor_sqft
    if request.accent_tile_sqft is not None:
        measured["accentTile"] = request.accent_tile_sqft
    return measured


class MaterialsPricingEngine:
    """Prices a design against a catalog snapshot. Pure and synchronous."""

    def price(
        self,
        design_config: DesignConfiguration,
        catalog: MaterialsCatalog,
        universal_config: Optional[UniversalBathConfig] = None,
        measured_sqft: Optional[Dict[str, float]] = None,
    ) -> PricingResult:
        table = universal_config or default_universal_config()
        items: List[PricingItem] = []
        breakdown = PricingBreakdown()
        warnings: List[CatalogWarning] = []
        subtotal = 0

        # ── Tiles ───────────────────────────────────────────────────────────
        for category in TILE_CATEGORIES:
            sku = design_config.items.get(category)
            if not sku or not should_include(category, design_config, universal_config):
                continue

            if measured_sqft is not None and category in measured_sqft:
                sqft = float(measured_sqft[category])
            else:
                sqft = resolve_tile_sqft(
                    category, table,
                    design_config.bathroom_size,
                    design_config.wall_tile_coverage,
                    design_config.bathroom_type,
                )
            sqft = max(sqft, 0.0)

            product = catalog.lookup(sku)
            if product is None:
                breakdown.tiles[category] = TileBreakdown(
                    sku=sku, sqft=sqft, price_per_sqft=0.0, total=0, found=False
                )
                warnings.append(CatalogWarning(category=category, sku=sku, issue=CATALOG_MISSING_ISSUE))
                continue

            # zero-area tiles still get a line, at total 0
            total = to_cents(Decimal(str(product.price_per_sqft)) * Decimal(str(sqft)))
            subtotal += total
            breakdown.tiles[category] = TileBreakdown(
                sku=product.sku, sqft=sqft, price_per_sqft=product.price_per_sqft, total=total
            )
            items.append(self._item(product, category, total, "PRICE_SQF"))

        # ── Fixtures ────────────────────────────────────────────────────────
        for category in FIXTURE_CATEGORIES:
            sku = design_config.items.get(category)
            if not sku or not should_include(category, design_config, universal_config):
                continue

            product = catalog.lookup(sku)
            if product is None:
                breakdown.fixtures[category] = FixtureBreakdown(sku=sku, price=0, found=False)
                warnings.append(CatalogWarning(category=category, sku=sku, issue=CATALOG_MISSING_ISSUE))
                continue

            price = to_cents(product.price)
            subtotal += price
            breakdown.fixtures[category] = FixtureBreakdown(sku=product.sku, price=price)
            items.append(self._item(product, category, price, "PRICE"))

        if warnings:
            logger.warning(
                "SKUs missing from catalog priced at zero: %s",
                ", ".join(f"{w.category}={w.sku}" for w in warnings),
                extra={"catalog_version": catalog.version},
            )

        return PricingResult(
            subtotal=subtotal,
            items=items,
            breakdown=breakdown,
            catalog_version=catalog.version,
            signature=design_signature(design_config, measured_sqft),
            warnings=warnings,
        )

    @staticmethod
    def _item(product, category: str, cents: int, price_type: str) -> PricingItem:
        return PricingItem(
            sku=product.sku,
            name=product.name,
            category=category,
            price=cents,
            price_type=price_type,
            brand=product.brand,
            image=product.images[0] if product.images else None,
            description=product.description,
        )

    # -----------------------------------------------------------------------
    # Stored packages
    # -----------------------------------------------------------------------

    def estimate_package(self, package: Package, bathroom_type: Optional[str]) -> PackagePricing:
        """
        Flat estimate for packages with no resolvable SKUs:
            fixture base  = 8,000 for "Mid-Range" packages, 12,000 otherwise
            + 2,000 for tub-and-shower bathrooms
        """
        fixture_base = (
            ESTIMATE_FIXTURE_BASE_MID if "Mid-Range" in package.name
            else ESTIMATE_FIXTURE_BASE_DEFAULT
        )
        adder = ESTIMATE_TUB_SHOWER_ADDER if bathroom_type in TUB_SHOWER_ALIASES else 0
        subtotal = fixture_base + adder

        breakdown: Dict[str, Any] = {
            "fixtures": {"estimated": fixture_base, "note": "Estimated materials package cost"},
        }
        if adder:
            breakdown["tubShowerCombo"] = {
                "estimated": adder,
                "note": "Additional cost for tub and shower combination",
            }
        return PackagePricing(
            package_id=package.id,
            package_name=package.name,
            subtotal=float(subtotal),
            total=float(subtotal),
            subtotal_cents=subtotal * 100,
            breakdown=breakdown,
            is_estimate=True,
        )

    def design_for_package(
        self,
        package: Package,
        request: PackagePricingRequest,
        universal_config: Optional[UniversalBathConfig],
    ) -> DesignConfiguration:
        """Design settings: request, then the package's toggle snapshot, then defaults."""
        snapshot = package.universal_toggles or {}
        defaults = resolve_default_settings(universal_config or default_universal_config())

        bathroom_type = (
            normalize_design_bathroom_type(request.bathroom_type)
            or normalize_design_bathroom_type(snapshot.get("bathroomType"))
            or defaults["bathroomType"]
        )
        if request.wet_wall_sqft is not None:
            coverage = derive_wall_coverage(request.wet_wall_sqft)
        else:
            coverage = snapshot.get("wallTileCoverage") or defaults["wallTileCoverage"]

        return DesignConfiguration(
            bathroom_type=bathroom_type,
            wall_tile_coverage=coverage,
            bathroom_size=derive_bathroom_size(request.floor_sqft),
            items=package.selected_skus(),
            included_items=snapshot.get("includedItems") or None,
        )

    def price_package(
        self,
        package: Package,
        request: PackagePricingRequest,
        catalog: MaterialsCatalog,
        universal_config: Optional[UniversalBathConfig] = None,
    ) -> PackagePricing:
        """
        Price a stored package with measured dimensions from a quote.

        Measured sqft replaces the table lookup for the tile categories the
        request measured (see measured_tile_sqft); the rest use the size table.
        """
        selected = package.selected_skus()
        if not any(sku in catalog for sku in selected.values()):
            logger.info(
                "Package has no resolvable SKUs, using estimate",
                extra={"package_id": package.id},
            )
            return self.estimate_package(package, request.bathroom_type)

        measured = measured_tile_sqft(request)
        design = self.design_for_package(package, request, universal_config)
        result = self.price(design, catalog, universal_config, measured_sqft=measured)

        dollars = round(result.subtotal / 100, 2)
        return PackagePricing(
            package_id=package.id,
            package_name=package.name,
            subtotal=dollars,
            total=dollars,
            subtotal_cents=result.subtotal,
            breakdown=result.breakdown.model_dump(by_alias=True),
            items=result.items,
            is_estimate=False,
            warnings=result.warnings,
            catalog_version=result.catalog_version,
            signature=result.signature,
        )

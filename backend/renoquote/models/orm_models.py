"""ORM Models for the RenoQuote catalog store — SQLAlchemy 2.0"""
from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlalchemy import String, Text, Boolean, Integer, Numeric, DateTime
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func
from renoquote.db import Base


# ── LABOUR RATE CARD ──────────────────────────────────────────────────────────
class RateLineRow(Base):
    __tablename__ = "rate_lines"
    line_code: Mapped[str] = mapped_column(String(32), primary_key=True)
    line_name: Mapped[str] = mapped_column(String(255), nullable=False)
    unit: Mapped[str] = mapped_column(String(16), nullable=False, default="unit")  # unit|sqft|item|point
    base_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    price_per_unit: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    notes: Mapped[Optional[str]] = mapped_column(Text)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    apply_base: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class ProjectMultiplierRow(Base):
    __tablename__ = "project_multipliers"
    code: Mapped[str] = mapped_column(String(32), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    basis: Mapped[str] = mapped_column(String(32), nullable=False, default="percent_of_labour")
    default_percent: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False, default=Decimal("0"))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


# ── MATERIALS CATALOG ─────────────────────────────────────────────────────────
class ProductRow(Base):
    __tablename__ = "products"
    sku: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    brand: Mapped[Optional[str]] = mapped_column(String(120))
    category: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    price_per_sqft: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    cost_per_sqft: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    description: Mapped[Optional[str]] = mapped_column(Text)
    images: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)


# ── PACKAGES ──────────────────────────────────────────────────────────────────
class PackageRow(Base):
    """
    Curated package. ``items`` is the canonical category -> SKU map; the
    upper-case *_SKU columns are the flat shape older readers still use.
    """
    __tablename__ = "packages"
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    items: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)

    tiles_floor_sku: Mapped[Optional[str]] = mapped_column("TILES_FLOOR_SKU", String(64))
    tiles_wall_sku: Mapped[Optional[str]] = mapped_column("TILES_WALL_SKU", String(64))
    tiles_shower_floor_sku: Mapped[Optional[str]] = mapped_column("TILES_SHOWER_FLOOR_SKU", String(64))
    tiles_accent_sku: Mapped[Optional[str]] = mapped_column("TILES_ACCENT_SKU", String(64))
    vanity_sku: Mapped[Optional[str]] = mapped_column("VANITY_SKU", String(64))
    tub_sku: Mapped[Optional[str]] = mapped_column("TUB_SKU", String(64))
    tub_filler_sku: Mapped[Optional[str]] = mapped_column("TUB_FILLER_SKU", String(64))
    toilet_sku: Mapped[Optional[str]] = mapped_column("TOILET_SKU", String(64))
    shower_sku: Mapped[Optional[str]] = mapped_column("SHOWER_SKU", String(64))
    faucet_sku: Mapped[Optional[str]] = mapped_column("FAUCET_SKU", String(64))
    glazing_sku: Mapped[Optional[str]] = mapped_column("GLAZING_SKU", String(64))
    mirror_sku: Mapped[Optional[str]] = mapped_column("MIRROR_SKU", String(64))
    towel_bar_sku: Mapped[Optional[str]] = mapped_column("TOWEL_BAR_SKU", String(64))
    toilet_paper_holder_sku: Mapped[Optional[str]] = mapped_column("TOILET_PAPER_HOLDER_SKU", String(64))
    hook_sku: Mapped[Optional[str]] = mapped_column("HOOK_SKU", String(64))
    lighting_sku: Mapped[Optional[str]] = mapped_column("LIGHTING_SKU", String(64))

    universal_toggles: Mapped[Optional[dict]] = mapped_column("UNIVERSAL_TOGGLES", JSONB)
    wall_tile_multiplier: Mapped[Decimal] = mapped_column(
        "WALL_TILE_MULTIPLIER", Numeric(6, 3), nullable=False, default=Decimal("1.0")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


# legacy column name -> PackageRow attribute
PACKAGE_LEGACY_ATTRS: dict[str, str] = {
    "TILES_FLOOR_SKU": "tiles_floor_sku",
    "TILES_WALL_SKU": "tiles_wall_sku",
    "TILES_SHOWER_FLOOR_SKU": "tiles_shower_floor_sku",
    "TILES_ACCENT_SKU": "tiles_accent_sku",
    "VANITY_SKU": "vanity_sku",
    "TUB_SKU": "tub_sku",
    "TUB_FILLER_SKU": "tub_filler_sku",
    "TOILET_SKU": "toilet_sku",
    "SHOWER_SKU": "shower_sku",
    "FAUCET_SKU": "faucet_sku",
    "GLAZING_SKU": "glazing_sku",
    "MIRROR_SKU": "mirror_sku",
    "TOWEL_BAR_SKU": "towel_bar_sku",
    "TOILET_PAPER_HOLDER_SKU": "toilet_paper_holder_sku",
    "HOOK_SKU": "hook_sku",
    "LIGHTING_SKU": "lighting_sku",
}


# ── UNIVERSAL CONFIGURATION ───────────────────────────────────────────────────
class UniversalBathConfigRow(Base):
    """Single logical row (id=1); last writer wins."""
    __tablename__ = "universal_bath_config"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=1)
    config: Mapped[dict] = mapped_column(JSONB, nullable=False)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

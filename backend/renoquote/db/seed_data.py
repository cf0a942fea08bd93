"""
Default labour rate card and project multipliers.

Seeding is idempotent: rows are inserted only when their code is absent,
so admin edits survive restarts.
"""
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from renoquote.models.orm_models import ProjectMultiplierRow, RateLineRow
from renoquote.models.schemas import ProjectMultiplier, RateLine

logger = logging.getLogger("renoquote-db")


def _line(code, name, unit, base=0.0, per_unit=0.0, notes=None) -> RateLine:
    return RateLine(
        line_code=code, line_name=name, unit=unit,
        base_price=base, price_per_unit=per_unit, notes=notes,
    )


DEFAULT_RATE_LINES: List[RateLine] = [
    _line("DEM", "Demolition & disposal", "unit", base=1107.00),
    _line("PLM", "Plumbing rough-in & finish", "point", per_unit=307.50),
    _line("ELE", "Electrical items", "item", per_unit=184.50),
    _line("SUB-GRB", "Subfloor & backer board", "sqft", base=184.50, per_unit=3.69),
    _line("DRY", "Drywall repair & finishing", "sqft", base=369.00, per_unit=3.69),
    _line("WPF-KER", "Waterproofing (Kerdi)", "sqft", base=246.00, per_unit=4.92),
    _line("TILE-WET", "Wet wall tile install", "sqft", base=369.00, per_unit=12.30),
    _line("TILE-DRY", "Dry wall tile install", "sqft", per_unit=12.30),
    _line("TILE-FLR", "Floor tile install", "sqft", base=123.00, per_unit=12.30),
    _line("PAINT", "Paint walls & ceiling", "sqft", base=246.00, per_unit=3.69),
    _line("VAN", "Vanity install", "unit", base=264.45),
    _line("GLASS", "Glass door install", "unit", base=492.00),
    _line("NICHE", "Built-in niche", "unit", base=369.00),
    _line("BENCH", "Shower bench", "unit", base=600.00),
    _line("RECESS", "Recessed shower pan", "unit", base=492.00),
    _line("DUMP", "Disposal by floor area", "sqft", base=184.50, per_unit=3.69),
    _line("ASB-T", "Asbestos testing", "unit", base=350.00, notes="Pre-1980 builds"),
    _line("HEATED-FLR", "Heated floor system", "unit", base=800.00),
    _line("HEATED-RACK", "Heated towel rack", "unit", base=350.00),
    _line("BIDET-ADDON", "Bidet add-on", "unit", base=250.00),
    _line("SMART-MIRROR", "Smart mirror install", "unit", base=450.00),
    _line("PREMIUM-FAN", "Premium exhaust fan", "unit", base=300.00),
    _line("GRAB-BARS", "Safety grab bars", "unit", base=180.00),
]

DEFAULT_MULTIPLIERS: List[ProjectMultiplier] = [
    ProjectMultiplier(code="CONTINGENCY", name="Contingency", basis="percent_of_labour", default_percent=2.0),
    ProjectMultiplier(code="PM-FEE", name="Project management fee", basis="percent_of_labour", default_percent=0.0),
    ProjectMultiplier(code="CONDO-FCTR", name="Condo uplift", basis="percent_of_labour", default_percent=0.0),
    ProjectMultiplier(code="OLDHOME-ASB", name="Pre-1980 home uplift", basis="percent_of_labour", default_percent=0.0),
]


async def seed_rate_card(session: AsyncSession) -> int:
    """Insert default rate lines and multipliers whose codes are missing."""
    inserted = 0

    existing_codes = set((await session.execute(select(RateLineRow.line_code))).scalars())
    for line in DEFAULT_RATE_LINES:
        if line.line_code not in existing_codes:
            session.add(RateLineRow(**line.model_dump()))
            inserted += 1

    existing_mult = set((await session.execute(select(ProjectMultiplierRow.code))).scalars())
    for mult in DEFAULT_MULTIPLIERS:
        if mult.code not in existing_mult:
            session.add(ProjectMultiplierRow(**mult.model_dump()))
            inserted += 1

    await session.flush()
    return inserted

"""
form_mapper.py — Intake form to labour quantities.

Turns a renovation intake form into a quantity map keyed by rate-card line
code, plus the metadata echoed into the quote. Pure and synchronous.

Presence rules:
  - A code is emitted only when its trigger holds AND its quantity is > 0.
    Absent means "not applicable"; the rate card engine never sees zeros.
  - Area codes aggregate several form fields (floor + shower floor,
    other walls + accent feature).
  - Upgrade flags map 1:1 onto fixed quantity-1 codes.
"""

from typing import Any, Dict, Tuple, Union

from pydantic import ValidationError

from renoquote.config import UPGRADE_LINE_CODES, WET_BATHROOM_TYPES
from renoquote.errors import QuoteValidationError
from renoquote.models.schemas import IntakeForm


# ---------------------------------------------------------------------------
# Plumbing point weights
# ---------------------------------------------------------------------------

PAN_OR_TUB_POINTS: int = 3      # drain, supply pair
SHOWER_SET_POINTS: int = 1
SINK_POINTS: int = 1
TOILET_POINTS: int = 1


def coerce_form(form_data: Union[IntakeForm, Dict[str, Any]]) -> IntakeForm:
    """Validate a raw dict into an IntakeForm, translating pydantic errors."""
    if isinstance(form_data, IntakeForm):
        return form_data
    try:
        return IntakeForm.model_validate(form_data)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ())) or None
        raise QuoteValidationError(f"{field}: {first.get('msg')}", field=field) from exc


def validate_required_fields(form: IntakeForm) -> None:
    """Raise QuoteValidationError when a field the bathroom type needs is absent."""
    if form.floor_sqft is None:
        raise QuoteValidationError("floor_sqft is required", field="floor_sqft")
    if form.bathroom_type in WET_BATHROOM_TYPES and form.wet_wall_sqft is None:
        raise QuoteValidationError(
            f"wet_wall_sqft is required for bathroom_type '{form.bathroom_type}'",
            field="wet_wall_sqft",
        )


def count_plumbing_points(bathroom_type: str) -> int:
    points = 0
    if bathroom_type != "powder":
        points += PAN_OR_TUB_POINTS + SHOWER_SET_POINTS
    points += SINK_POINTS
    if bathroom_type != "walk_in":
        points += TOILET_POINTS
    return points


def map_form_to_quantities(
    form_data: Union[IntakeForm, Dict[str, Any]],
) -> Tuple[Dict[str, float], Dict[str, Any]]:
    """
    Map an intake form to (quantities, meta).

    Raises QuoteValidationError only for missing required fields; every
    optional field may be absent.
    """
    form = coerce_form(form_data)
    validate_required_fields(form)

    floor_sqft = form.floor_sqft or 0.0
    shower_floor_sqft = form.shower_floor_sqft or 0.0
    wet_wall_sqft = form.wet_wall_sqft or 0.0
    other_walls_sqft = (form.tile_other_walls_sqft or 0.0) if form.tile_other_walls else 0.0
    accent_sqft = (form.accent_feature_sqft or 0.0) if form.add_accent_feature else 0.0
    electrical_items = form.electrical_items or 0

    total_floor_sqft = floor_sqft + shower_floor_sqft
    dry_wall_sqft = other_walls_sqft + accent_sqft
    plumbing_points = count_plumbing_points(form.bathroom_type)

    quantities: Dict[str, float] = {"DEM": 1}

    def put(code: str, qty: float) -> None:
        if qty and qty > 0:
            quantities[code] = qty

    put("PLM", plumbing_points)
    put("ELE", electrical_items)

    put("TILE-FLR", total_floor_sqft)
    put("DUMP", total_floor_sqft)

    for code in ("SUB-GRB", "WPF-KER", "TILE-WET"):
        put(code, wet_wall_sqft)

    put("TILE-DRY", dry_wall_sqft)

    if (form.vanity_width_in or 0) > 0:
        put("VAN", 1)
    if form.bathroom_type == "walk_in":
        put("RECESS", 1)
    if form.year_built == "pre_1980":
        put("ASB-T", 1)

    upgrades = form.upgrades.model_dump()
    for flag, code in UPGRADE_LINE_CODES.items():
        if upgrades.get(flag):
            put(code, 1)

    meta: Dict[str, Any] = {
        "bathroom_type": form.bathroom_type,
        "building_type": form.building_type,
        "year_built": form.year_built,
        "plumbing_points": plumbing_points,
        "electrical_items": electrical_items,
        "total_floor_sqft": round(total_floor_sqft, 2),
        "wet_wall_sqft": round(wet_wall_sqft, 2),
        "dry_wall_sqft": round(dry_wall_sqft, 2),
        "accent_feature_sqft": round(accent_sqft, 2),
        "ceiling_height": form.ceiling_height,
    }
    return quantities, meta

"""
Preset designs (budget / mid / high) and the package options offered with a
labour quote.
"""

import copy
import logging
from typing import Any, Dict, List, Optional, Union

from renoquote.errors import QuoteValidationError
from renoquote.models.schemas import DesignConfiguration, IntakeForm, UniversalBathConfig
from renoquote.services.catalog_engine import MaterialsCatalog
from renoquote.services.form_mapper import coerce_form
from renoquote.services.materials_engine import MaterialsPricingEngine
from renoquote.services.universal_config import (
    derive_bathroom_size,
    derive_wall_coverage,
    design_bathroom_type,
)

logger = logging.getLogger("renoquote.materials")

PRESET_LEVELS = ("budget", "mid", "high")

DEFAULT_DESIGNS: Dict[str, Dict[str, Any]] = {
    "budget": {
        "bathroomType": "Sink & Toilet",
        "wallTileCoverage": "Half way up",
        "bathroomSize": "small",
        "items": {
            "floorTile": "FL-CER-12X12-WHI",
            "wallTile": "WL-CER-3X6-WHI",
            "vanity": "VAN-24-WHI-LAM",
            "toilet": "TOI-ROUND-WHI-STD",
            "faucet": "FAU-CHR-SING-BAS",
            "mirror": "MIR-24-REC-BAS",
            "lighting": "LIT-VAN-CHR-BAS",
        },
    },
    "mid": {
        "bathroomType": "Tub & Shower",
        "wallTileCoverage": "Floor to ceiling",
        "bathroomSize": "normal",
        "items": {
            "floorTile": "FL-POR-12X24-GRY",
            "wallTile": "WL-POR-3X6-GRY",
            "showerFloorTile": "SF-MOS-2X2-GRY",
            "accentTile": "AC-NAT-6X12-MAR",
            "vanity": "VAN-36-ESP-QUA",
            "tub": "TUB-ALC-60-WHI",
            "tubFiller": "TF-BRU-FLR-STD",
            "toilet": "TOI-ELONG-WHI-COM",
            "shower": "SHO-GLZ-60-CLR",
            "faucet": "FAU-BRU-SING-MID",
            "glazing": "GLZ-FRA-CHR-STD",
            "mirror": "MIR-36-REC-LED",
            "towelBar": "TB-BRU-24-STD",
            "toiletPaperHolder": "TP-BRU-STD",
            "hook": "HK-BRU-SING-STD",
            "lighting": "LIT-VAN-BRU-LED",
        },
    },
    "high": {
        "bathroomType": "Walk-in Shower",
        "wallTileCoverage": "Floor to ceiling",
        "bathroomSize": "large",
        "items": {
            "floorTile": "FL-NAT-12X24-MAR",
            "wallTile": "WL-NAT-6X12-MAR",
            "showerFloorTile": "SF-NAT-HEX-MAR",
            "accentTile": "AC-NAT-12X12-VEI",
            "vanity": "VAN-48-WAL-QUA",
            "shower": "SHO-CUS-72-FRA",
            "faucet": "FAU-MAT-RAI-PRM",
            "glazing": "GLZ-FRA-MAT-PRM",
            "mirror": "MIR-48-LED-BAC",
            "towelBar": "TB-MAT-30-PRM",
            "toiletPaperHolder": "TP-MAT-PRM",
            "hook": "HK-MAT-DBL-PRM",
            "lighting": "LIT-PEN-MAT-LED",
        },
    },
}

PACKAGE_NAMES: Dict[str, str] = {
    "budget": "Essential Package",
    "mid": "Signature Package",
    "high": "Premium Package",
}

PACKAGE_DESCRIPTIONS: Dict[str, str] = {
    "budget": "Quality materials with great value. Perfect for budget-conscious renovations.",
    "mid": "Our most popular package with excellent quality and style balance.",
    "high": "Luxury materials and finishes for a premium bathroom experience.",
}


def get_default_design(level: str) -> DesignConfiguration:
    if level not in DEFAULT_DESIGNS:
        raise QuoteValidationError(f"Unknown package level '{level}'", field="level")
    return DesignConfiguration.model_validate(copy.deepcopy(DEFAULT_DESIGNS[level]))


def quote_to_design_config(
    form_data: Union[IntakeForm, Dict[str, Any]], level: str = "mid"
) -> DesignConfiguration:
    """Intake form + preset level -> DesignConfiguration with the preset's SKUs."""
    form = coerce_form(form_data)
    preset = get_default_design(level)
    return DesignConfiguration(
        bathroom_type=design_bathroom_type(form.bathroom_type),
        wall_tile_coverage=derive_wall_coverage(form.wet_wall_sqft),
        bathroom_size=derive_bathroom_size(form.floor_sqft),
        items=dict(preset.items),
        included_items=preset.included_items,
    )


def build_package_options(
    form_data: Union[IntakeForm, Dict[str, Any]],
    catalog: MaterialsCatalog,
    universal_config: Optional[UniversalBathConfig] = None,
    engine: Optional[MaterialsPricingEngine] = None,
) -> List[Dict[str, Any]]:
    """Price all three presets for a quote, cheapest first."""
    engine = engine or MaterialsPricingEngine()
    options: List[Dict[str, Any]] = []

    for level in PRESET_LEVELS:
        design = quote_to_design_config(form_data, level)
        result = engine.price(design, catalog, universal_config)
        options.append({
            "level": level,
            "name": PACKAGE_NAMES[level],
            "description": PACKAGE_DESCRIPTIONS[level],
            "config": design.model_dump(by_alias=True),
            "estimatedTotal": round(result.subtotal / 100, 2),
            "subtotalCents": result.subtotal,
            "signature": result.signature,
            "warnings": [w.model_dump(by_alias=True) for w in result.warnings],
        })

    return sorted(options, key=lambda o: o["subtotalCents"])

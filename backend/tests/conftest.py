"""
conftest.py — Shared pytest fixtures for the RenoQuote backend test suite.

No live database is used. Engine tests are pure unit tests; store-facing
code runs against ``InMemoryCatalogStore``, which implements the same async
methods as ``renoquote.db.catalog_store.CatalogStore``.

Import-path bootstrapping:
    The ``backend/`` directory is inserted into sys.path so that all
    ``renoquote.*`` imports resolve correctly regardless of where pytest is
    invoked.
"""

import sys
import os
import copy
import pytest

# ---------------------------------------------------------------------------
# Ensure ``backend/`` is on the import path before any renoquote imports occur.
# ---------------------------------------------------------------------------
_BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)


# ---------------------------------------------------------------------------
# In-memory catalog store
# ---------------------------------------------------------------------------

class InMemoryCatalogStore:
    """
    Dict-backed stand-in for CatalogStore.

    ``fail`` holds method names that raise as if the database were down;
    ``fail_package_writes`` holds package ids whose save is rejected.
    """

    def __init__(self, rate_lines, multipliers, products, packages, universal_config=None):
        self.rate_lines = list(rate_lines)
        self.multipliers = list(multipliers)
        self.products = list(products)
        self.packages = {p.id: p.model_copy(deep=True) for p in packages}
        self.universal_config = universal_config
        self.fail = set()
        self.fail_package_writes = set()

    def _check(self, name):
        if name in self.fail:
            raise RuntimeError("connection refused")

    async def list_rate_lines(self):
        self._check("list_rate_lines")
        return [r.model_copy() for r in self.rate_lines]

    async def list_multipliers(self):
        self._check("list_multipliers")
        return [m.model_copy() for m in self.multipliers]

    async def list_products(self):
        self._check("list_products")
        return [p.model_copy() for p in self.products]

    async def get_universal_config(self):
        self._check("get_universal_config")
        return self.universal_config.model_copy(deep=True) if self.universal_config else None

    async def save_universal_config(self, config):
        self._check("save_universal_config")
        stamped = config.model_copy(update={"updated_at": "2026-01-01T00:00:00+00:00"})
        self.universal_config = stamped
        return stamped

    async def list_packages(self):
        self._check("list_packages")
        return [p.model_copy(deep=True) for p in sorted(self.packages.values(), key=lambda p: p.id)]

    async def get_package(self, package_id):
        from renoquote.errors import PackageNotFoundError
        self._check("get_package")
        if package_id not in self.packages:
            raise PackageNotFoundError(f"Package '{package_id}' not found")
        return self.packages[package_id].model_copy(deep=True)

    async def save_packages(self, packages):
        self._check("save_packages")
        saved, failed = [], []
        for package in packages:
            if package.id in self.fail_package_writes:
                failed.append(package.id)
                continue
            self.packages[package.id] = package.model_copy(deep=True)
            saved.append(package.id)
        return saved, failed


# ---------------------------------------------------------------------------
# Engine fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def rate_card_engine():
    """RateCardEngine is stateless; one instance serves the whole session."""
    from renoquote.services.rate_card_engine import RateCardEngine
    return RateCardEngine()


@pytest.fixture(scope="session")
def materials_engine():
    from renoquote.services.materials_engine import MaterialsPricingEngine
    return MaterialsPricingEngine()


# ---------------------------------------------------------------------------
# Rate card
# ---------------------------------------------------------------------------

@pytest.fixture
def default_rate_lines():
    """
    The seeded rate card. Values used in the arithmetic below:
      DEM 1107.00 base | PLM 307.50/point | ELE 184.50/item
      TILE-FLR 123.00 + 12.30/sqft | DUMP 184.50 + 3.69/sqft
      SUB-GRB 184.50 + 3.69/sqft | WPF-KER 246.00 + 4.92/sqft
      TILE-WET 369.00 + 12.30/sqft | TILE-DRY 12.30/sqft
      VAN 264.45 | RECESS 492.00 | ASB-T 350.00 | HEATED-FLR 800.00
    """
    from renoquote.db.seed_data import DEFAULT_RATE_LINES
    return [r.model_copy() for r in DEFAULT_RATE_LINES]


@pytest.fixture
def default_multipliers():
    """CONTINGENCY 2%, PM-FEE 0%, CONDO-FCTR 0%, OLDHOME-ASB 0%."""
    from renoquote.db.seed_data import DEFAULT_MULTIPLIERS
    return [m.model_copy() for m in DEFAULT_MULTIPLIERS]


@pytest.fixture
def scenario_form():
    """Tub & shower bathroom used by the labour quote scenario tests."""
    return {
        "bathroom_type": "tub_shower",
        "floor_sqft": 30,
        "wet_wall_sqft": 50,
        "electrical_items": 2,
        "vanity_width_in": 48,
        "upgrades": {"heated_floors": True},
    }


# ---------------------------------------------------------------------------
# Materials catalog
# ---------------------------------------------------------------------------

_PRODUCTS = [
    # mid preset
    {"sku": "FL-POR-12X24-GRY", "name": "Porcelain 12x24 Grey", "category": "floorTile", "pricePerSqft": 6.50},
    {"sku": "WL-POR-3X6-GRY", "name": "Porcelain Subway Grey", "category": "wallTile", "pricePerSqft": 4.25},
    {"sku": "SF-MOS-2X2-GRY", "name": "Mosaic 2x2 Grey", "category": "showerFloorTile", "pricePerSqft": 12.00},
    {"sku": "AC-NAT-6X12-MAR", "name": "Marble Accent 6x12", "category": "accentTile", "pricePerSqft": 18.75},
    {"sku": "VAN-36-ESP-QUA", "name": "36in Espresso Vanity", "brand": "Fairmont",
     "category": "vanity", "price": "$1,299.00", "images": ["van36.jpg"]},
    {"sku": "TUB-ALC-60-WHI", "name": "Alcove Tub 60in", "category": "tub", "price": 649.99},
    {"sku": "TF-BRU-FLR-STD", "name": "Floor Tub Filler", "category": "tubFiller", "price": 899.00},
    {"sku": "TOI-ELONG-WHI-COM", "name": "Elongated Toilet", "category": "toilet", "price": 379.50},
    {"sku": "SHO-GLZ-60-CLR", "name": "Shower System 60", "category": "shower", "price": 1150.00},
    {"sku": "FAU-BRU-SING-MID", "name": "Brushed Faucet", "category": "faucet", "price": 245.00},
    {"sku": "GLZ-FRA-CHR-STD", "name": "Framed Glass Chrome", "category": "glazing", "price": 780.00},
    {"sku": "MIR-36-REC-LED", "name": "LED Mirror 36", "category": "mirror", "price": 329.00},
    {"sku": "TB-BRU-24-STD", "name": "Towel Bar 24", "category": "towelBar", "price": 59.99},
    {"sku": "TP-BRU-STD", "name": "Paper Holder", "category": "toiletPaperHolder", "price": 34.99},
    {"sku": "HK-BRU-SING-STD", "name": "Robe Hook", "category": "hook", "price": 19.99},
    {"sku": "LIT-VAN-BRU-LED", "name": "Vanity Light", "category": "lighting", "price": 189.00},
    # budget preset
    {"sku": "FL-CER-12X12-WHI", "name": "Ceramic 12x12 White", "category": "floorTile", "pricePerSqft": 2.10},
    {"sku": "WL-CER-3X6-WHI", "name": "Ceramic Subway White", "category": "wallTile", "pricePerSqft": 1.85},
    {"sku": "VAN-24-WHI-LAM", "name": "24in Laminate Vanity", "category": "vanity", "price": 349.00},
    {"sku": "TOI-ROUND-WHI-STD", "name": "Round Toilet", "category": "toilet", "price": 189.00},
    {"sku": "FAU-CHR-SING-BAS", "name": "Chrome Faucet", "category": "faucet", "price": 79.00},
    {"sku": "MIR-24-REC-BAS", "name": "Mirror 24", "category": "mirror", "price": 59.00},
    {"sku": "LIT-VAN-CHR-BAS", "name": "Chrome Light", "category": "lighting", "price": 69.00},
    # high preset
    {"sku": "FL-NAT-12X24-MAR", "name": "Marble 12x24", "category": "floorTile", "pricePerSqft": 14.00},
    {"sku": "WL-NAT-6X12-MAR", "name": "Marble 6x12", "category": "wallTile", "pricePerSqft": 16.00},
    {"sku": "SF-NAT-HEX-MAR", "name": "Marble Hex", "category": "showerFloorTile", "pricePerSqft": 22.00},
    {"sku": "AC-NAT-12X12-VEI", "name": "Veined Accent", "category": "accentTile", "pricePerSqft": 28.00},
    {"sku": "VAN-48-WAL-QUA", "name": "48in Walnut Vanity", "category": "vanity", "price": 2890.00},
    {"sku": "SHO-CUS-72-FRA", "name": "Custom Shower 72", "category": "shower", "price": 2400.00},
    {"sku": "FAU-MAT-RAI-PRM", "name": "Matte Rain Faucet", "category": "faucet", "price": 620.00},
    {"sku": "GLZ-FRA-MAT-PRM", "name": "Frameless Matte Glass", "category": "glazing", "price": 1450.00},
    {"sku": "MIR-48-LED-BAC", "name": "Backlit Mirror 48", "category": "mirror", "price": 780.00},
    {"sku": "TB-MAT-30-PRM", "name": "Towel Bar 30", "category": "towelBar", "price": 129.00},
    {"sku": "TP-MAT-PRM", "name": "Matte Paper Holder", "category": "toiletPaperHolder", "price": 79.00},
    {"sku": "HK-MAT-DBL-PRM", "name": "Double Hook", "category": "hook", "price": 49.00},
    {"sku": "LIT-PEN-MAT-LED", "name": "Pendant Light", "category": "lighting", "price": 540.00},
]


@pytest.fixture
def sample_products():
    from renoquote.models.schemas import Product
    return [Product.model_validate(copy.deepcopy(p)) for p in _PRODUCTS]


@pytest.fixture
def materials_catalog(sample_products):
    from renoquote.services.catalog_engine import MaterialsCatalog
    return MaterialsCatalog(sample_products)


@pytest.fixture
def universal_config():
    from renoquote.services.universal_config import default_universal_config
    return default_universal_config()


@pytest.fixture
def mid_design():
    """
    Mid preset (Tub & Shower, Floor to ceiling, normal). Expected pricing
    against ``materials_catalog`` with every category included:

      floorTile        60 sqft x  6.50 =   390.00
      wallTile        130 sqft x  4.25 =   552.50
      showerFloorTile   9 sqft x 12.00 =   108.00
      accentTile       20 sqft x 18.75 =   375.00
      fixtures (12 flat prices)        = 6,035.46
      subtotal                         = 7,460.96  -> 746096 cents
    """
    from renoquote.services.design_presets import get_default_design
    return get_default_design("mid")


# ---------------------------------------------------------------------------
# Packages
# ---------------------------------------------------------------------------

_MID_ITEMS = {
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
}


def _legacy(items):
    from renoquote.config import LEGACY_SKU_FIELDS
    return {field: items.get(category) for category, field in LEGACY_SKU_FIELDS.items()}


@pytest.fixture
def full_package():
    """Every category selected; item map and legacy columns agree."""
    from renoquote.models.schemas import Package
    return Package(
        id="pkg-signature",
        name="Signature Grey",
        category="modern",
        items=dict(_MID_ITEMS),
        legacy_skus=_legacy(_MID_ITEMS),
    )


@pytest.fixture
def sample_packages(full_package):
    from renoquote.models.schemas import Package
    legacy_only = Package(
        id="pkg-legacy",
        name="Legacy Classic",
        items={},
        legacy_skus=_legacy({"floorTile": "FL-CER-12X12-WHI", "vanity": "VAN-24-WHI-LAM",
                             "tub": "TUB-ALC-60-WHI", "wallTile": "WL-CER-3X6-WHI"}),
    )
    custom = Package(id="pkg-custom", name="Mid-Range Custom Design", items={}, legacy_skus=_legacy({}))
    return [full_package, legacy_only, custom]


@pytest.fixture
def catalog_store(default_rate_lines, default_multipliers, sample_products, sample_packages):
    return InMemoryCatalogStore(default_rate_lines, default_multipliers, sample_products, sample_packages)


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------

@pytest.fixture
def client(catalog_store):
    """TestClient with the catalog store dependency swapped for the in-memory one."""
    from fastapi.testclient import TestClient
    from renoquote.api.deps import get_catalog_store
    from renoquote.main import app

    app.dependency_overrides[get_catalog_store] = lambda: catalog_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

"""FastAPI dependency injection — catalog store and shared engines."""
from functools import lru_cache

from renoquote.db.catalog_store import CatalogStore
from renoquote.services.materials_engine import MaterialsPricingEngine
from renoquote.services.rate_card_engine import RateCardEngine


@lru_cache(maxsize=1)
def get_catalog_store() -> CatalogStore:
    """Process-wide store bound to the default session factory. Overridden in tests."""
    return CatalogStore()


def get_rate_card_engine() -> RateCardEngine:
    return RateCardEngine()


def get_materials_engine() -> MaterialsPricingEngine:
    return MaterialsPricingEngine()

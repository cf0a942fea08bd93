"""Materials pricing routes — design pricing, stored packages, preset options."""
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from renoquote.api.deps import get_catalog_store, get_materials_engine
from renoquote.errors import guarded
from renoquote.models.schemas import (
    DesignConfiguration,
    IntakeForm,
    PackagePricingRequest,
)
from renoquote.services.catalog_engine import MaterialsCatalog
from renoquote.services.design_presets import build_package_options
from renoquote.services.materials_engine import MaterialsPricingEngine

router = APIRouter(tags=["Materials Pricing"])
logger = logging.getLogger("renoquote-api")


class DesignPricingRequest(BaseModel):
    design: DesignConfiguration


async def _load_catalog(store) -> MaterialsCatalog:
    products = await guarded(store.list_products(), "list_products")
    return MaterialsCatalog(products)


@router.post("/api/materials/price")
async def price_design(
    body: DesignPricingRequest,
    store=Depends(get_catalog_store),
    engine: MaterialsPricingEngine = Depends(get_materials_engine),
):
    """Price a design configuration against the current catalog snapshot."""
    catalog = await _load_catalog(store)
    universal_config = await guarded(store.get_universal_config(), "get_universal_config")
    result = engine.price(body.design, catalog, universal_config)
    return result.model_dump(by_alias=True)


@router.post("/api/packages/pricing")
async def price_stored_package(
    body: PackagePricingRequest,
    store=Depends(get_catalog_store),
    engine: MaterialsPricingEngine = Depends(get_materials_engine),
):
    """Price a stored package with measured dimensions from a quote."""
    package = await guarded(store.get_package(body.package_id), "get_package")
    catalog = await _load_catalog(store)
    universal_config = await guarded(store.get_universal_config(), "get_universal_config")

    pricing = engine.price_package(package, body, catalog, universal_config)
    payload = pricing.model_dump(by_alias=True)
    payload["calculatedAt"] = datetime.now(timezone.utc).isoformat()
    return payload


@router.post("/api/packages/options")
async def package_options(form: IntakeForm, store=Depends(get_catalog_store)):
    """Essential / Signature / Premium preset designs priced for a quote."""
    catalog = await _load_catalog(store)
    universal_config = await guarded(store.get_universal_config(), "get_universal_config")
    return {"options": build_package_options(form, catalog, universal_config)}

"""Admin settings routes — universal bathroom configuration and toggle application."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends

from renoquote.api.deps import get_catalog_store
from renoquote.errors import QuoteValidationError, guarded
from renoquote.models.schemas import CamelModel, UniversalBathConfig, UniversalToggles
from renoquote.services.toggle_applier import run_toggle_application
from renoquote.services.universal_config import (
    build_universal_toggles,
    default_universal_config,
)

router = APIRouter(prefix="/api/admin", tags=["Admin Settings"])
logger = logging.getLogger("renoquote-api")


# ─── Pydantic schemas ────────────────────────────────────────────────────────

class UniversalConfigUpdate(CamelModel):
    config: UniversalBathConfig


class ApplyTogglesRequest(CamelModel):
    """Either a ready snapshot, or the three settings to build one from."""
    universal_toggles: Optional[UniversalToggles] = None
    bathroom_type: Optional[str] = None
    wall_tile_coverage: Optional[str] = None
    bathroom_size: Optional[str] = None


# ─── Universal configuration ────────────────────────────────────────────────

@router.get("/universal-config")
async def get_universal_config(store=Depends(get_catalog_store)):
    config = await guarded(store.get_universal_config(), "get_universal_config")
    if config is None:
        return {
            "success": True,
            "config": default_universal_config().model_dump(by_alias=True, exclude_none=True),
            "isDefault": True,
        }
    return {
        "success": True,
        "config": config.model_dump(by_alias=True),
        "isDefault": False,
        "updatedAt": config.updated_at,
    }


@router.post("/universal-config")
async def save_universal_config(body: UniversalConfigUpdate, store=Depends(get_catalog_store)):
    saved = await guarded(store.save_universal_config(body.config), "save_universal_config")
    return {
        "success": True,
        "message": "Universal bathroom configuration saved successfully",
        "config": saved.model_dump(by_alias=True),
        "updatedAt": saved.updated_at,
    }


# ─── Toggle application ─────────────────────────────────────────────────────

@router.post("/apply-universal-toggles")
async def apply_universal_toggles(body: ApplyTogglesRequest, store=Depends(get_catalog_store)):
    """Rewrite every package's item selections to match the given toggles."""
    toggles = body.universal_toggles
    if toggles is None:
        if not body.bathroom_type or not body.wall_tile_coverage:
            raise QuoteValidationError(
                "universalToggles or bathroomType + wallTileCoverage is required",
                field="universalToggles",
            )
        config = await guarded(store.get_universal_config(), "get_universal_config")
        toggles = build_universal_toggles(
            config or default_universal_config(),
            body.bathroom_type,
            body.wall_tile_coverage,
            body.bathroom_size,
        )

    result = await run_toggle_application(store, toggles)
    return result.model_dump(by_alias=True)

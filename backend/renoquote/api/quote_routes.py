"""Labour quote routes — calculate, quantity preview, rate card health."""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Request

from renoquote.api.deps import get_catalog_store, get_rate_card_engine
from renoquote.errors import guarded
from renoquote.models.schemas import IntakeForm, ProjectMultiplier, RateLine
from renoquote.services.form_mapper import map_form_to_quantities
from renoquote.services.rate_card_engine import (
    RateCardEngine,
    find_missing_rate_codes,
    rate_card_version,
)

router = APIRouter(prefix="/api/quotes", tags=["Labour Quotes"])
logger = logging.getLogger("renoquote-api")


@router.post("/calculate")
async def calculate_quote(
    form: IntakeForm,
    request: Request,
    store=Depends(get_catalog_store),
    engine: RateCardEngine = Depends(get_rate_card_engine),
):
    """Price an intake form against the current rate card."""
    quote = await engine.calculate(form, store)
    logger.info(
        "quote calculated",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "quote_ref": form.quote_name,
        },
    )
    return {
        "quote": quote.model_dump(mode="json"),
        "calculated_at": datetime.now(timezone.utc).isoformat(),
    }


@router.post("/map-quantities")
async def map_quantities(form: IntakeForm):
    """Quantity map and metadata for a form, without pricing."""
    quantities, meta = map_form_to_quantities(form)
    return {"quantities": quantities, "meta": meta}


@router.get("/rate-card")
async def get_rate_card(store=Depends(get_catalog_store)) -> Dict[str, Any]:
    """Current rate lines, multipliers and the codes a complete card still lacks."""
    rates: List[RateLine] = await guarded(store.list_rate_lines(), "list_rate_lines")
    multipliers: List[ProjectMultiplier] = await guarded(store.list_multipliers(), "list_multipliers")
    missing = find_missing_rate_codes(rates)
    if missing:
        logger.warning("Rate card missing required codes: %s", ", ".join(missing))
    return {
        "rate_lines": [r.model_dump() for r in rates],
        "multipliers": [m.model_dump() for m in multipliers],
        "rate_card_version": rate_card_version(rates, multipliers),
        "missing_required_codes": missing,
    }

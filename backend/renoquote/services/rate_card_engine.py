"""
rate_card_engine.py — Labour quote pricing against the editable rate card.

Pipeline:
  1. form_mapper turns the intake form into a quantity map (validation here)
  2. the current rate lines and project multipliers are read from the
     catalog store (the only suspension point)
  3. each quantity code is priced against its active rate line
  4. project multipliers are applied in a fixed order

Extended cost per line:
    extended = base_price * [base_applied] + price_per_unit * quantity
    base_applied = rate.apply_base and quantity > 0 and base_price > 0

Totals:
    contingency    = subtotal * CONTINGENCY%
    condo_uplift   = subtotal * CONDO-FCTR%    (condo buildings only)
    oldhome_uplift = subtotal * OLDHOME-ASB%   (pre-1980 builds only)
    pm_fee         = (subtotal + contingency + condo + oldhome) * PM-FEE%
    grand_total    = subtotal + contingency + condo + oldhome + pm_fee

A quantity code with no active rate line is omitted from the quote and
listed in calculation_meta.omitted_codes. A missing multiplier row
contributes zero.
"""

import hashlib
import json
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from renoquote.config import (
    CONDO_CODE,
    CONTINGENCY_CODE,
    OLDHOME_CODE,
    PM_FEE_CODE,
    REQUIRED_RATE_CODES,
)
from renoquote.errors import guarded
from renoquote.models.schemas import (
    CalculatedQuote,
    CalculationMeta,
    IntakeForm,
    LineItem,
    ProjectMultiplier,
    QuoteTotals,
    RateLine,
)
from renoquote.services.form_mapper import coerce_form, map_form_to_quantities

logger = logging.getLogger("renoquote.pricing")


def active_rate_index(rates: Iterable[RateLine]) -> Dict[str, RateLine]:
    """line_code -> active RateLine. Inactive rows are invisible to pricing."""
    index: Dict[str, RateLine] = {}
    for rate in rates:
        if rate.active and rate.line_code not in index:
            index[rate.line_code] = rate
    return index


def find_missing_rate_codes(rates: Iterable[RateLine]) -> List[str]:
    """Required codes that are missing or inactive, in REQUIRED_RATE_CODES order."""
    index = active_rate_index(rates)
    return [code for code in REQUIRED_RATE_CODES if code not in index]


def rate_card_version(rates: Iterable[RateLine], multipliers: Iterable[ProjectMultiplier]) -> str:
    """Stable content hash of the active rate lines and all multipliers."""
    payload = {
        "rates": sorted(
            (r.model_dump() for r in rates if r.active),
            key=lambda r: r["line_code"],
        ),
        "multipliers": sorted(
            (m.model_dump() for m in multipliers),
            key=lambda m: m["code"],
        ),
    }
    blob = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(blob.encode("utf-8")).hexdigest()[:12]


class RateCardEngine:
    """Prices a labour quantity map against a rate card snapshot."""

    # -----------------------------------------------------------------------
    # Line pricing
    # -----------------------------------------------------------------------

    def price_line(self, rate: RateLine, quantity: float) -> LineItem:
        base_applied = bool(rate.apply_base and quantity > 0 and rate.base_price > 0)
        extended = (rate.base_price if base_applied else 0.0) + rate.price_per_unit * quantity
        return LineItem(
            line_code=rate.line_code,
            line_name=rate.line_name,
            quantity=quantity,
            unit=rate.unit,
            unit_price=round(rate.price_per_unit, 2),
            base_applied=base_applied,
            extended=round(max(extended, 0.0), 2),
        )

    def price_lines(
        self,
        quantities: Dict[str, float],
        rates: Iterable[RateLine],
        quote_ref: Optional[str] = None,
    ) -> Tuple[List[LineItem], List[str]]:
        """Return (line_items sorted by code, omitted codes sorted)."""
        index = active_rate_index(rates)
        line_items: List[LineItem] = []
        omitted: List[str] = []

        for code in sorted(quantities):
            rate = index.get(code)
            if rate is None:
                omitted.append(code)
                continue
            line_items.append(self.price_line(rate, quantities[code]))

        if omitted:
            logger.warning(
                "Rate lines missing or inactive, omitted from quote: %s",
                ", ".join(omitted),
                extra={"quote_ref": quote_ref},
            )
        return line_items, omitted

    # -----------------------------------------------------------------------
    # Multipliers
    # -----------------------------------------------------------------------

    @staticmethod
    def _percent(multipliers: Dict[str, ProjectMultiplier], code: str) -> float:
        row = multipliers.get(code)
        return float(row.default_percent) / 100.0 if row else 0.0

    def compute_totals(
        self,
        labour_subtotal: float,
        building_type: str,
        year_built: str,
        multipliers: Iterable[ProjectMultiplier],
    ) -> QuoteTotals:
        by_code = {m.code: m for m in multipliers}
        subtotal = round(labour_subtotal, 2)

        contingency = round(subtotal * self._percent(by_code, CONTINGENCY_CODE), 2)
        condo_uplift = (
            round(subtotal * self._percent(by_code, CONDO_CODE), 2)
            if building_type == "condo" else 0.0
        )
        oldhome_uplift = (
            round(subtotal * self._percent(by_code, OLDHOME_CODE), 2)
            if year_built == "pre_1980" else 0.0
        )
        pm_base = subtotal + contingency + condo_uplift + oldhome_uplift
        pm_fee = round(pm_base * self._percent(by_code, PM_FEE_CODE), 2)

        grand_total = round(subtotal + contingency + condo_uplift + oldhome_uplift + pm_fee, 2)
        return QuoteTotals(
            labour_subtotal=subtotal,
            contingency=contingency,
            condo_uplift=condo_uplift,
            oldhome_uplift=oldhome_uplift,
            pm_fee=pm_fee,
            grand_total=grand_total,
        )

    # -----------------------------------------------------------------------
    # Whole quote
    # -----------------------------------------------------------------------

    def build_quote(
        self,
        form: IntakeForm,
        rates: List[RateLine],
        multipliers: List[ProjectMultiplier],
    ) -> CalculatedQuote:
        """Pure pricing of a validated form against a rate card snapshot."""
        quantities, meta = map_form_to_quantities(form)
        line_items, omitted = self.price_lines(quantities, rates, quote_ref=form.quote_name)

        subtotal = sum(item.extended for item in line_items)
        totals = self.compute_totals(subtotal, form.building_type, form.year_built, multipliers)

        return CalculatedQuote(
            line_items=line_items,
            totals=totals,
            calculation_meta=CalculationMeta(
                rate_card_version=rate_card_version(rates, multipliers),
                omitted_codes=omitted,
                **meta,
            ),
            raw_form_data=form.model_dump(mode="json"),
        )

    async def calculate(self, form_data: Union[IntakeForm, Dict[str, Any]], store) -> CalculatedQuote:
        """
        Validate, fetch the rate card from ``store`` and price the form.

        Validation runs before any store access. Store failures surface as
        CatalogStoreError; nothing is partially returned.
        """
        form = coerce_form(form_data)
        map_form_to_quantities(form)

        rates = await guarded(store.list_rate_lines(), "list_rate_lines")
        multipliers = await guarded(store.list_multipliers(), "list_multipliers")

        quote = self.build_quote(form, rates, multipliers)
        logger.info(
            "Labour quote calculated: %d lines, grand_total=%.2f",
            len(quote.line_items),
            quote.totals.grand_total,
            extra={
                "quote_ref": form.quote_name,
                "rate_card_version": quote.calculation_meta.rate_card_version,
            },
        )
        return quote

from typing import Any, Dict, Iterable, List, Optional, Union
import hashlib
import json
import logging

import pandas as pd

from renoquote.models.schemas import Product

logger = logging.getLogger("renoquote.materials")

PRODUCT_COLUMNS: List[str] = list(Product.model_fields)


def normalize_sku(sku: Optional[str]) -> str:
    return (sku or "").strip().upper()


class MaterialsCatalog:
    """
    Immutable SKU-indexed snapshot of the materials catalog.

    Callers fetch one snapshot per pricing call and pass it in; the pricing
    engines never read the store themselves. Lookups are case-insensitive.
    """

    def __init__(self, products: Iterable[Union[Product, Dict[str, Any]]] = ()):
        validated = [
            p if isinstance(p, Product) else Product.model_validate(p)
            for p in products
        ]
        frame = pd.DataFrame(
            [p.model_dump() for p in validated], columns=PRODUCT_COLUMNS
        )
        frame["sku_key"] = frame["sku"].map(normalize_sku)
        duplicated = frame["sku_key"].duplicated(keep="first")
        if duplicated.any():
            logger.warning(
                "Duplicate SKUs in catalog snapshot, keeping first: %s",
                ", ".join(sorted(set(frame.loc[duplicated, "sku_key"]))),
            )
        # sku_key is the index for O(1) lookup
        self._lookup = frame.loc[~duplicated].set_index("sku_key")
        self.version = self._content_hash(validated)

    @staticmethod
    def _content_hash(products: List[Product]) -> str:
        rows = sorted(
            (p.model_dump(mode="json") for p in products),
            key=lambda row: normalize_sku(row["sku"]),
        )
        blob = json.dumps(rows, sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(blob.encode("utf-8")).hexdigest()[:12]

    def __len__(self) -> int:
        return len(self._lookup)

    def __contains__(self, sku: object) -> bool:
        return isinstance(sku, str) and normalize_sku(sku) in self._lookup.index

    def lookup(self, sku: Optional[str]) -> Optional[Product]:
        key = normalize_sku(sku)
        if not key or key not in self._lookup.index:
            return None
        row = self._lookup.loc[key].to_dict()
        return Product.model_validate(
            {k: (None if _is_missing(v) else v) for k, v in row.items()}
        )


def _is_missing(value: Any) -> bool:
    if isinstance(value, (list, tuple, dict)):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False

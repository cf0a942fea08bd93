"""Error taxonomy shared by engines, the catalog store and the API layer."""
import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from renoquote.config import CATALOG_FETCH_TIMEOUT_S

logger = logging.getLogger("renoquote-db")

T = TypeVar("T")


class QuoteValidationError(ValueError):
    """A field required for the current calculation is missing or invalid."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class CatalogStoreError(RuntimeError):
    """Catalog Store read/write failed or timed out; fatal to the current call."""


class PackageNotFoundError(LookupError):
    pass


async def guarded(call: Awaitable[T], operation: str, timeout: Optional[float] = None) -> T:
    """
    Await a catalog store call under the fetch deadline. Any failure other
    than the domain errors above becomes a CatalogStoreError.
    """
    try:
        return await asyncio.wait_for(call, timeout or CATALOG_FETCH_TIMEOUT_S)
    except (CatalogStoreError, PackageNotFoundError, QuoteValidationError):
        raise
    except asyncio.TimeoutError as exc:
        logger.error("Catalog store call timed out: %s", operation)
        raise CatalogStoreError(f"{operation} timed out") from exc
    except Exception as exc:
        logger.exception("Catalog store call failed: %s", operation)
        raise CatalogStoreError(f"{operation} failed: {exc}") from exc

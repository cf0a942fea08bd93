"""
toggle_applier.py — Push a universal toggle snapshot onto every package.

The transform is pure: (toggles, packages) -> new packages. Persistence is
a separate step so each package can be committed (or rolled back) alone.

Per category:
  bathroom-type group (tub, tubFiller, shower, glazing) and wall-tile group
  (wallTile, accentTile) are destructive:
      included, SKU known   -> item map and legacy column both hold the SKU
      included, no SKU      -> item removed, legacy column nulled
      excluded              -> item removed, legacy column nulled
  Coverage "None" excludes the wall-tile group whatever its toggle says.

  every other category only edits the item map:
      included  -> copy the legacy SKU into the item map when one exists
      excluded  -> drop the item; the legacy column is left alone

Afterwards the package carries the applied UNIVERSAL_TOGGLES snapshot and
the wall tile multiplier of the applied coverage. Applying the same toggles
twice leaves the package unchanged.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import Field

from renoquote.config import (
    BATHROOM_TYPE_CATEGORIES,
    GENERIC_CATEGORIES,
    LEGACY_SKU_FIELDS,
    WALL_TILE_CATEGORIES,
)
from renoquote.errors import guarded
from renoquote.models.schemas import (
    CamelModel,
    DesignConfiguration,
    Package,
    UniversalBathConfig,
    UniversalToggles,
)
from renoquote.services.inclusion_policy import should_include
from renoquote.services.universal_config import coverage_multiplier

logger = logging.getLogger("renoquote.toggles")


class ToggleRunResult(CamelModel):
    success: bool
    packages_updated: int
    packages_failed: int = 0
    failed_package_ids: List[str] = Field(default_factory=list)
    applied_settings: Dict[str, Any] = Field(default_factory=dict)


def _toggle_design(toggles: UniversalToggles) -> DesignConfiguration:
    return DesignConfiguration(
        bathroom_type=toggles.bathroom_type,
        wall_tile_coverage=toggles.wall_tile_coverage,
        bathroom_size=toggles.bathroom_size or "normal",
        included_items=dict(toggles.included_items),
    )


def _apply_destructive(package: Package, category: str, included: bool) -> None:
    field = LEGACY_SKU_FIELDS[category]
    source = package.legacy_skus.get(field) or package.items.get(category)
    if included and source:
        package.items[category] = source
        package.legacy_skus[field] = source
    else:
        package.items.pop(category, None)
        package.legacy_skus[field] = None


def _apply_generic(package: Package, category: str, included: bool) -> None:
    legacy = package.legacy_skus.get(LEGACY_SKU_FIELDS[category])
    if included:
        if legacy:
            package.items[category] = legacy
    else:
        package.items.pop(category, None)


def apply_toggles_to_package(
    package: Package,
    toggles: UniversalToggles,
    universal_config: Optional[UniversalBathConfig] = None,
) -> Package:
    """Return an updated copy of ``package``; the input is never mutated."""
    updated = package.model_copy(deep=True)
    design = _toggle_design(toggles)
    no_wall_tile = toggles.wall_tile_coverage == "None"

    for category in BATHROOM_TYPE_CATEGORIES:
        _apply_destructive(updated, category, should_include(category, design, universal_config))

    for category in WALL_TILE_CATEGORIES:
        included = not no_wall_tile and should_include(category, design, universal_config)
        _apply_destructive(updated, category, included)

    for category in GENERIC_CATEGORIES:
        _apply_generic(updated, category, should_include(category, design, universal_config))

    updated.universal_toggles = toggles.model_dump(by_alias=True)
    updated.wall_tile_multiplier = coverage_multiplier(universal_config, toggles.wall_tile_coverage)
    return updated


def apply_to_all(
    toggles: UniversalToggles,
    packages: List[Package],
    universal_config: Optional[UniversalBathConfig] = None,
) -> Tuple[List[Package], List[str]]:
    """
    Transform every package. A package that fails is left out of the result
    (its stored row stays as it was) and its id is reported.
    """
    updated: List[Package] = []
    failed: List[str] = []
    for package in packages:
        try:
            updated.append(apply_toggles_to_package(package, toggles, universal_config))
        except Exception:
            logger.exception("Toggle application failed", extra={"package_id": package.id})
            failed.append(package.id)
    return updated, failed


async def run_toggle_application(store, toggles: UniversalToggles) -> ToggleRunResult:
    """
    Read packages and the universal config, transform, then persist each
    package in isolation. Store read failures abort the run; per-package
    write failures are counted.
    """
    universal_config = await guarded(store.get_universal_config(), "get_universal_config")
    packages = await guarded(store.list_packages(), "list_packages")

    transformed, failed = apply_to_all(toggles, packages, universal_config)
    saved, write_failed = await guarded(store.save_packages(transformed), "save_packages")
    failed_ids = failed + write_failed

    logger.info(
        "Universal toggles applied: %d updated, %d failed",
        len(saved), len(failed_ids),
    )
    return ToggleRunResult(
        success=True,
        packages_updated=len(saved),
        packages_failed=len(failed_ids),
        failed_package_ids=failed_ids,
        applied_settings=toggles.model_dump(by_alias=True),
    )

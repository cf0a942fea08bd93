"""
Catalog Store — async reads/writes of rate lines, multipliers, products,
packages and the universal configuration.

Every method returns pydantic domain models, never ORM rows. Callers wrap
calls in ``renoquote.errors.guarded`` so that timeouts and driver errors
surface as CatalogStoreError.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from renoquote.config import LEGACY_SKU_FIELDS
from renoquote.db import AsyncSessionLocal
from renoquote.errors import PackageNotFoundError
from renoquote.models.orm_models import (
    PACKAGE_LEGACY_ATTRS,
    PackageRow,
    ProductRow,
    ProjectMultiplierRow,
    RateLineRow,
    UniversalBathConfigRow,
)
from renoquote.models.schemas import (
    Package,
    Product,
    ProjectMultiplier,
    RateLine,
    UniversalBathConfig,
)

logger = logging.getLogger("renoquote-db")

UNIVERSAL_CONFIG_ROW_ID = 1


# ── Row <-> model conversion ─────────────────────────────────────────────────

def package_from_row(row: PackageRow) -> Package:
    return Package(
        id=row.id,
        name=row.name,
        category=row.category or "",
        items=dict(row.items or {}),
        legacy_skus={
            column: getattr(row, attr) for column, attr in PACKAGE_LEGACY_ATTRS.items()
        },
        universal_toggles=row.universal_toggles,
        wall_tile_multiplier=float(row.wall_tile_multiplier if row.wall_tile_multiplier is not None else 1.0),
    )


def write_package_to_row(package: Package, row: PackageRow) -> None:
    row.items = dict(package.items)
    for column in LEGACY_SKU_FIELDS.values():
        setattr(row, PACKAGE_LEGACY_ATTRS[column], package.legacy_skus.get(column))
    row.universal_toggles = package.universal_toggles
    row.wall_tile_multiplier = package.wall_tile_multiplier


class CatalogStore:
    def __init__(self, session_factory: async_sessionmaker = AsyncSessionLocal):
        self._session_factory = session_factory

    # ── Labour rate card ──────────────────────────────────────────────────────

    async def list_rate_lines(self) -> List[RateLine]:
        async with self._session_factory() as session:
            rows = (await session.execute(
                select(RateLineRow).order_by(RateLineRow.line_code)
            )).scalars().all()
        return [
            RateLine(
                line_code=r.line_code,
                line_name=r.line_name,
                unit=r.unit,
                base_price=float(r.base_price or 0),
                price_per_unit=float(r.price_per_unit or 0),
                notes=r.notes,
                active=bool(r.active),
                apply_base=bool(r.apply_base),
            )
            for r in rows
        ]

    async def list_multipliers(self) -> List[ProjectMultiplier]:
        async with self._session_factory() as session:
            rows = (await session.execute(
                select(ProjectMultiplierRow).order_by(ProjectMultiplierRow.code)
            )).scalars().all()
        return [
            ProjectMultiplier(
                code=r.code,
                name=r.name,
                basis=r.basis,
                default_percent=float(r.default_percent or 0),
            )
            for r in rows
        ]

    # ── Materials ─────────────────────────────────────────────────────────────

    async def list_products(self) -> List[Product]:
        async with self._session_factory() as session:
            rows = (await session.execute(
                select(ProductRow).order_by(ProductRow.sku)
            )).scalars().all()
        return [
            Product(
                sku=r.sku,
                name=r.name,
                brand=r.brand,
                category=r.category,
                price=r.price,
                price_per_sqft=r.price_per_sqft,
                cost=r.cost,
                cost_per_sqft=r.cost_per_sqft,
                description=r.description,
                images=list(r.images or []),
            )
            for r in rows
        ]

    # ── Universal configuration ───────────────────────────────────────────────

    async def get_universal_config(self) -> Optional[UniversalBathConfig]:
        """The saved configuration, or None when no row exists."""
        async with self._session_factory() as session:
            row = await session.get(UniversalBathConfigRow, UNIVERSAL_CONFIG_ROW_ID)
        if row is None:
            return None
        config = UniversalBathConfig.model_validate(row.config)
        if row.updated_at is not None:
            config.updated_at = row.updated_at.isoformat()
        return config

    async def save_universal_config(self, config: UniversalBathConfig) -> UniversalBathConfig:
        """Upsert row id=1 and stamp updatedAt. Last writer wins."""
        now = datetime.now(timezone.utc)
        stamped = config.model_copy(update={"updated_at": now.isoformat()})
        async with self._session_factory() as session:
            async with session.begin():
                row = await session.get(UniversalBathConfigRow, UNIVERSAL_CONFIG_ROW_ID)
                payload = stamped.model_dump(by_alias=True, mode="json")
                if row is None:
                    session.add(UniversalBathConfigRow(
                        id=UNIVERSAL_CONFIG_ROW_ID, config=payload, updated_at=now,
                    ))
                else:
                    row.config = payload
                    row.updated_at = now
        logger.info("Universal configuration saved")
        return stamped

    # ── Packages ──────────────────────────────────────────────────────────────

    async def list_packages(self) -> List[Package]:
        async with self._session_factory() as session:
            rows = (await session.execute(
                select(PackageRow).order_by(PackageRow.id)
            )).scalars().all()
        return [package_from_row(r) for r in rows]

    async def get_package(self, package_id: str) -> Package:
        async with self._session_factory() as session:
            row = await session.get(PackageRow, package_id)
        if row is None:
            raise PackageNotFoundError(f"Package '{package_id}' not found")
        return package_from_row(row)

    async def save_packages(self, packages: List[Package]) -> Tuple[List[str], List[str]]:
        """
        Persist packages, each inside its own savepoint. A package whose
        write fails is rolled back alone. Returns (saved ids, failed ids).
        """
        saved: List[str] = []
        failed: List[str] = []
        async with self._session_factory() as session:
            async with session.begin():
                for package in packages:
                    try:
                        async with session.begin_nested():
                            await self._write_package(session, package)
                        saved.append(package.id)
                    except Exception:
                        logger.exception(
                            "Package write failed, row left unchanged",
                            extra={"package_id": package.id},
                        )
                        failed.append(package.id)
        return saved, failed

    @staticmethod
    async def _write_package(session: AsyncSession, package: Package) -> None:
        row = await session.get(PackageRow, package.id)
        if row is None:
            row = PackageRow(id=package.id, name=package.name, category=package.category)
            session.add(row)
        write_package_to_row(package, row)
        await session.flush()

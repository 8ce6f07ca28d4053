"""Business repository (BusinessStore) with atomic find-or-create."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.business import BusinessCreate, BusinessResult
from app.domain.enums import SubscriptionTier
from app.domain.exceptions import StorageFailureException
from app.domain.value_objects import normalize_email
from app.infrastructure.persistence.models.business import Business
from app.infrastructure.persistence.repositories.base import BaseRepository, storage_errors
from app.shared.utils.generators import generate_cuid


def _business_to_result(b: Business) -> BusinessResult:
    """Map ORM Business to application BusinessResult."""
    return BusinessResult(
        id=b.id,
        business_email=b.business_email,
        business_name=b.business_name,
        owner_name=b.owner_name,
        subscription_tier=SubscriptionTier(b.subscription_tier),
        is_email_verified=b.is_email_verified,
    )


class BusinessRepository(BaseRepository[Business]):
    """Business repository. business_email is unique; get_or_create relies on that constraint."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Business)

    async def _get_by_email(self, business_email: str) -> Business | None:
        result = await self.db.execute(
            select(Business).where(Business.business_email == normalize_email(business_email))
        )
        return result.scalar_one_or_none()

    async def find_by_email(self, business_email: str) -> BusinessResult | None:
        with storage_errors("business.find_by_email"):
            business = await self._get_by_email(business_email)
        return _business_to_result(business) if business else None

    async def get_by_id(self, business_id: str) -> BusinessResult | None:
        with storage_errors("business.get_by_id"):
            business = await self.get_entity(business_id)
        return _business_to_result(business) if business else None

    async def get_or_create(self, data: BusinessCreate) -> tuple[BusinessResult, bool]:
        """INSERT ... ON CONFLICT (business_email) DO NOTHING, then read the row back.

        A conflict means another request (or an earlier upgrade) already
        registered the email; that row is reused.
        """
        email = normalize_email(data.business_email)
        stmt = (
            pg_insert(Business)
            .values(
                id=generate_cuid(),
                business_email=email,
                business_name=data.business_name,
                owner_name=data.owner_name,
                subscription_tier=data.subscription_tier.value,
                is_email_verified=data.is_email_verified,
            )
            .on_conflict_do_nothing(index_elements=[Business.business_email])
            .returning(Business.id)
        )
        with storage_errors("business.get_or_create"):
            inserted_id = (await self.db.execute(stmt)).scalar_one_or_none()
            business = await self._get_by_email(email)
        if business is None:
            raise StorageFailureException(
                "business.get_or_create", "business row missing after upsert"
            )
        return _business_to_result(business), inserted_id is not None

    async def lock(self, business_id: str) -> BusinessResult | None:
        """SELECT ... FOR UPDATE on the business row (held until the transaction ends)."""
        with storage_errors("business.lock"):
            result = await self.db.execute(
                select(Business).where(Business.id == business_id).with_for_update()
            )
            business = result.scalar_one_or_none()
        return _business_to_result(business) if business else None

    async def delete(self, business_id: str) -> bool:
        with storage_errors("business.delete"):
            result = await self.db.execute(delete(Business).where(Business.id == business_id))
        return bool(result.rowcount)

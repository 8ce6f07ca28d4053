"""Account API: personal <-> business tenancy transitions."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import CurrentIdentity, get_tenancy_migrator
from app.application.services import TenancyMigrator
from app.core.limiter import limit_writes
from app.schemas.account import BusinessResponse, DowngradeResponse, UpgradeResponse

router = APIRouter()


@router.post("/upgrade", response_model=UpgradeResponse)
@limit_writes
async def upgrade(
    request: Request,
    identity: CurrentIdentity,
    migrator: Annotated[TenancyMigrator, Depends(get_tenancy_migrator)],
):
    """Upgrade a personal account to a business (reusing a business registered to the email)."""
    business = await migrator.upgrade(identity)
    return UpgradeResponse(business=BusinessResponse.model_validate(business))


@router.post("/downgrade", response_model=DowngradeResponse)
@limit_writes
async def downgrade(
    request: Request,
    identity: CurrentIdentity,
    migrator: Annotated[TenancyMigrator, Depends(get_tenancy_migrator)],
):
    """Downgrade to a personal account. 409 while other team members exist."""
    await migrator.downgrade(identity)
    return DowngradeResponse()

"""
Tenant Endpoints

Subscription management. Only admins may upgrade, and only their own
tenant: the tenant comes from the token, the {slug} in the path is there
for readable URLs and is never used to pick the tenant.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from notes_api.api.deps import require_admin
from notes_api.core.exceptions import TenantNotFoundError
from notes_api.database import get_db
from notes_api.models.tenant import Tenant
from notes_api.schemas.auth import Identity
from notes_api.schemas.tenant import TenantResponse, UpgradeResponse
from notes_api.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/tenants", tags=["tenants"])


@router.post("/{slug}/upgrade", response_model=UpgradeResponse)
async def upgrade_subscription(
    slug: str,
    identity: Identity = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Upgrade the caller's tenant to the pro plan."""
    tenant = db.query(Tenant).filter(Tenant.id == identity.tenant_id).first()
    if not tenant:
        raise TenantNotFoundError()

    if slug != tenant.slug:
        logger.info(
            f"Upgrade path slug '{slug}' differs from caller tenant '{tenant.slug}'; "
            f"upgrading caller tenant"
        )

    tenant.upgrade()
    db.commit()
    db.refresh(tenant)

    logger.info(f"Tenant upgraded to pro: {tenant.id} by {identity.user_id}")

    return UpgradeResponse(
        message="Subscription Plan upgraded to Pro successfully.",
        tenant=TenantResponse.model_validate(tenant)
    )

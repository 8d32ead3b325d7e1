"""
Subscription Gate

Enforces the free-plan note cap before a note is created.

KNOWN LIMITATION: the count and the subsequent insert are separate
statements with no lock between them. Two creates racing at the boundary
can both pass and leave a free tenant with one note over the cap.
"""
from sqlalchemy import func
from sqlalchemy.orm import Session

from notes_api.core.exceptions import NoteLimitExceeded, TenantNotFoundError
from notes_api.models.note import Note
from notes_api.models.tenant import Tenant


def count_notes(db: Session, tenant_id: str) -> int:
    return db.query(func.count(Note.id)).filter(Note.tenant_id == tenant_id).scalar() or 0


def check_note_limit(db: Session, tenant_id: str) -> Tenant:
    """
    Allow note creation for tenant_id or raise.

    Raises TenantNotFoundError if the tenant is gone and NoteLimitExceeded
    if the plan's cap is already reached. Returns the loaded tenant.
    """
    tenant = db.query(Tenant).filter(Tenant.id == tenant_id).first()
    if not tenant:
        raise TenantNotFoundError()

    limit = tenant.note_limit
    if limit is None:
        return tenant

    if count_notes(db, tenant_id) >= limit:
        raise NoteLimitExceeded()

    return tenant

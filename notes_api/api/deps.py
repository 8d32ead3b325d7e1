"""
API Dependencies

Reusable FastAPI dependencies that form the request pipeline:

    get_current_identity  (bearer token -> Identity, no DB access)
      -> require_admin       (tenant upgrade only)
      -> enforce_note_limit  (note creation only)
      -> route handler

Settings and the database come from app.state (see main.create_app), so
handlers never touch module-level singletons.
"""
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from notes_api.config import Settings
from notes_api.database import get_db
from notes_api.core import permissions
from notes_api.core.exceptions import AuthenticationError, NoteLimitExceeded, PermissionDenied
from notes_api.core.security import decode_access_token
from notes_api.core.subscription import check_note_limit
from notes_api.models.tenant import Tenant
from notes_api.schemas.auth import Identity
from notes_api.utils.logging import get_logger, log_security_event

logger = get_logger(__name__)

# auto_error=False so a missing header produces our own 401 body
# instead of FastAPI's default 403
bearer_scheme = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_current_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_app_settings)
) -> Identity:
    """
    Authenticate the request from its bearer token.

    Pure verification: checks signature and expiry and reads the
    userId/role/tenantId claims. The tenant every handler scopes to comes
    from here and nowhere else.
    """
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise AuthenticationError("Authentication token required")

    payload = decode_access_token(
        credentials.credentials,
        settings.JWT_SECRET,
        settings.JWT_ALGORITHM
    )
    identity = Identity.from_claims(payload) if payload else None

    if identity is None:
        log_security_event(
            "invalid_token",
            {"path": request.url.path, "client": request.client.host if request.client else None},
            logger
        )
        raise AuthenticationError("Invalid token")

    request.state.identity = identity
    return identity


def require_admin(
    identity: Identity = Depends(get_current_identity)
) -> Identity:
    """Require the admin role. Use for admin-only endpoints."""
    try:
        permissions.require_admin(identity)
    except PermissionDenied:
        log_security_event(
            "forbidden",
            {"user_id": identity.user_id, "tenant_id": identity.tenant_id},
            logger
        )
        raise
    return identity


def enforce_note_limit(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
) -> Tenant:
    """Subscription gate in front of note creation."""
    try:
        return check_note_limit(db, identity.tenant_id)
    except NoteLimitExceeded:
        log_security_event(
            "note_limit_reached",
            {"user_id": identity.user_id, "tenant_id": identity.tenant_id},
            logger
        )
        raise

"""
Permission Checks

Two roles only: admin and member. Admin is required solely for changing
the tenant's subscription; both roles have full CRUD on their tenant's notes.
"""
from notes_api.core.exceptions import PermissionDenied
from notes_api.models.user import UserRole
from notes_api.schemas.auth import Identity


def require_admin(identity: Identity) -> None:
    """Raise PermissionDenied unless the caller is an admin."""
    if identity.role != UserRole.ADMIN:
        raise PermissionDenied()

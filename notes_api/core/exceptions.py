"""
Custom Exceptions

Centralized exception definitions for better error handling.
The handlers in main.py turn every HTTPException into a {"message": ...} body.
"""
from fastapi import HTTPException, status


class AuthenticationError(HTTPException):
    """Raised when credentials or the bearer token are missing or invalid."""

    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class PermissionDenied(HTTPException):
    """Raised when the caller's role does not allow the operation."""

    def __init__(self, detail: str = "Forbidden: Admins only"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail
        )


class NoteLimitExceeded(HTTPException):
    """
    Raised when a free-plan tenant is already at its note cap.

    Shares the 403 status with PermissionDenied; clients tell them apart
    by the message.
    """

    def __init__(self, detail: str = "Note limit reached. Please upgrade to the Pro plan."):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail
        )


class TenantNotFoundError(HTTPException):
    """Raised when the caller's tenant cannot be found."""

    def __init__(self):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Tenant not found"
        )


class NoteNotFoundError(HTTPException):
    """
    Raised when a note is absent OR belongs to another tenant.

    Both cases look the same to the caller so note ids never leak
    across tenants.
    """

    def __init__(self):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Note not found"
        )

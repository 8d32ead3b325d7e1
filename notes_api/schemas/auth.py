"""
Authentication Schemas

Request/response models for authentication, plus the Identity carried
by a verified bearer token.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, ValidationError

from notes_api.models.user import UserRole


class LoginRequest(BaseModel):
    """Login request body."""
    # Plain str rather than EmailStr: seeded accounts use reserved
    # domains such as acme.test, which email-validator refuses.
    # No length rules either; a malformed credential is still just a wrong
    # one and must answer 401, not 422.
    email: str
    password: str

    class Config:
        json_schema_extra = {
            "example": {
                "email": "admin@acme.test",
                "password": "password"
            }
        }


class TokenResponse(BaseModel):
    """JWT token response."""
    token: str


class Identity(BaseModel):
    """Decoded token claims: who is calling and for which tenant."""
    user_id: str
    role: UserRole
    tenant_id: str

    class Config:
        frozen = True

    def to_claims(self) -> Dict[str, Any]:
        return {
            "userId": self.user_id,
            "role": self.role.value,
            "tenantId": self.tenant_id,
        }

    @classmethod
    def from_claims(cls, payload: Dict[str, Any]) -> Optional["Identity"]:
        """Build an Identity from a JWT payload; None if claims are missing or malformed."""
        try:
            return cls(
                user_id=payload.get("userId"),
                role=payload.get("role"),
                tenant_id=payload.get("tenantId"),
            )
        except ValidationError:
            return None

"""
Authentication Endpoints

Login by email and password. Email is unique across tenants, so the
user's tenant is found from the user row, not from the request.
"""
from datetime import timedelta

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from notes_api.api.deps import get_app_settings
from notes_api.config import Settings
from notes_api.core.exceptions import AuthenticationError
from notes_api.core.security import create_access_token, dummy_verify, verify_password
from notes_api.database import get_db
from notes_api.models.user import User
from notes_api.schemas.auth import Identity, LoginRequest, TokenResponse
from notes_api.utils.logging import get_logger, log_security_event

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings)
):
    """
    Authenticate user and return a JWT.

    Unknown email and wrong password both answer 401 "Invalid credentials"
    and cost one bcrypt verification each.
    """
    user = db.query(User).filter(User.email == credentials.email).first()

    if not user:
        dummy_verify(credentials.password)
        log_security_event(
            "failed_login",
            {"reason": "user_not_found", "email": credentials.email},
            logger
        )
        raise AuthenticationError("Invalid credentials")

    if not verify_password(credentials.password, user.hashed_password):
        log_security_event(
            "failed_login",
            {"reason": "invalid_password", "user_id": user.id, "tenant_id": user.tenant_id},
            logger
        )
        raise AuthenticationError("Invalid credentials")

    identity = Identity(user_id=user.id, role=user.role, tenant_id=user.tenant_id)
    token = create_access_token(
        identity.to_claims(),
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        expires_delta=timedelta(minutes=settings.JWT_EXPIRES_MINUTES)
    )

    logger.info(f"Successful login: user={user.id}, tenant={user.tenant_id}")

    return TokenResponse(token=token)

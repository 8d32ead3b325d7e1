"""
User Model

Users belong to a tenant and carry one of two roles.

IMPORTANT: email is unique across ALL tenants (single login namespace),
so login needs only email + password to find the user and their tenant.
"""
from sqlalchemy import Column, String, DateTime, ForeignKey, Index, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime
from notes_api.database import Base
import uuid
import enum


class UserRole(str, enum.Enum):
    """
    User roles.

    ADMIN: everything a member can do, plus upgrading the tenant's plan
    MEMBER: CRUD on notes within their own tenant
    """
    ADMIN = "admin"
    MEMBER = "member"


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Every user belongs to exactly one tenant
    tenant_id = Column(
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)

    role = Column(
        SQLEnum(UserRole, values_callable=lambda e: [m.value for m in e]),
        default=UserRole.MEMBER,
        nullable=False
    )

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    tenant = relationship("Tenant", back_populates="users")
    notes = relationship("Note", back_populates="author")

    __table_args__ = (
        Index('idx_user_tenant_role', 'tenant_id', 'role'),
    )

    def __repr__(self):
        return f"<User {self.email} (tenant={self.tenant_id})>"

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

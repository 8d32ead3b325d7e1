"""
Tenant Model

The tenant is the isolation boundary: every user and note belongs to
exactly one tenant, and every query is filtered by the caller's tenant_id.

Shared database, shared schema with a tenant_id column on each scoped table.
"""
from sqlalchemy import Column, String, DateTime, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime
from typing import Optional
from notes_api.database import Base
import uuid
import enum


# Hard cap on notes for tenants on the free plan
FREE_PLAN_NOTE_LIMIT = 3


class SubscriptionPlan(str, enum.Enum):
    """
    Subscription plans.

    FREE: capped at FREE_PLAN_NOTE_LIMIT notes per tenant
    PRO: unlimited notes

    The only transition is FREE -> PRO (Tenant.upgrade). PRO is terminal.
    """
    FREE = "free"
    PRO = "pro"


class Tenant(Base):
    __tablename__ = "tenants"

    # UUIDs avoid enumeration and stay unique across systems
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    name = Column(String(255), nullable=False)
    slug = Column(String(100), unique=True, nullable=False, index=True)

    subscription_plan = Column(
        SQLEnum(SubscriptionPlan, values_callable=lambda e: [m.value for m in e]),
        default=SubscriptionPlan.FREE,
        nullable=False
    )

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    users = relationship("User", back_populates="tenant", cascade="all, delete-orphan")
    notes = relationship("Note", back_populates="tenant", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Tenant {self.slug} plan={self.subscription_plan}>"

    @property
    def note_limit(self) -> Optional[int]:
        """Maximum number of notes for this tenant, None when unlimited."""
        if self.subscription_plan == SubscriptionPlan.FREE:
            return FREE_PLAN_NOTE_LIMIT
        return None

    def upgrade(self) -> None:
        """Move the tenant to the pro plan. Upgrading a pro tenant is a no-op."""
        self.subscription_plan = SubscriptionPlan.PRO

"""
Database Models

Users and notes carry tenant_id for multi-tenant isolation.
"""
from notes_api.models.tenant import Tenant, SubscriptionPlan, FREE_PLAN_NOTE_LIMIT
from notes_api.models.user import User, UserRole
from notes_api.models.note import Note

__all__ = [
    "Tenant",
    "SubscriptionPlan",
    "FREE_PLAN_NOTE_LIMIT",
    "User",
    "UserRole",
    "Note",
]

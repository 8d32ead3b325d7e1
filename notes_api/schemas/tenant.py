"""
Tenant Schemas
"""
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from notes_api.models.tenant import SubscriptionPlan


class TenantResponse(BaseModel):
    id: str = Field(..., alias="_id")
    name: str
    slug: str
    subscription_plan: SubscriptionPlan

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class UpgradeResponse(BaseModel):
    """Result of upgrading the caller's tenant."""
    message: str
    tenant: TenantResponse

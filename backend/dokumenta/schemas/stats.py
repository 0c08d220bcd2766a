"""Admin statistics schemas."""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from dokumenta.schemas.tenant import TenantLimits


class CountBucket(BaseModel):
    """Documents grouped by one attribute."""
    key: str
    count: int
    total_size: int = 0

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StatsRead(BaseModel):
    """Tenant dashboard statistics."""
    total_documents: int
    today_documents: int
    total_size: int
    active_users: int
    pending_review: int
    by_type: list[CountBucket]
    by_status: list[CountBucket]
    limits: TenantLimits

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

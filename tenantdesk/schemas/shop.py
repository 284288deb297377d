"""Shop API schemas."""

from pydantic import BaseModel, ConfigDict, Field


class ShopCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class ShopResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    name: str
    is_active: bool

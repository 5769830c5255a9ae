# backend/catalog_service/catalog/schemas.py

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ProductBase(BaseModel):
    # Only the column limits apply; values are stored as uploaded.
    name: str = Field(..., max_length=255)
    description: Optional[str] = None
    brand: Optional[str] = Field(None, max_length=255)
    price: Optional[float] = Field(None, description="Stored with 2 decimal places.")
    category: Optional[str] = Field(None, max_length=255)
    release_date: Optional[date] = None
    product_available: bool = False
    stock_quantity: int = 0

    # The catalog front end speaks camelCase; snake_case is accepted too.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductCreate(ProductBase):
    """
    The `product` part of a create/update request.
    `id` is optional: absent on create, echoed back by clients on update.
    """

    id: Optional[int] = None


class ProductResponse(ProductBase):
    id: int
    image_name: Optional[str] = None
    image_type: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

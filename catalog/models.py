# catalog/models.py
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator

PLACEHOLDER_IMAGE = "https://via.placeholder.com/300x300?text=Product"


class ProductIn(BaseModel):
    """Fields a caller may supply when creating a product."""
    model_config = ConfigDict(extra="ignore")

    title: str = Field(..., description="Product title")
    description: str = Field("", description="Product description")
    price: float = Field(..., ge=0, allow_inf_nan=False, description="Unit price")
    image: str = Field(PLACEHOLDER_IMAGE, description="Image URL")
    stock: int = Field(100, description="Units on hand (informational only)")
    category: str = Field("general", description="Product category")

    @field_validator("price", "stock", mode="before")
    @classmethod
    def _not_bool(cls, v):
        if isinstance(v, bool):
            raise ValueError("must be a number, not a boolean")
        return v

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be empty")
        return v


class Product(ProductIn):
    """A stored product as returned by the API."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

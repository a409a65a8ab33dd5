from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    sku: str | None = Field(default=None, max_length=20)
    description: str = Field(default="", max_length=500)
    price: float = Field(ge=0)
    quantity: int = Field(default=0, ge=0)
    category: str = Field(default="", max_length=50)
    vendor: str = Field(default="", max_length=100)


class ProductUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    sku: str | None = Field(default=None, max_length=20)
    description: str | None = Field(default=None, max_length=500)
    price: float | None = Field(default=None, ge=0)
    category: str | None = Field(default=None, max_length=50)
    vendor: str | None = Field(default=None, max_length=100)


class ProductRead(BaseModel):
    id: int
    sku: str
    name: str
    description: str
    price: float
    quantity: int
    category: str
    vendor: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProductSummary(BaseModel):
    id: int
    name: str
    sku: str
    category: str
    quantity: int

    model_config = ConfigDict(from_attributes=True)

"""
Database Schemas for the Storefront

Each Pydantic model represents a MongoDB collection. The collection name is the lowercase of the class name.

- User -> "user"
- Category -> "category"
- Product -> "product"
- Order -> "order"
"""
from typing import Any, Dict, List, Literal, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

ORDER_STATUSES = ("Not Process", "Processing", "Shipped", "delivered", "cancel")

OrderStatus = Literal["Not Process", "Processing", "Shipped", "delivered", "cancel"]


class User(BaseModel):
    name: str = Field(..., min_length=1, description="Display name")
    email: EmailStr = Field(..., description="Unique login email, stored lowercased")
    password: str = Field(..., min_length=1, description="Hashed password")
    phone: str = Field(..., min_length=1, description="Phone number")
    address: str = Field(..., min_length=1, description="Postal address")
    answer: str = Field(..., min_length=1, description="Security answer for password reset")
    role: int = Field(0, description="0 = customer, 1 = admin")

    @field_validator("name", "phone", "address", "answer", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


class Category(BaseModel):
    name: str = Field(..., min_length=1, description="Category name")
    slug: str = Field(..., description="Lowercased URL slug")

    @field_validator("slug")
    @classmethod
    def lowercase_slug(cls, value: str) -> str:
        return value.lower()


class ProductPhoto(BaseModel):
    data: Optional[bytes] = None
    contentType: Optional[str] = None


class Product(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str = Field(..., description="Product name")
    slug: str = Field(..., description="URL slug derived from the name")
    description: str = Field(..., description="Product description")
    price: float = Field(..., description="Unit price")
    category: ObjectId = Field(..., description="Referenced category _id")
    quantity: int = Field(..., description="Units in stock")
    shipping: Optional[bool] = Field(None, description="Whether the product ships")
    photo: Optional[ProductPhoto] = Field(None, description="Inline photo bytes and content type")


class Order(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    products: List[ObjectId] = Field(..., description="One product _id per purchased unit")
    payment: Dict[str, Any] = Field(..., description="Gateway result, stored as received")
    buyer: ObjectId = Field(..., description="Referenced user _id")
    status: OrderStatus = Field("Not Process", description="Order status")

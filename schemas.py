"""
Database Schemas for the storefront

Each Pydantic model represents a MongoDB collection. The collection name is the lowercase of the class name.

- Item -> "item"
- User -> "user"
- Order -> "order"

Cart documents ("cart") hold ObjectId references and are written directly by cart.py:
{userId: ObjectId, items: [{itemId: ObjectId, qty: int}], ordered: bool}
"""
from datetime import datetime, timezone
from typing import List

from pydantic import BaseModel, Field, EmailStr


class Item(BaseModel):
    name: str = Field(..., description="Display name")
    price: float = Field(..., description="Unit price")
    category: str = Field(..., description="Catalog category")
    photo: str = Field(..., description="Image URI or path")


class User(BaseModel):
    email: EmailStr = Field(..., description="Email address, unique")
    password: str = Field(..., description="Stored credential, plaintext or hash depending on scheme")
    name: str = Field(..., description="Full name")
    postCode: str = Field(..., description="Postal code")
    address: str = Field(..., description="Delivery address")


class OrderItem(BaseModel):
    """Snapshot of a purchased line, not a reference to Item."""
    name: str
    price: float
    qty: int


class Order(BaseModel):
    userId: str
    items: List[OrderItem]
    totalPrice: float
    orderDate: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

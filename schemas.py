"""
Database Schemas

Define your MongoDB collection schemas here using Pydantic models.
These schemas are used for data validation in your application.

Each Pydantic model represents a collection in your database.
Model name is converted to lowercase for the collection name:
- User -> "user" collection
- Product -> "product" collection
- Order -> "order" collection
- Cart -> "cart" collection
- Category -> "category" collection
- Customer -> "customer" collection
- Address -> "address" collection
"""

from datetime import datetime
from typing import List, Literal, Optional, get_args

from pydantic import BaseModel, EmailStr, Field

OrderStatus = Literal[
    "pending",
    "confirmed",
    "processing",
    "prepared",
    "shipped",
    "transit",
    "delivery",
    "delivered",
    "out_for_delivery",
    "failed_attempt",
    "returned_to_sender",
    "cancelled",
    "refunded",
]
ORDER_STATUSES = get_args(OrderStatus)

PaymentStatus = Literal["pending", "paid", "refunded"]
CustomerType = Literal["individual", "business", "government", "guest"]
CustomerStatus = Literal["active", "inactive", "pending"]


class User(BaseModel):
    """
    Users collection schema
    Collection name: "user"
    """
    email: EmailStr = Field(..., description="Email address, unique")
    name: str = Field(..., description="Full name")
    role: str = Field("user", description="Role: user | admin")
    password_hash: Optional[str] = Field(None, description="Password hash (server-side)")
    user_id: Optional[str] = Field(None, description="Id issued by the auth provider")


class Address(BaseModel):
    """
    Saved shipping addresses
    Collection name: "address"
    """
    email: EmailStr = Field(..., description="Owner email")
    full_name: str = Field(..., min_length=1)
    contact_no: str = ""
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)


# ---------- Catalog ----------

class Category(BaseModel):
    """
    Categories collection schema
    Collection name: "category"
    """
    name: str = Field(..., min_length=1, description="Display name, unique")
    slug: Optional[str] = Field(None, description="URL-friendly id, derived from name when empty")
    description: Optional[str] = None
    parent_id: Optional[str] = Field(None, description="Parent category id, one level deep")
    is_active: bool = True
    sort_order: int = 0
    image_url: Optional[str] = None


class Product(BaseModel):
    """
    Products collection schema
    Collection name: "product"
    """
    name: str = Field(..., min_length=1, description="Product name")
    description: str = Field(..., description="Product description")
    base_price: float = Field(..., ge=0, description="Price before print options")
    category: str = Field(..., description="Category id")
    print_types: List[str] = Field(default_factory=list, description="e.g. screen, DTG, embroidery")
    available_sizes: List[str] = Field(default_factory=list)
    colors: List[str] = Field(default_factory=list)
    materials: List[str] = Field(default_factory=list)
    min_order_quantity: int = Field(1, ge=1)
    image_urls: List[str] = Field(default_factory=list)
    is_active: bool = True


# ---------- Customers ----------

class CustomerAddress(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: str = Field(..., min_length=1)


class Customer(BaseModel):
    """
    Customers collection schema (back office)
    Collection name: "customer"
    """
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., min_length=1)
    company: Optional[str] = None
    address: CustomerAddress
    tax_id: Optional[str] = None
    notes: Optional[str] = None
    customer_type: CustomerType = "business"
    status: CustomerStatus = "active"


# ---------- Cart ----------

class SizeQuantity(BaseModel):
    size: str
    quantity: int = Field(..., ge=1)


class CartItem(BaseModel):
    product_id: str
    name: str
    price: float = Field(..., ge=0)
    image: str
    color: Optional[str] = None
    print_type: Optional[str] = None
    material: Optional[str] = None
    sizes: List[SizeQuantity]
    total_quantity: int = Field(..., ge=1)


class Cart(BaseModel):
    """
    Carts collection schema, one document per user
    Collection name: "cart"
    """
    user_id: EmailStr = Field(..., description="Shopper email")
    items: List[CartItem] = Field(default_factory=list)


# ---------- Orders ----------

class OrderItem(BaseModel):
    product_id: str = Field(..., description="Product ObjectId as string")
    name: str
    size: str
    color: str
    quantity: int = Field(..., ge=1)
    price: float = Field(..., ge=0)
    material: Optional[str] = None
    print_type: Optional[str] = None
    image: Optional[str] = None


class ShippingAddress(BaseModel):
    full_name: str
    email: Optional[EmailStr] = None
    contact_no: Optional[str] = None
    street: str
    city: str
    state: str
    zip_code: str
    country: str


class ShippingMethod(BaseModel):
    type: str = Field(..., description="Standard | Express | Priority | Pickup")
    cost: float = Field(..., ge=0)
    estimated_delivery: str


class PaymentDetails(BaseModel):
    amount: float = Field(..., ge=0)
    currency: str = "usd"
    status: PaymentStatus = "pending"
    method: Optional[str] = None
    tax: Optional[float] = Field(None, ge=0)
    discount: Optional[float] = Field(None, ge=0)
    total: Optional[float] = Field(None, ge=0)
    intent_id: Optional[str] = Field(None, description="Stripe PaymentIntent id")


class DesignDetails(BaseModel):
    description: str
    placement: Optional[str] = "Front Center"
    colors: List[str] = Field(default_factory=list)
    mockup_url: Optional[str] = None
    artwork_files: List[str] = Field(default_factory=list)


class Order(BaseModel):
    """
    Orders collection schema
    Collection name: "order"
    """
    customer_email: EmailStr
    customer_id: Optional[str] = Field(None, description="Customer ObjectId as string")
    items: List[OrderItem] = Field(..., min_length=1)
    status: OrderStatus = "pending"
    shipping_address: ShippingAddress
    shipping_method: ShippingMethod
    payment: PaymentDetails
    design: Optional[DesignDetails] = None
    due_date: Optional[datetime] = None
    notes: Optional[str] = None

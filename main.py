import os
import re
import smtplib
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import structlog
from bson import ObjectId
from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel, EmailStr, Field, TypeAdapter, ValidationError, field_validator
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

import notifications
from database import db, create_document, get_documents
from schemas import (
    ORDER_STATUSES,
    Address as AddressSchema,
    Cart as CartSchema,
    Category as CategorySchema,
    Customer as CustomerSchema,
    CustomerAddress,
    CustomerStatus,
    CustomerType,
    Order as OrderSchema,
    OrderItem,
    PaymentDetails,
    Product as ProductSchema,
    ShippingAddress,
    ShippingMethod,
)

# Environment
JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me")
JWT_ALG = "HS256"
STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY")

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
logger = structlog.get_logger(__name__)

app = FastAPI(title="Kalmar Studio API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

EMAIL_ADAPTER = TypeAdapter(EmailStr)

# --------------------- Error handling ---------------------

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        details.append(f"{loc}: {err.get('msg')}" if loc else err.get("msg"))
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Validation error", "details": details},
    )


def duplicate_field(exc: DuplicateKeyError) -> str:
    details = exc.details or {}
    key = details.get("keyPattern") or details.get("keyValue") or {}
    return next(iter(key), "value")


@app.exception_handler(DuplicateKeyError)
async def duplicate_key_handler(request: Request, exc: DuplicateKeyError):
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": f"A record with this {duplicate_field(exc)} already exists."},
    )


@app.exception_handler(PyMongoError)
async def database_error_handler(request: Request, exc: PyMongoError):
    logger.error("database_error", path=request.url.path, error=str(exc)[:200])
    return JSONResponse(status_code=500, content={"success": False, "error": "Internal server error"})

# --------------------- Utility ---------------------

def require_db():
    if db is None:
        raise HTTPException(status_code=500, detail="Database not configured")
    return db


def is_object_id(value: Optional[str]) -> bool:
    # ObjectId.is_valid also accepts 12-byte strings; ids arrive as 24 hex chars
    return bool(value) and len(value) == 24 and ObjectId.is_valid(value)


def oid(id_str: str) -> ObjectId:
    id_str = (id_str or "").strip()
    if not is_object_id(id_str):
        raise HTTPException(status_code=400, detail="Invalid id")
    return ObjectId(id_str)


def email_key(value: Optional[str], missing: str = "Email parameter is required") -> str:
    """Normalize an email query parameter the way EmailStr normalizes stored emails."""
    if not value:
        raise HTTPException(status_code=400, detail=missing)
    try:
        return EMAIL_ADAPTER.validate_python(value.strip())
    except ValidationError:
        raise HTTPException(status_code=400, detail="Invalid email")


def serialize(value: Any) -> Any:
    """Make Mongo documents JSON friendly: `_id` becomes `id`, ObjectIds become strings."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, list):
        return [serialize(v) for v in value]
    if isinstance(value, dict):
        out = {}
        for k, v in value.items():
            if k == "_id":
                out["id"] = str(v)
            else:
                out[k] = serialize(v)
        return out
    return value


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def create_token(data: dict, expires_minutes: int = 60 * 24) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, JWT_SECRET, algorithm=JWT_ALG)


def create_slug(name: str) -> str:
    slug = name.strip().lower()
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"[^\w\-]+", "", slug, flags=re.ASCII)
    slug = re.sub(r"-{2,}", "-", slug)
    return slug.strip("-")


class AuthUser(BaseModel):
    id: str
    email: EmailStr
    name: str
    role: str = "user"


def get_current_user(authorization: Optional[str] = Header(None)) -> AuthUser:
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing Authorization header")
    try:
        scheme, token = authorization.split()
        if scheme.lower() != "bearer":
            raise ValueError("Invalid auth scheme")
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid Authorization header")
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALG])
        return AuthUser(**{
            "id": payload.get("id"),
            "email": payload.get("email"),
            "name": payload.get("name"),
            "role": payload.get("role", "user"),
        })
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")


def public_user(doc: dict) -> dict:
    return {
        "id": str(doc.get("_id")),
        "email": doc.get("email"),
        "name": doc.get("name"),
        "role": doc.get("role") or "user",
        "created_at": doc.get("created_at"),
    }

# --------------------- Models ---------------------

class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)
    user_id: Optional[str] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class CheckoutRequest(BaseModel):
    user_id: EmailStr
    shipping_address: ShippingAddress
    shipping_method: ShippingMethod
    payment: PaymentDetails
    notes: Optional[str] = None


def ensure_not_null(value: Any) -> Any:
    if value is None:
        raise ValueError("may not be null")
    return value


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    slug: Optional[str] = None
    description: Optional[str] = None
    parent_id: Optional[str] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None
    image_url: Optional[str] = None

    @field_validator("name", "is_active", "sort_order", mode="before")
    @classmethod
    def not_null(cls, value):
        return ensure_not_null(value)


class CustomerUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=1)
    company: Optional[str] = None
    address: Optional[CustomerAddress] = None
    tax_id: Optional[str] = None
    notes: Optional[str] = None
    customer_type: Optional[CustomerType] = None
    status: Optional[CustomerStatus] = None

    @field_validator(
        "name", "email", "phone", "address", "customer_type", "status", mode="before"
    )
    @classmethod
    def not_null(cls, value):
        return ensure_not_null(value)


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    base_price: Optional[float] = Field(None, ge=0)
    category: Optional[str] = None
    print_types: Optional[List[str]] = None
    available_sizes: Optional[List[str]] = None
    colors: Optional[List[str]] = None
    materials: Optional[List[str]] = None
    min_order_quantity: Optional[int] = Field(None, ge=1)
    image_urls: Optional[List[str]] = None
    is_active: Optional[bool] = None

    @field_validator(
        "name", "description", "base_price", "category", "print_types", "available_sizes",
        "colors", "materials", "min_order_quantity", "image_urls", "is_active", mode="before",
    )
    @classmethod
    def not_null(cls, value):
        return ensure_not_null(value)


class StatusUpdate(BaseModel):
    status: Optional[str] = None


class PaymentIntentRequest(BaseModel):
    amount: int = Field(..., gt=0, description="Amount in the smallest currency unit")
    currency: str = "usd"
    metadata: Dict[str, str] = Field(default_factory=dict)
    address: Dict[str, str] = Field(default_factory=dict)
    save_payment_method: bool = False


class ContactRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    subject: Optional[str] = None
    message: str = Field(..., min_length=1)

# --------------------- Routes ---------------------

@app.get("/")
def root():
    return {"message": "Kalmar Studio API is running"}


@app.get("/test")
def test_database():
    response = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "database_url": "✅ Set" if os.getenv("DATABASE_URL") else "❌ Not Set",
        "database_name": "✅ Set" if os.getenv("DATABASE_NAME") else "❌ Not Set",
        "connection_status": "Not Connected",
        "collections": []
    }
    if db is None:
        return response
    response["database"] = "✅ Available"
    try:
        response["collections"] = db.list_collection_names()[:10]
        response["database"] = "✅ Connected & Working"
        response["connection_status"] = "Connected"
    except PyMongoError as e:
        response["database"] = f"⚠️  Connected but Error: {str(e)[:50]}"
    return response


# Auth
@app.post("/api/auth/register", status_code=201)
def register(req: RegisterRequest):
    database = require_db()
    existing = database["user"].find_one({"email": req.email})
    if existing and existing.get("password_hash"):
        raise HTTPException(status_code=400, detail="Email already registered")

    now = utcnow()
    on_insert = {"name": req.name, "role": "user", "created_at": now}
    if req.user_id:
        on_insert["user_id"] = req.user_id
    database["user"].update_one(
        {"email": req.email},
        {
            "$set": {"password_hash": hash_password(req.password), "updated_at": now},
            "$setOnInsert": on_insert,
        },
        upsert=True,
    )
    user = database["user"].find_one({"email": req.email})
    if not user:
        raise HTTPException(status_code=500, detail="User document not found after upsert")

    profile = public_user(user)
    logger.info("user_registered", email=profile["email"], role=profile["role"])
    token = create_token({"id": profile["id"], "email": profile["email"], "name": profile["name"], "role": profile["role"]})
    return {"success": True, "data": {"token": token, "user": profile}}


@app.post("/api/auth/login")
def login(req: LoginRequest):
    database = require_db()
    user = database["user"].find_one({"email": req.email})
    if not user or not user.get("password_hash"):
        raise HTTPException(status_code=400, detail="Invalid credentials")
    if not verify_password(req.password, user["password_hash"]):
        raise HTTPException(status_code=400, detail="Invalid credentials")
    profile = public_user(user)
    token = create_token({"id": profile["id"], "email": profile["email"], "name": profile["name"], "role": profile["role"]})
    return {"success": True, "data": {"token": token, "user": profile}}


@app.get("/api/auth/me")
def me(user: AuthUser = Depends(get_current_user)):
    database = require_db()
    doc = database["user"].find_one({"email": user.email})
    if not doc:
        raise HTTPException(status_code=404, detail="User not found")
    return {"success": True, "data": public_user(doc)}


# Users
@app.get("/api/users")
def get_user(email: Optional[str] = None):
    email = email_key(email)
    database = require_db()
    user = database["user"].find_one({"email": email})
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return {"success": True, "data": public_user(user)}


# Addresses
@app.post("/api/addresses", status_code=201)
def create_address(body: AddressSchema):
    database = require_db()
    address_id = create_document("address", body)
    return {"success": True, "data": serialize(database["address"].find_one({"_id": ObjectId(address_id)}))}


@app.get("/api/addresses")
def list_addresses(email: Optional[str] = None):
    email = email_key(email)
    require_db()
    docs = get_documents("address", {"email": email}, sort=[("created_at", DESCENDING)])
    return {"success": True, "data": serialize(docs)}


# Cart
@app.post("/api/cart")
def save_cart(cart: CartSchema):
    database = require_db()
    now = utcnow()
    database["cart"].update_one(
        {"user_id": cart.user_id},
        {
            "$set": {"items": [item.model_dump() for item in cart.items], "updated_at": now},
            "$setOnInsert": {"created_at": now},
        },
        upsert=True,
    )
    saved = database["cart"].find_one({"user_id": cart.user_id})
    logger.info("cart_saved", user_id=cart.user_id, items=len(cart.items))
    return {"success": True, "data": {"cart_id": str(saved["_id"]), "items": len(cart.items)}}


@app.get("/api/cart")
def get_cart(user_id: Optional[str] = None):
    user_id = email_key(user_id, missing="User ID is required")
    database = require_db()
    cart = database["cart"].find_one({"user_id": user_id})
    return {"success": True, "data": {"user_id": user_id, "items": (cart or {}).get("items", [])}}


@app.delete("/api/cart")
def clear_cart(user_id: Optional[str] = None):
    user_id = email_key(user_id, missing="User ID is required")
    database = require_db()
    database["cart"].delete_one({"user_id": user_id})
    logger.info("cart_cleared", user_id=user_id)
    return {"success": True}


# Checkout
def cart_to_order_items(cart_items: List[dict]) -> List[OrderItem]:
    """One order line per size entry of every cart item."""
    lines = []
    for item in cart_items:
        for entry in item.get("sizes", []):
            lines.append(OrderItem(
                product_id=item["product_id"],
                name=item["name"],
                size=entry["size"],
                color=item.get("color") or "#000000",
                quantity=int(entry["quantity"]),
                price=float(item["price"]),
                material=item.get("material"),
                print_type=item.get("print_type"),
                image=item.get("image"),
            ))
    return lines


@app.post("/api/checkout", status_code=201)
def checkout(req: CheckoutRequest):
    database = require_db()
    cart = database["cart"].find_one({"user_id": req.user_id})
    items = cart_to_order_items(cart.get("items", [])) if cart else []
    if not items:
        raise HTTPException(status_code=400, detail="Cart is empty")

    order = OrderSchema(
        customer_email=req.user_id,
        items=items,
        status="pending",
        shipping_address=req.shipping_address,
        shipping_method=req.shipping_method,
        payment=req.payment,
        notes=req.notes,
    )
    order_id = create_document("order", order)
    database["cart"].delete_one({"user_id": req.user_id})
    logger.info("order_created", order_id=order_id, customer_email=req.user_id, lines=len(items), source="checkout")
    return {"success": True, "data": serialize(database["order"].find_one({"_id": ObjectId(order_id)}))}


# Categories
def category_out(doc: dict, database) -> dict:
    data = serialize(doc)
    children = database["category"].find({"parent_id": data["id"]}).sort([("sort_order", 1), ("name", 1)])
    data["subcategories"] = [
        {
            "id": str(c["_id"]),
            "name": c.get("name"),
            "slug": c.get("slug"),
            "parent_id": c.get("parent_id"),
            "is_active": c.get("is_active", True),
            "sort_order": c.get("sort_order", 0),
        }
        for c in children
    ]
    return data


@app.get("/api/categories")
def list_categories(parent_id: Optional[str] = None):
    database = require_db()
    query: Dict[str, Any] = {}
    if parent_id == "null":
        query["parent_id"] = None
    elif parent_id:
        query["parent_id"] = parent_id
    docs = get_documents("category", query, sort=[("sort_order", 1), ("name", 1)])
    return {"success": True, "data": [category_out(d, database) for d in docs]}


@app.post("/api/categories", status_code=201)
def create_category(body: CategorySchema):
    database = require_db()
    data = body.model_dump()
    if data.get("parent_id"):
        oid(data["parent_id"])
    data["slug"] = (data.get("slug") or create_slug(data["name"])).lower()
    try:
        category_id = create_document("category", data)
    except DuplicateKeyError as e:
        raise HTTPException(status_code=400, detail=f"A category with this {duplicate_field(e)} already exists.")
    logger.info("category_created", category_id=category_id, slug=data["slug"])
    return {"success": True, "data": category_out(database["category"].find_one({"_id": ObjectId(category_id)}), database)}


@app.get("/api/categories/{category_id}")
def get_category(category_id: str):
    database = require_db()
    doc = database["category"].find_one({"_id": oid(category_id)})
    if not doc:
        raise HTTPException(status_code=404, detail="Category not found")
    return {"success": True, "data": category_out(doc, database)}


@app.put("/api/categories/{category_id}")
def update_category(category_id: str, body: CategoryUpdate):
    database = require_db()
    _id = oid(category_id)
    data = body.model_dump(exclude_unset=True)
    if data.get("name") and not data.get("slug"):
        data["slug"] = create_slug(data["name"])
    elif data.get("slug"):
        data["slug"] = data["slug"].lower()
    if data.get("parent_id"):
        oid(data["parent_id"])
    data["updated_at"] = utcnow()
    try:
        updated = database["category"].find_one_and_update(
            {"_id": _id}, {"$set": data}, return_document=ReturnDocument.AFTER
        )
    except DuplicateKeyError as e:
        raise HTTPException(status_code=400, detail=f"A category with this {duplicate_field(e)} already exists.")
    if not updated:
        raise HTTPException(status_code=404, detail="Category not found")
    return {"success": True, "data": category_out(updated, database)}


@app.delete("/api/categories/{category_id}")
def delete_category(category_id: str):
    database = require_db()
    _id = oid(category_id)
    if database["category"].find_one({"parent_id": str(_id)}):
        raise HTTPException(
            status_code=400,
            detail="Cannot delete a category that has subcategories. Delete or reassign subcategories first.",
        )
    result = database["category"].delete_one({"_id": _id})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Category not found")
    return {"success": True, "data": {"id": category_id}}


# Contact
@app.post("/api/contact")
def contact(req: ContactRequest):
    try:
        notifications.send_contact_email(req.name, req.email, req.subject, req.message)
    except (smtplib.SMTPException, OSError) as e:
        logger.error("contact_email_failed", error=str(e)[:200])
        raise HTTPException(status_code=500, detail="Failed to send message")
    return {"success": True}


# Customers
@app.get("/api/customers")
def list_customers():
    require_db()
    docs = get_documents("customer", sort=[("created_at", DESCENDING)])
    return {"success": True, "data": serialize(docs)}


@app.post("/api/customers", status_code=201)
def create_customer(body: CustomerSchema):
    database = require_db()
    try:
        customer_id = create_document("customer", body)
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="A customer with this email already exists.")
    logger.info("customer_created", customer_id=customer_id)
    return {"success": True, "data": serialize(database["customer"].find_one({"_id": ObjectId(customer_id)}))}


@app.get("/api/customers/{customer_id}")
def get_customer(customer_id: str):
    database = require_db()
    doc = database["customer"].find_one({"_id": oid(customer_id)})
    if not doc:
        raise HTTPException(status_code=404, detail="Customer not found")
    return {"success": True, "data": serialize(doc)}


@app.put("/api/customers/{customer_id}")
def update_customer(customer_id: str, body: CustomerUpdate):
    database = require_db()
    _id = oid(customer_id)
    data = body.model_dump(exclude_unset=True)
    data["updated_at"] = utcnow()
    try:
        updated = database["customer"].find_one_and_update(
            {"_id": _id}, {"$set": data}, return_document=ReturnDocument.AFTER
        )
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="A customer with this email already exists.")
    if not updated:
        raise HTTPException(status_code=404, detail="Customer not found")
    return {"success": True, "data": serialize(updated)}


@app.delete("/api/customers/{customer_id}")
def delete_customer(customer_id: str):
    database = require_db()
    result = database["customer"].delete_one({"_id": oid(customer_id)})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Customer not found")
    return {"success": True, "data": {"id": customer_id}}


# Orders
def order_out(doc: dict, database) -> dict:
    data = serialize(doc)
    customer_id = data.get("customer_id")
    if is_object_id(customer_id):
        customer = database["customer"].find_one({"_id": ObjectId(customer_id)})
        if customer:
            data["customer"] = {
                "id": customer_id,
                "name": customer.get("name"),
                "email": customer.get("email"),
                "phone": customer.get("phone"),
                "company": customer.get("company"),
            }
    return data


@app.get("/api/orders")
def list_orders(email: Optional[str] = None, status: Optional[str] = None):
    require_db()
    query: Dict[str, Any] = {}
    if email:
        query["customer_email"] = email_key(email)
    if status:
        query["status"] = status.strip().lower()
    docs = get_documents("order", query, sort=[("created_at", DESCENDING)])
    return {"success": True, "data": serialize(docs)}


@app.post("/api/orders", status_code=201)
def create_order(body: OrderSchema):
    database = require_db()
    order_id = create_document("order", body)
    logger.info("order_created", order_id=order_id, customer_email=body.customer_email, lines=len(body.items), source="admin")
    return {"success": True, "data": order_out(database["order"].find_one({"_id": ObjectId(order_id)}), database)}


@app.get("/api/orders/{order_id}")
def get_order(order_id: str):
    database = require_db()
    doc = database["order"].find_one({"_id": oid(order_id)})
    if not doc:
        raise HTTPException(status_code=404, detail="Order not found")
    return {"success": True, "data": order_out(doc, database)}


@app.put("/api/orders/{order_id}")
def replace_order(order_id: str, body: OrderSchema):
    database = require_db()
    _id = oid(order_id)
    existing = database["order"].find_one({"_id": _id}, {"created_at": 1})
    if not existing:
        raise HTTPException(status_code=404, detail="Order not found")
    doc = body.model_dump()
    doc["created_at"] = existing.get("created_at")
    doc["updated_at"] = utcnow()
    database["order"].replace_one({"_id": _id}, doc)
    return {"success": True, "data": order_out(database["order"].find_one({"_id": _id}), database)}


@app.put("/api/orders/{order_id}/status")
def update_order_status(order_id: str, body: StatusUpdate):
    database = require_db()
    _id = oid(order_id)
    status = (body.status or "").strip().lower()
    if status not in ORDER_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid or missing status")
    updated = database["order"].find_one_and_update(
        {"_id": _id},
        {"$set": {"status": status, "updated_at": utcnow()}},
        return_document=ReturnDocument.AFTER,
    )
    if not updated:
        raise HTTPException(status_code=404, detail="Order not found")
    logger.info("order_status_changed", order_id=str(_id), status=status)
    return {"success": True, "data": serialize(updated)}


@app.delete("/api/orders/{order_id}")
def delete_order(order_id: str):
    database = require_db()
    result = database["order"].delete_one({"_id": oid(order_id)})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Order not found")
    return {"success": True, "data": {"id": order_id}}


# Payments (Stripe)
@app.post("/api/payments")
def create_payment_intent(req: PaymentIntentRequest):
    if not STRIPE_SECRET_KEY:
        raise HTTPException(status_code=500, detail="Payment gateway not configured")
    import stripe
    stripe.api_key = STRIPE_SECRET_KEY
    params: Dict[str, Any] = {
        "amount": req.amount,
        "currency": req.currency,
        "metadata": {
            **req.metadata,
            **req.address,
            "save_payment_method": "true" if req.save_payment_method else "false",
        },
        "automatic_payment_methods": {"enabled": True},
    }
    if req.save_payment_method:
        params["setup_future_usage"] = "off_session"
    try:
        intent = stripe.PaymentIntent.create(**params)
    except Exception as e:
        logger.error("stripe_error", error=str(e)[:200])
        raise HTTPException(status_code=500, detail="Payment processing failed")
    logger.info("payment_intent_created", amount=req.amount, currency=req.currency)
    return {"success": True, "clientSecret": intent.client_secret}


# Products
@app.get("/api/products")
def list_products():
    require_db()
    docs = get_documents("product", sort=[("created_at", DESCENDING)])
    return {"success": True, "data": serialize(docs)}


@app.get("/api/products/list")
def list_active_products():
    database = require_db()
    docs = get_documents("product", {"is_active": True}, sort=[("name", 1)])
    out = []
    for p in docs:
        category = None
        category_id = p.get("category")
        if is_object_id(category_id):
            category = database["category"].find_one({"_id": ObjectId(category_id)}, {"name": 1})
        out.append({
            "id": str(p["_id"]),
            "name": p.get("name"),
            "base_price": p.get("base_price"),
            "category": {"id": category_id, "name": category.get("name") if category else None},
            "available_sizes": p.get("available_sizes", []),
            "colors": p.get("colors", []),
            "materials": p.get("materials", []),
        })
    return {"success": True, "data": out}


@app.post("/api/products", status_code=201)
def create_product(body: ProductSchema):
    database = require_db()
    product_id = create_document("product", body)
    logger.info("product_created", product_id=product_id)
    return {"success": True, "data": serialize(database["product"].find_one({"_id": ObjectId(product_id)}))}


@app.get("/api/products/{product_id}")
def get_product(product_id: str):
    database = require_db()
    doc = database["product"].find_one({"_id": oid(product_id)})
    if not doc:
        raise HTTPException(status_code=404, detail="Product not found")
    return {"success": True, "data": serialize(doc)}


@app.put("/api/products/{product_id}")
def update_product(product_id: str, body: ProductUpdate):
    database = require_db()
    data = body.model_dump(exclude_unset=True)
    data["updated_at"] = utcnow()
    updated = database["product"].find_one_and_update(
        {"_id": oid(product_id)}, {"$set": data}, return_document=ReturnDocument.AFTER
    )
    if not updated:
        raise HTTPException(status_code=404, detail="Product not found")
    return {"success": True, "data": serialize(updated)}


@app.delete("/api/products/{product_id}")
def delete_product(product_id: str):
    database = require_db()
    result = database["product"].delete_one({"_id": oid(product_id)})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Product not found")
    return {"success": True, "data": {"id": product_id}}


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)

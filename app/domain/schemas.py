# app/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field, PlainSerializer, model_serializer
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# Kwoty trzymamy jako Decimal, w JSONie wychodza jako liczby
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    """Baza dla schematow API: camelCase w JSONie, snake_case w Pythonie."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(BaseModel, Generic[T]):
    """Koperta odpowiedzi: {success, data?, error?, message?}."""

    success: bool = True
    data: Optional[T] = None
    error: Optional[str] = None
    message: Optional[str] = None

    @model_serializer(mode="wrap")
    def drop_empty_fields(self, handler):
        out = handler(self)
        for key in ("data", "error", "message"):
            if out.get(key) is None:
                out.pop(key, None)
        return out


# =====================================================
# AUTH
# =====================================================
class SignupIn(CamelModel):
    """Schema dla rejestracji."""

    email: EmailStr
    password: str = Field(..., min_length=6, description="Haslo (min. 6 znakow)")
    username: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class LoginIn(CamelModel):
    """Schema dla logowania."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class UserOut(CamelModel):
    id: int
    email: str
    username: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class AuthOut(UserOut):
    access_token: str


# =====================================================
# PRODUCTS
# =====================================================
class ProductSort(str, Enum):
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    NAME_ASC = "name_asc"
    NAME_DESC = "name_desc"
    CREATED_AT = "created_at"


class ProductOut(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    price: Money
    brand: str
    model: str
    year: Optional[int] = None
    mileage: Optional[int] = None
    fuel_type: Optional[str] = None
    transmission: Optional[str] = None
    engine_size: Optional[str] = None
    color: Optional[str] = None
    image_urls: List[str] = []
    in_stock: bool
    created_at: datetime
    updated_at: datetime


class PaginationOut(CamelModel):
    page: int
    limit: int
    total_count: int
    total_pages: int
    has_next: bool
    has_prev: bool


class ProductPageOut(CamelModel):
    products: List[ProductOut]
    pagination: PaginationOut


# =====================================================
# CART
# =====================================================
class AddToCartIn(CamelModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi byc > 0)")
    quantity: int = Field(..., ge=1, description="Ilosc produktu (musi byc >= 1)")


class UpdateCartIn(CamelModel):
    """Schema dla zmiany ilosci, 0 usuwa pozycje."""

    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., ge=0)


class CartItemOut(CamelModel):
    """Schema dla produktu w koszyku (response)."""

    id: int
    user_id: int
    product_id: int
    quantity: int
    product: ProductOut
    created_at: datetime
    updated_at: datetime


class CartOut(CamelModel):
    """Schema dla koszyka (response)."""

    items: List[CartItemOut]
    total_amount: Money
    item_count: int


# =====================================================
# BILLING / ORDERS
# =====================================================
class BillingIn(CamelModel):
    """Schema dla checkoutu."""

    cart_item_ids: List[int]
    billing_address: str = Field(..., min_length=1)
    shipping_address: str = Field(..., min_length=1)


class CheckoutOut(CamelModel):
    order_id: int
    payment_intent_id: str
    client_secret: str
    total_amount: Money


class OrderItemOut(CamelModel):
    id: int
    product_id: int
    quantity: int
    price: Money


class PaymentOut(CamelModel):
    payment_intent_id: str
    amount: Money
    status: str


class OrderOut(CamelModel):
    """Schema dla zamowienia (response)."""

    id: int
    user_id: int
    status: str
    total_amount: Money
    billing_address: str
    shipping_address: str
    payment_intent_id: Optional[str] = None
    items: List[OrderItemOut] = []
    payment: Optional[PaymentOut] = None
    created_at: datetime


# =====================================================
# CHAT / NOTIFICATIONS / STORE
# =====================================================
class MessageIn(CamelModel):
    content: str = Field(..., min_length=1)


class MessageOut(CamelModel):
    id: int
    user_id: int
    content: str
    is_from_user: bool
    created_at: datetime


class NotificationsOut(CamelModel):
    cart_item_count: int
    total_amount: Money
    has_items: bool


class CoordinatesOut(BaseModel):
    lat: float
    lng: float


class StoreLocationOut(CamelModel):
    latitude: float
    longitude: float
    address: str
    coordinates: CoordinatesOut


class HealthOut(CamelModel):
    status: str
    timestamp: datetime
    version: str
    environment: str


class WebhookAck(BaseModel):
    received: bool = True

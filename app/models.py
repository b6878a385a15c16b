from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from enum import Enum
from datetime import datetime
from typing import Optional


class Role(str, Enum):
    BUYER = "buyer"
    SELLER = "seller"


class PaymentMethod(str, Enum):
    COD = "cod"
    UPI = "upi"


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"


class Record(BaseModel):
    """Base for everything persisted: camelCase on disk, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    def to_record(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ProductCreate(Record):
    name: str = Field(..., min_length=1)
    price: int = Field(..., ge=0)  # minor units
    description: str = ""
    image_url: str
    seller_id: str
    upi_qr: Optional[str] = None


class Product(ProductCreate):
    id: str


class Order(Record):
    id: str
    product_id: str
    buyer_id: str
    seller_id: str
    product_details: Product  # snapshot taken at checkout
    address: str
    payment_method: PaymentMethod
    status: OrderStatus
    order_date: datetime
    total_amount: int = Field(..., ge=0)


class UserProfile(Record):
    id: str
    name: str
    email: str
    mobile: str
    address: Optional[str] = None
    role: Role


# ── Request / response models ────────────────────────────────────────────────

class CheckoutRequest(Record):
    product_id: str
    buyer_id: str
    address: str
    payment_method: PaymentMethod = PaymentMethod.COD


class SignInRequest(Record):
    user_id: str


class Session(Record):
    user_id: str
    role: Optional[Role] = None
    name: str = ""
    email: str = ""
    mobile: str = ""


class OrderSummary(Record):
    """Role-specific order row shown in an orders list."""

    id: str
    product_name: str
    price: int
    order_date: str
    status: str
    image_url: str = ""
    # buyer view
    seller_id: Optional[str] = None
    # seller view
    buyer_name: Optional[str] = None
    buyer_address: Optional[str] = None


class MigrationReport(BaseModel):
    products_kept: int
    products_set_aside: int
    orders_kept: int
    orders_set_aside: int

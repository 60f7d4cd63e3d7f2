"""
Bakery API — Order schemas

Orders form a tagged union on ``kind``. Documents keep the storefront's wire
format: camelCase keys, positional ``address``/``total``/cake ``orderDetails``
arrays, ``guestNum`` for the guest count and ``last4`` for the card suffix.
"""
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field


class SubmissionKind(str, Enum):
    ONLINE = "online"
    CASH = "cash"
    CUSTOM = "custom"
    CATERING = "catering"


class DeliveryMethod(str, Enum):
    PICK_UP = "Pick Up"
    DELIVERY = "Delivery"


class PaymentMethod(str, Enum):
    ONLINE_PAYMENT = "Online Payment"
    IN_PERSON = "In Person"


class CustomOrderType(str, Enum):
    CAKE = "Cake"
    OTHER = "Other"


class CakeType(str, Enum):
    NUMBER_CAKE = "Number Cake"
    STANDARD_CAKE = "Standard Cake"
    LETTER_CAKE = "Letter Cake"
    SHAPE_CAKE = "Shape Cake"


class Address(BaseModel):
    line1: str
    line2: str = ""
    city: str
    state: str = Field(..., min_length=2, max_length=2)
    zip: str = Field(..., pattern=r"^[0-9]{5}$")

    @classmethod
    def from_list(cls, parts: list[Any]) -> "Address":
        line1, line2, city, state, zip_code = (parts + [""] * 5)[:5]
        return cls(line1=line1, line2=line2 or "", city=city, state=state, zip=zip_code)

    def to_list(self) -> list[str]:
        return [self.line1, self.line2, self.city, self.state, self.zip]


class CateringAddress(BaseModel):
    line1: str
    city: str
    state: str = Field(..., min_length=2, max_length=2)
    zip: str = Field(..., pattern=r"^[0-9]{5}$")

    @classmethod
    def from_list(cls, parts: list[Any]) -> "CateringAddress":
        line1, city, state, zip_code = (parts + [""] * 4)[:4]
        return cls(line1=line1, city=city, state=state, zip=zip_code)

    def to_list(self) -> list[str]:
        return [self.line1, self.city, self.state, self.zip]


class Total(BaseModel):
    subtotal: float = Field(..., allow_inf_nan=False)
    tax: float = Field(..., allow_inf_nan=False)
    grand_total: float = Field(..., allow_inf_nan=False)

    @classmethod
    def from_list(cls, parts: list[Any]) -> "Total":
        subtotal, tax, grand_total = (float(p) for p in parts[:3])
        return cls(subtotal=subtotal, tax=tax, grand_total=grand_total)

    def to_list(self) -> list[float]:
        return [self.subtotal, self.tax, self.grand_total]

    @property
    def grand_total_minor_units(self) -> int:
        """Grand total in cents, rounded half-up from its decimal text."""
        cents = Decimal(str(self.grand_total)) * 100
        return int(cents.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class CakeDetails(BaseModel):
    cake_type: CakeType
    size_or_shape_or_letter: str
    color: str
    message: str

    def to_list(self) -> list[str]:
        return [self.cake_type.value, self.size_or_shape_or_letter, self.color, self.message]


class RegularOrder(BaseModel):
    kind: Literal["regular"] = "regular"
    id: str = Field(..., min_length=10, max_length=10)
    order_time: str
    name: str
    delivery_method: DeliveryMethod
    payment_method: PaymentMethod
    date_for_order: str
    address: Address | None = None
    email: str
    phone: str
    total: Total
    cart: list[Any]
    masked_card_last4: str | None = None

    def to_document(self) -> dict[str, Any]:
        doc = {
            "_id": self.id,
            "orderTime": self.order_time,
            "name": self.name,
            "deliveryMethod": self.delivery_method.value,
            "paymentMethod": self.payment_method.value,
            "dateForOrder": self.date_for_order,
            "address": self.address.to_list() if self.address else None,
            "email": self.email,
            "phone": self.phone,
            "total": self.total.to_list(),
            "cart": self.cart,
        }
        if self.masked_card_last4 is not None:
            doc["last4"] = self.masked_card_last4
        return doc


class CustomOrder(BaseModel):
    kind: Literal["custom"] = "custom"
    id: str = Field(..., min_length=10, max_length=10)
    order_time: str
    order_type: CustomOrderType
    order_details: CakeDetails | str
    name: str
    delivery_method: DeliveryMethod
    date_for_order: str
    address: Address | None = None
    email: str
    phone: str

    def to_document(self) -> dict[str, Any]:
        details = self.order_details
        return {
            "_id": self.id,
            "orderTime": self.order_time,
            "orderType": self.order_type.value,
            "orderDetails": details.to_list() if isinstance(details, CakeDetails) else details,
            "name": self.name,
            "deliveryMethod": self.delivery_method.value,
            "dateForOrder": self.date_for_order,
            "address": self.address.to_list() if self.address else None,
            "email": self.email,
            "phone": self.phone,
        }


class CateringOrder(BaseModel):
    kind: Literal["catering"] = "catering"
    id: str = Field(..., min_length=10, max_length=10)
    order_time: str
    name: str
    event_type: str
    guest_count: int = Field(..., ge=0, le=999)
    delivery_method: DeliveryMethod
    date_for_order: str
    address: CateringAddress | None = None
    email: str
    phone: str
    message: str

    def to_document(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            "orderTime": self.order_time,
            "name": self.name,
            "eventType": self.event_type,
            "guestNum": self.guest_count,
            "deliveryMethod": self.delivery_method.value,
            "dateForOrder": self.date_for_order,
            "address": self.address.to_list() if self.address else None,
            "email": self.email,
            "phone": self.phone,
            "message": self.message,
        }


Order = Annotated[Union[RegularOrder, CustomOrder, CateringOrder], Field(discriminator="kind")]

ORDER_COLLECTIONS = {
    "regular": "regularOrders",
    "custom": "customOrders",
    "catering": "cateringOrders",
}

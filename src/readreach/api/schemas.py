"""Pydantic request/response schemas for the HTTP API.

Request bodies accept the camelCase keys the web client sends as well as
snake_case. Responses expose the aggregate identifier as ``_id``.
"""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
class AddBookRequest(BaseModel):
    title: str
    author: str | None = None
    image: str | None = None
    description: str | None = None
    category: str | None = None
    price: float = Field(ge=0)
    quantity: int = Field(default=1, ge=0)
    librarian_name: str | None = Field(
        default=None, validation_alias=AliasChoices("librarian_name", "librarianName")
    )
    published_status: str = Field(
        default="draft", validation_alias=AliasChoices("published_status", "publishedStatus")
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "title": "The Left Hand of Darkness",
                    "author": "Ursula K. Le Guin",
                    "category": "Fiction",
                    "price": 12.5,
                    "quantity": 3,
                    "published_status": "published",
                }
            ]
        }
    }


class UpdateBookRequest(BaseModel):
    title: str | None = None
    author: str | None = None
    image: str | None = None
    description: str | None = None
    category: str | None = None
    price: float | None = Field(default=None, ge=0)
    quantity: int | None = Field(default=None, ge=0)


class PublishStatusRequest(BaseModel):
    published_status: str = Field(validation_alias=AliasChoices("published_status", "publishedStatus"))


class BookResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(serialization_alias="_id")
    title: str
    author: str | None = None
    image: str | None = None
    description: str | None = None
    category: str | None = None
    price: float
    quantity: int | None = None
    librarian_email: str
    librarian_name: str | None = None
    published_status: str
    added_at: datetime | None = None


class BookRemovedResponse(BaseModel):
    deleted: bool = True
    orders_removed: int


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
class RegisterUserRequest(BaseModel):
    """Profile details sent on first sign-in. Email and role are never read from here."""

    name: str | None = None
    photo_url: str | None = Field(
        default=None, validation_alias=AliasChoices("photo_url", "photoURL", "photoUrl", "image")
    )


class ChangeRoleRequest(BaseModel):
    role: str = Field(validation_alias=AliasChoices("role", "roleOfUser"))


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(serialization_alias="_id")
    email: str
    name: str | None = None
    photo_url: str | None = None
    role: str
    created_at: datetime | None = None


class RegisterUserResponse(BaseModel):
    created: bool
    message: str
    user: UserResponse


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    book_id: str = Field(validation_alias=AliasChoices("book_id", "bookId"))
    customer_name: str | None = Field(
        default=None, validation_alias=AliasChoices("customer_name", "customerName", "name")
    )
    phone: str | None = None
    address: str | None = None


class OrderStatusRequest(BaseModel):
    status: str = Field(validation_alias=AliasChoices("status", "orderStatus"))


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(serialization_alias="_id")
    book_id: str
    book_name: str | None = None
    email: str
    customer_name: str | None = None
    phone: str | None = None
    address: str | None = None
    librarian_email: str | None = None
    price: float
    status: str
    payment: str
    transaction_id: str | None = None
    created_at: datetime | None = None


class OrderIdResponse(BaseModel):
    order_id: str


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------
class CheckoutRequest(BaseModel):
    order_name: str | None = Field(default=None, validation_alias=AliasChoices("orderName", "order_name"))
    email: str | None = None
    price: str | float | None = None
    order_id: str = Field(validation_alias=AliasChoices("orderId", "order_id", "bookId"))


class CheckoutResponse(BaseModel):
    url: str


class PaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(serialization_alias="_id")
    transaction_id: str
    session_id: str | None = None
    order_id: str | None = None
    amount: int | None = None
    currency: str | None = None
    book_name: str | None = None
    email: str | None = None
    payment_status: str | None = None
    created_at: datetime | None = None


class PaymentStatusResponse(BaseModel):
    session_id: str
    payment_status: str
    transaction_id: str | None = None
    order_id: str | None = None
    recorded: bool


class StatusResponse(BaseModel):
    status: str = "ok"

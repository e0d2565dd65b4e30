"""Pydantic request/response schemas for the marketplace API.

These are external contracts, kept separate from the internal protean commands.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------
class RegisterProfileRequest(BaseModel):
    user_id: str
    name: str
    role: str = Field(pattern="^(client|supplier|admin)$")
    phone: str | None = None
    has_smartphone: bool = True
    bio: str | None = None
    avatar_url: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "user_id": "auth-7f3c",
                    "name": "Tigist Alemu",
                    "role": "supplier",
                    "phone": "+251911234567",
                    "has_smartphone": False,
                }
            ]
        }
    }


class ProfileIdResponse(BaseModel):
    profile_id: str


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
class ListProductRequest(BaseModel):
    name: str
    price: float = Field(ge=0)
    stock: int = Field(ge=0, default=0)
    category: str | None = None
    description: str | None = None
    image_url: str | None = None


class ChangeProductStatusRequest(BaseModel):
    status: str


class ProductIdResponse(BaseModel):
    product_id: str


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)


class AddToCartResponse(BaseModel):
    status: str
    item_id: str
    message: str


class UpdateCartQuantityRequest(BaseModel):
    new_quantity: int


class CheckoutRequest(BaseModel):
    delivery_address: str = ""


class CheckoutResponse(BaseModel):
    order_ids: list[str]
    message: str


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class CancelOrderRequest(BaseModel):
    reason: str | None = None


class TransitionResponse(BaseModel):
    order_id: str
    outcome: str
    status: str | None = None


# ---------------------------------------------------------------------------
# SMS relay
# ---------------------------------------------------------------------------
class SmsRelayRequest(BaseModel):
    phone: str | None = None
    keyword: str | None = None
    # Some gateways forward the raw text body instead of a parsed keyword
    message: str | None = None


class StatusResponse(BaseModel):
    status: str = "ok"

"""FastAPI routes for the marketplace."""

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from fastapi.responses import JSONResponse, Response
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from marketplace.api.schemas import (
    AddToCartRequest,
    AddToCartResponse,
    CancelOrderRequest,
    ChangeProductStatusRequest,
    CheckoutRequest,
    CheckoutResponse,
    ListProductRequest,
    ProductIdResponse,
    ProfileIdResponse,
    RegisterProfileRequest,
    SmsRelayRequest,
    StatusResponse,
    TransitionResponse,
    UpdateCartQuantityRequest,
)
from marketplace.cart.cart import AddOutcome
from marketplace.cart.items import AddToCart, RemoveFromCart, UpdateCartQuantity
from marketplace.catalogue.listing import ChangeProductStatus, ListProduct
from marketplace.checkout.checkout import Checkout
from marketplace.dashboard import queries
from marketplace.domain import logger
from marketplace.order.order import OrderStatus
from marketplace.order.transitions import (
    AcceptOrder,
    CancelOrder,
    MarkOrderReady,
    RecordDelivery,
    TransitionOutcome,
)
from marketplace.profile.profile import Role, normalize_phone
from marketplace.profile.registration import RegisterProfile
from marketplace.profile.verification import VerifyProfile
from marketplace.shared.context import ActorContext
from marketplace.shared.errors import NotPermittedError, StaleTransitionError
from marketplace.sms.relay import ReceiveSmsKeyword, RelayOutcome
from marketplace.utils.logging import add_context


# ---------------------------------------------------------------------------
# Actor resolution
# ---------------------------------------------------------------------------
async def current_actor(x_profile_id: str = Header(...)) -> ActorContext:
    """Resolve the calling profile from the ``X-Profile-Id`` header."""
    try:
        actor = ActorContext.load(x_profile_id)
    except ObjectNotFoundError:
        raise HTTPException(status_code=401, detail="Unknown profile") from None

    add_context(profile_id=actor.profile_id, role=actor.role)
    return actor


def _require_self_or_admin(actor: ActorContext, profile_id: str) -> None:
    if actor.profile_id != profile_id and actor.role != Role.ADMIN.value:
        raise NotPermittedError("You can only view your own dashboard")


# ---------------------------------------------------------------------------
# Profile Router
# ---------------------------------------------------------------------------
profile_router = APIRouter(prefix="/profiles", tags=["profiles"])


@profile_router.post("", status_code=201, response_model=ProfileIdResponse)
async def register_profile(body: RegisterProfileRequest) -> ProfileIdResponse:
    command = RegisterProfile(
        user_id=body.user_id,
        name=body.name,
        role=body.role,
        phone=body.phone,
        has_smartphone=body.has_smartphone,
        bio=body.bio,
        avatar_url=body.avatar_url,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProfileIdResponse(profile_id=result)


@profile_router.get("/{profile_id}")
async def get_supplier_profile(profile_id: str):
    return queries.supplier_profile(profile_id)


@profile_router.put("/{profile_id}/verify", response_model=StatusResponse)
async def verify_profile(profile_id: str, actor: ActorContext = Depends(current_actor)) -> StatusResponse:
    command = VerifyProfile(profile_id=profile_id, actor_id=actor.profile_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="verified")


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.get("")
async def list_active_products(category: str | None = None):
    return queries.active_products(category=category)


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def list_product(body: ListProductRequest, actor: ActorContext = Depends(current_actor)) -> ProductIdResponse:
    command = ListProduct(
        actor_id=actor.profile_id,
        name=body.name,
        price=body.price,
        stock=body.stock,
        category=body.category,
        description=body.description,
        image_url=body.image_url,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.put("/{product_id}/status", response_model=StatusResponse)
async def change_product_status(
    product_id: str, body: ChangeProductStatusRequest, actor: ActorContext = Depends(current_actor)
) -> StatusResponse:
    command = ChangeProductStatus(actor_id=actor.profile_id, product_id=product_id, status=body.status)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])

_ADD_MESSAGES = {
    AddOutcome.ADDED.value: "Added to cart",
    AddOutcome.ALREADY_IN_CART.value: "This item is already in your cart",
}


@cart_router.get("")
async def get_cart(actor: ActorContext = Depends(current_actor)):
    return queries.cart_view(actor.profile_id)


@cart_router.post("/items", response_model=AddToCartResponse)
async def add_cart_item(body: AddToCartRequest, actor: ActorContext = Depends(current_actor)) -> AddToCartResponse:
    command = AddToCart(actor_id=actor.profile_id, product_id=body.product_id, quantity=body.quantity)
    result = current_domain.process(command, asynchronous=False)
    return AddToCartResponse(status=result["status"], item_id=result["item_id"], message=_ADD_MESSAGES[result["status"]])


@cart_router.put("/items/{item_id}", response_model=StatusResponse)
async def update_cart_item_quantity(
    item_id: str, body: UpdateCartQuantityRequest, actor: ActorContext = Depends(current_actor)
) -> StatusResponse:
    command = UpdateCartQuantity(actor_id=actor.profile_id, item_id=item_id, new_quantity=body.new_quantity)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/items/{item_id}", response_model=StatusResponse)
async def remove_cart_item(item_id: str, actor: ActorContext = Depends(current_actor)) -> StatusResponse:
    command = RemoveFromCart(actor_id=actor.profile_id, item_id=item_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.post("/checkout", status_code=201, response_model=CheckoutResponse)
async def checkout(body: CheckoutRequest, actor: ActorContext = Depends(current_actor)) -> CheckoutResponse:
    command = Checkout(actor_id=actor.profile_id, delivery_address=body.delivery_address)
    order_ids = current_domain.process(command, asynchronous=False)

    if not order_ids:
        return CheckoutResponse(order_ids=[], message="Your cart is empty")
    return CheckoutResponse(
        order_ids=order_ids,
        message="Orders placed successfully! Payment will be collected on delivery.",
    )


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


def _apply_transition(command, target: OrderStatus) -> TransitionResponse:
    result = current_domain.process(command, asynchronous=False)
    if result["outcome"] == TransitionOutcome.STALE.value:
        raise StaleTransitionError(result["order_id"], target.value)
    return TransitionResponse(**result)


@order_router.get("")
async def list_my_orders(actor: ActorContext = Depends(current_actor)):
    return queries.buyer_orders(actor.profile_id)


@order_router.put("/{order_id}/accept", response_model=TransitionResponse)
async def accept_order(order_id: str, actor: ActorContext = Depends(current_actor)) -> TransitionResponse:
    return _apply_transition(AcceptOrder(actor_id=actor.profile_id, order_id=order_id), OrderStatus.IN_PROGRESS)


@order_router.put("/{order_id}/ready", response_model=TransitionResponse)
async def mark_order_ready(order_id: str, actor: ActorContext = Depends(current_actor)) -> TransitionResponse:
    return _apply_transition(MarkOrderReady(actor_id=actor.profile_id, order_id=order_id), OrderStatus.READY)


@order_router.put("/{order_id}/cancel", response_model=TransitionResponse)
async def cancel_order(
    order_id: str, body: CancelOrderRequest, actor: ActorContext = Depends(current_actor)
) -> TransitionResponse:
    command = CancelOrder(actor_id=actor.profile_id, order_id=order_id, reason=body.reason)
    return _apply_transition(command, OrderStatus.CANCELLED)


@order_router.put("/{order_id}/delivered", response_model=TransitionResponse)
async def record_delivery(order_id: str, actor: ActorContext = Depends(current_actor)) -> TransitionResponse:
    return _apply_transition(RecordDelivery(actor_id=actor.profile_id, order_id=order_id), OrderStatus.DELIVERED)


# ---------------------------------------------------------------------------
# Supplier & Admin Routers
# ---------------------------------------------------------------------------
supplier_router = APIRouter(prefix="/suppliers", tags=["suppliers"])
admin_router = APIRouter(prefix="/admin", tags=["admin"])


@supplier_router.get("/{supplier_id}/dashboard")
async def supplier_dashboard(supplier_id: str, actor: ActorContext = Depends(current_actor)):
    _require_self_or_admin(actor, supplier_id)
    return queries.supplier_dashboard(supplier_id)


@supplier_router.get("/{supplier_id}/orders")
async def supplier_orders(supplier_id: str, actor: ActorContext = Depends(current_actor)):
    _require_self_or_admin(actor, supplier_id)
    return queries.supplier_orders(supplier_id)


@admin_router.get("/stats")
async def admin_stats(actor: ActorContext = Depends(current_actor)):
    actor.require_role(Role.ADMIN)
    return queries.admin_stats()


# ---------------------------------------------------------------------------
# SMS Relay Router
# ---------------------------------------------------------------------------
sms_router = APIRouter(prefix="/sms", tags=["sms"])

SMS_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

_RELAY_STATUS_CODES = {
    RelayOutcome.UNRECOGNIZED.value: 400,
    RelayOutcome.PROFILE_NOT_FOUND.value: 404,
}


def _sms_response(status_code: int, content: dict) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content, headers=SMS_CORS_HEADERS)


@sms_router.options("")
async def sms_preflight() -> Response:
    return Response(status_code=200, headers=SMS_CORS_HEADERS)


@sms_router.post("")
async def receive_sms(request: Request) -> JSONResponse:
    """Webhook for the SMS gateway: ``{phone, keyword}`` in, relay outcome out.

    The body is parsed here rather than by FastAPI so that every reply,
    malformed requests included, carries the CORS headers the gateway needs.
    """
    try:
        body = SmsRelayRequest.model_validate(await request.json())
    except ValueError:
        return _sms_response(400, {"error": "Invalid request body"})
    if not body.phone:
        return _sms_response(400, {"error": "Phone number is required"})

    phone = normalize_phone(body.phone)
    try:
        result = current_domain.process(
            ReceiveSmsKeyword(phone=phone, keyword=body.keyword or body.message),
            asynchronous=False,
        )
    except ValidationError as exc:
        logger.warning("SMS rejected", phone=phone, errors=exc.messages)
        return _sms_response(400, {"error": "Invalid phone number or keyword"})
    except Exception:
        logger.exception("SMS relay failed", phone=phone)
        return _sms_response(500, {"error": "Failed to update orders"})

    status_code = _RELAY_STATUS_CODES.get(result["outcome"])
    if status_code is not None:
        return _sms_response(status_code, {"error": result["message"]})

    return _sms_response(
        200,
        {
            "success": result["outcome"] == RelayOutcome.UPDATED.value,
            "message": result["message"],
            "updated_count": result["updated_count"],
        },
    )

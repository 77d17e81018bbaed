"""Checkout workflow: draft -> validated -> committed.

Prices are computed with Decimal and quantized to cents; the stored total is
always re-derived from the product at commit time.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Optional

from pymongo.errors import PyMongoError

from ecologika.core.config import settings
from ecologika.models.product import Product
from ecologika.models.purchase import CheckoutQuote, CheckoutRequest, Purchase
from ecologika.models.user import Profile

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


class CheckoutValidationError(Exception):
    def __init__(self, errors: Dict[str, str]):
        super().__init__(", ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = errors


class CheckoutUnavailable(Exception):
    pass


def to_decimal(value) -> Decimal:
    return Decimal(str(value))


def quantity_in_stock(product: Product, quantity: int) -> bool:
    return 1 <= quantity <= product.quantity


def compute_co2_saved(product: Product, quantity: int) -> Optional[float]:
    if product.co2_savings is None:
        return None
    saved = to_decimal(product.co2_savings) * quantity
    return float(saved.quantize(CENTS, rounding=ROUND_HALF_UP))


def quote(product: Product, quantity: int, shipping_fee: Optional[float] = None) -> CheckoutQuote:
    fee = to_decimal(settings.SHIPPING_FEE if shipping_fee is None else shipping_fee)
    unit_price = to_decimal(product.price)
    subtotal = (unit_price * quantity).quantize(CENTS, rounding=ROUND_HALF_UP)
    total = (subtotal + fee).quantize(CENTS, rounding=ROUND_HALF_UP)
    return CheckoutQuote(
        product_id=product.id,
        unit_price=float(unit_price),
        quantity=quantity,
        subtotal=float(subtotal),
        shipping_fee=float(fee.quantize(CENTS)),
        total=float(total),
        co2_saved=compute_co2_saved(product, quantity),
    )


def validate_checkout(product: Product, request: CheckoutRequest):
    """Raise CheckoutValidationError with one message key per offending field."""
    errors = {}
    shipping = request.shipping
    if not (shipping.address or "").strip():
        errors["address"] = "checkout.address_required"
    if not (shipping.city or "").strip():
        errors["city"] = "checkout.city_required"
    if not (shipping.phone or "").strip():
        errors["phone"] = "checkout.phone_required"
    if not quantity_in_stock(product, request.quantity):
        errors["quantity"] = "checkout.quantity_invalid"
    if errors:
        raise CheckoutValidationError(errors)


async def commit_purchase(db, buyer: Profile, product: Product, request: CheckoutRequest) -> Purchase:
    validate_checkout(product, request)
    pricing = quote(product, request.quantity)

    purchase = Purchase(
        product_id=product.id,
        buyer_id=buyer.id,
        seller_id=product.seller_id,
        quantity=request.quantity,
        unit_price=pricing.unit_price,
        shipping_fee=pricing.shipping_fee,
        total_price=pricing.total,
        co2_saved=pricing.co2_saved,
        status="completed",
        shipping=request.shipping,
    )

    try:
        await db.purchases.insert_one(purchase.model_dump())
    except PyMongoError as e:
        logger.error(f"Failed to record purchase of {product.id} by {buyer.id}: {e}")
        raise CheckoutUnavailable(str(e))

    logger.info(f"Purchase {purchase.id}: {request.quantity} x {product.id} for {pricing.total}")
    return purchase

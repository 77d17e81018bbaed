from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from ecologika.models.purchase import CheckoutQuote, CheckoutQuoteRequest, CheckoutRequest, Purchase
from ecologika.models.user import Profile
from ecologika.db.session import get_db
from ecologika.services.auth import get_current_user
from ecologika.services.catalog import find_visible_product
from ecologika.services.checkout import (
    CheckoutUnavailable,
    CheckoutValidationError,
    commit_purchase,
    quantity_in_stock,
    quote,
)
from ecologika.services.i18n import Translator, get_translator
from ecologika.services.log import log_activity
from ecologika.services.notification import notify_quietly

router = APIRouter()

async def get_checkout_product(db, product_id: str, tr: Translator):
    product = await find_visible_product(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail=tr.t("products.not_found"))
    return product

@router.post("/checkout/quote", response_model=CheckoutQuote)
async def quote_checkout(
    quote_request: CheckoutQuoteRequest,
    current_user: Profile = Depends(get_current_user),
    db=Depends(get_db),
    tr: Translator = Depends(get_translator)
):
    product = await get_checkout_product(db, quote_request.product_id, tr)
    if not quantity_in_stock(product, quote_request.quantity):
        raise HTTPException(status_code=400, detail=tr.t("checkout.quantity_invalid"))
    return quote(product, quote_request.quantity)

@router.post("/checkout", response_model=Purchase)
async def checkout(
    request: Request,
    checkout_request: CheckoutRequest,
    current_user: Profile = Depends(get_current_user),
    db=Depends(get_db),
    tr: Translator = Depends(get_translator)
):
    product = await get_checkout_product(db, checkout_request.product_id, tr)

    try:
        purchase = await commit_purchase(db, current_user, product, checkout_request)
    except CheckoutValidationError as e:
        return JSONResponse(
            status_code=400,
            content={
                "detail": tr.t("checkout.invalid"),
                "errors": {field: tr.t(key) for field, key in e.errors.items()},
            }
        )
    except CheckoutUnavailable:
        raise HTTPException(status_code=503, detail=tr.t("checkout.error"))

    await log_activity(
        db,
        user_id=current_user.id,
        actor_name=current_user.name,
        action="purchase_completed",
        details=f"Bought {purchase.quantity} {product.unit} of '{product.name}' for {purchase.total_price}",
        target_id=purchase.id,
        target_type="purchase",
        request=request
    )

    metadata = {"product_id": product.id, "product_name": product.name, "purchase_id": purchase.id}
    await notify_quietly(
        db,
        user_id=current_user.id,
        title=tr.t("checkout.success"),
        message=f"{product.name}: {purchase.quantity} {product.unit}",
        notification_type="success",
        action_url="/my-purchases",
        metadata=metadata
    )
    await notify_quietly(
        db,
        user_id=product.seller_id,
        title=tr.t("checkout.sale"),
        message=f"{product.name}: {purchase.quantity} {product.unit} ({current_user.name})",
        notification_type="success",
        action_url="/sold-products",
        metadata=metadata
    )

    return purchase

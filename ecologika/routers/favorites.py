from fastapi import APIRouter, Depends, HTTPException
from typing import List
from pymongo.errors import PyMongoError
import logging

from ecologika.models.product import Listing
from ecologika.db.session import get_db
from ecologika.services.catalog import VISIBLE_QUERY, CatalogLoader, CatalogUnavailable, find_visible_product
from ecologika.services.i18n import Translator, get_translator
from ecologika.services.images import ViewLifetime
from ecologika.services.session import SessionStore, get_session

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("/favorites", response_model=List[Listing])
async def get_saved_products(
    session: SessionStore = Depends(get_session),
    db=Depends(get_db),
    tr: Translator = Depends(get_translator)
):
    """Saved listings that are still visible in the catalog"""
    saved = session.saved_product_ids()
    if not saved:
        return []

    lifetime = ViewLifetime()
    try:
        return await CatalogLoader(db, lifetime).load({"id": {"$in": saved}, **VISIBLE_QUERY})
    except CatalogUnavailable:
        raise HTTPException(status_code=503, detail=tr.t("products.load_error"))
    finally:
        lifetime.close()

@router.post("/favorites/{product_id}")
async def save_product(
    product_id: str,
    session: SessionStore = Depends(get_session),
    db=Depends(get_db),
    tr: Translator = Depends(get_translator)
):
    if not session.is_product_saved(product_id) and not await find_visible_product(db, product_id):
        raise HTTPException(status_code=404, detail=tr.t("products.not_found"))

    try:
        profile = await session.save_product(product_id)
    except PyMongoError as e:
        logger.error(f"Failed to save product {product_id} for {session.profile.id}: {e}")
        raise HTTPException(status_code=503, detail=tr.t("favorites.error"))

    return {"product_id": product_id, "saved": True, "saved_products": profile.saved_products}

@router.delete("/favorites/{product_id}")
async def unsave_product(
    product_id: str,
    session: SessionStore = Depends(get_session),
    tr: Translator = Depends(get_translator)
):
    try:
        profile = await session.unsave_product(product_id)
    except PyMongoError as e:
        logger.error(f"Failed to unsave product {product_id} for {session.profile.id}: {e}")
        raise HTTPException(status_code=503, detail=tr.t("favorites.error"))

    return {"product_id": product_id, "saved": False, "saved_products": profile.saved_products}

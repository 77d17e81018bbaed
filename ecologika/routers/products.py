from fastapi import APIRouter, Depends, HTTPException, Request
from typing import List, Optional
from datetime import datetime
from pydantic import ValidationError
from pymongo.errors import PyMongoError
import logging

from ecologika.models.catalog import CatalogPage, DEFAULT_PRICE_RANGE, FilterOptions, ProductFilters
from ecologika.models.product import (
    GalleryState,
    Listing,
    Product,
    ProductCreate,
    ProductDetail,
    ProductEdit,
)
from ecologika.models.user import Profile
from ecologika.db.session import get_db
from ecologika.services.auth import get_current_user
from ecologika.services.catalog import CatalogLoader, CatalogUnavailable, find_visible_product
from ecologika.services.filters import filter_listings, has_active_filters, load_filter_options
from ecologika.services.i18n import Translator, get_translator
from ecologika.services.images import GalleryCursor, ImageSetResolver, ViewLifetime
from ecologika.services.log import log_activity

logger = logging.getLogger(__name__)
router = APIRouter()

def composite_location(city: Optional[str], country: Optional[str]) -> str:
    return ", ".join(part for part in (city, country) if part)

async def get_owned_product(db, product_id: str, current_user: Profile, tr: Translator) -> Product:
    product = await db.products.find_one({"id": product_id})
    if not product:
        raise HTTPException(status_code=404, detail=tr.t("products.not_found"))
    if product["seller_id"] != current_user.id:
        raise HTTPException(status_code=403, detail=tr.t("products.not_owner"))
    return Product(**product)

@router.get("/products", response_model=CatalogPage)
async def get_products(
    q: Optional[str] = "",
    material: Optional[str] = "",
    location: Optional[str] = "",
    country: Optional[str] = "",
    min_price: float = DEFAULT_PRICE_RANGE[0],
    max_price: float = DEFAULT_PRICE_RANGE[1],
    current_user: Profile = Depends(get_current_user),
    db=Depends(get_db),
    tr: Translator = Depends(get_translator)
):
    try:
        filters = ProductFilters(
            material=material or "",
            location=location or "",
            country=country or "",
            price_range=(min_price, max_price),
        )
    except ValidationError:
        raise HTTPException(status_code=400, detail=tr.t("products.invalid_filters"))

    lifetime = ViewLifetime()
    try:
        listings = await CatalogLoader(db, lifetime).load()
    except CatalogUnavailable:
        raise HTTPException(status_code=503, detail=tr.t("products.load_error"))
    finally:
        lifetime.close()

    filtered = filter_listings(listings, q, filters)
    return CatalogPage(
        products=filtered,
        total=len(filtered),
        filters_active=has_active_filters(filters, q),
    )

@router.get("/products/filter-options", response_model=FilterOptions)
async def get_filter_options(
    current_user: Profile = Depends(get_current_user),
    db=Depends(get_db),
    tr: Translator = Depends(get_translator)
):
    try:
        return await load_filter_options(db)
    except PyMongoError as e:
        logger.error(f"Failed to load filter options: {e}")
        raise HTTPException(status_code=503, detail=tr.t("products.load_error"))

@router.get("/products/{product_id}", response_model=ProductDetail)
async def get_product(
    product_id: str,
    image: int = 0,
    current_user: Profile = Depends(get_current_user),
    db=Depends(get_db),
    tr: Translator = Depends(get_translator)
):
    product = await find_visible_product(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail=tr.t("products.not_found"))

    lifetime = ViewLifetime()
    try:
        listing = (await CatalogLoader(db, lifetime).enrich([product]))[0]
    finally:
        lifetime.close()

    cursor = GalleryCursor(listing.total_images, image)
    gallery = GalleryState(
        index=cursor.index,
        image_url=listing.images[cursor.index].image_url if listing.images else listing.display_image,
        counter=cursor.counter,
        has_navigation=cursor.has_navigation,
    )
    return ProductDetail(
        **listing.model_dump(),
        gallery=gallery,
        is_saved=product.id in current_user.saved_products,
    )

@router.post("/products", response_model=Product)
async def create_product(
    request: Request,
    product_data: ProductCreate,
    current_user: Profile = Depends(get_current_user),
    db=Depends(get_db),
    tr: Translator = Depends(get_translator)
):
    if current_user.user_type != "seller" or not current_user.is_approved:
        raise HTTPException(status_code=403, detail=tr.t("products.sellers_only"))

    product_dict = product_data.model_dump()
    if not product_dict.get("location"):
        product_dict["location"] = composite_location(product_data.city, product_data.country)

    product_obj = Product(
        **product_dict,
        seller_id=current_user.id,
        seller_name=current_user.name,
        seller_company=current_user.company,
        is_active=True,
        approval_status="pending"  # All new products require admin approval
    )
    try:
        await db.products.insert_one(product_obj.model_dump())
    except PyMongoError as e:
        logger.error(f"Failed to create product for {current_user.id}: {e}")
        raise HTTPException(status_code=503, detail=tr.t("products.update_error"))

    await log_activity(
        db,
        user_id=current_user.id,
        actor_name=current_user.name,
        action="product_created",
        details=f"Created product '{product_obj.name}' ({product_obj.material}) for {product_obj.price}",
        target_id=product_obj.id,
        target_type="product",
        request=request
    )

    return product_obj

@router.get("/my-products", response_model=List[Listing])
async def get_my_products(
    current_user: Profile = Depends(get_current_user),
    db=Depends(get_db),
    tr: Translator = Depends(get_translator)
):
    lifetime = ViewLifetime()
    try:
        return await CatalogLoader(db, lifetime).load({"seller_id": current_user.id})
    except CatalogUnavailable:
        raise HTTPException(status_code=503, detail=tr.t("products.load_error"))
    finally:
        lifetime.close()

@router.put("/products/{product_id}", response_model=Product)
async def edit_product(
    product_id: str,
    product_data: ProductEdit,
    current_user: Profile = Depends(get_current_user),
    db=Depends(get_db),
    tr: Translator = Depends(get_translator)
):
    product = await get_owned_product(db, product_id, current_user, tr)

    update_data = product_data.model_dump(exclude_none=True)
    if not update_data:
        return product

    if ("city" in update_data or "country" in update_data) and "location" not in update_data:
        merged = product.model_copy(update=update_data)
        update_data["location"] = composite_location(merged.city, merged.country)
    update_data["updated_at"] = datetime.utcnow()

    try:
        await db.products.update_one({"id": product_id}, {"$set": update_data})
    except PyMongoError as e:
        logger.error(f"Failed to update product {product_id}: {e}")
        raise HTTPException(status_code=503, detail=tr.t("products.update_error"))

    return Product(**await db.products.find_one({"id": product_id}))

@router.put("/products/{product_id}/status", response_model=Product)
async def toggle_product_status(
    product_id: str,
    current_user: Profile = Depends(get_current_user),
    db=Depends(get_db),
    tr: Translator = Depends(get_translator)
):
    """Activate or deactivate a listing; deactivation stands in for deletion"""
    product = await get_owned_product(db, product_id, current_user, tr)

    try:
        await db.products.update_one(
            {"id": product_id},
            {"$set": {"is_active": not product.is_active, "updated_at": datetime.utcnow()}}
        )
    except PyMongoError as e:
        logger.error(f"Failed to toggle product {product_id}: {e}")
        raise HTTPException(status_code=503, detail=tr.t("products.update_error"))

    return Product(**await db.products.find_one({"id": product_id}))

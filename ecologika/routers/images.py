from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from typing import List
from datetime import datetime
from pymongo.errors import PyMongoError
import logging

from ecologika.core.config import settings
from ecologika.models.image import ImagePositionRequest, ImageReorderRequest, ProductImage
from ecologika.models.user import Profile
from ecologika.db.session import get_db
from ecologika.routers.products import get_owned_product
from ecologika.services import storage
from ecologika.services.auth import get_current_user
from ecologika.services.catalog import VISIBLE_QUERY
from ecologika.services.i18n import Translator, get_translator
from ecologika.services.images import (
    fetch_product_images,
    move_image,
    order_images,
    remove_image_at,
    renumber,
)

logger = logging.getLogger(__name__)
router = APIRouter()

async def persist_order(db, images: List[ProductImage], tr: Translator):
    try:
        for image in images:
            await db.product_images.update_one(
                {"id": image.id},
                {"$set": {"image_order": image.image_order}}
            )
    except PyMongoError as e:
        logger.error(f"Failed to persist image order: {e}")
        raise HTTPException(status_code=503, detail=tr.t("images.save_error"))

def discard_uploads(paths: List[str]):
    for path in paths:
        if not storage.delete(path):
            logger.warning(f"Uploaded file {path} could not be cleaned up")

async def get_image_sequence(db, product_id: str, tr: Translator) -> List[ProductImage]:
    try:
        return order_images(await fetch_product_images(db, product_id))
    except PyMongoError as e:
        logger.error(f"Failed to load images of {product_id}: {e}")
        raise HTTPException(status_code=503, detail=tr.t("products.load_error"))

@router.get("/products/{product_id}/images", response_model=List[ProductImage])
async def list_product_images(
    product_id: str,
    current_user: Profile = Depends(get_current_user),
    db=Depends(get_db),
    tr: Translator = Depends(get_translator)
):
    """Images of a visible listing, or of any listing to its seller"""
    product = await db.products.find_one({"id": product_id})
    visible = product and all(product.get(k) == v for k, v in VISIBLE_QUERY.items())
    if not product or (not visible and product["seller_id"] != current_user.id):
        raise HTTPException(status_code=404, detail=tr.t("products.not_found"))
    return await get_image_sequence(db, product_id, tr)

@router.post("/products/{product_id}/images", response_model=List[ProductImage])
async def upload_product_images(
    product_id: str,
    files: List[UploadFile] = File(...),
    current_user: Profile = Depends(get_current_user),
    db=Depends(get_db),
    tr: Translator = Depends(get_translator)
):
    await get_owned_product(db, product_id, current_user, tr)
    existing = await get_image_sequence(db, product_id, tr)

    if len(files) + len(existing) > settings.MAX_PRODUCT_IMAGES:
        raise HTTPException(status_code=400, detail=tr.t("images.limit", max=settings.MAX_PRODUCT_IMAGES))

    # Validate every file before writing any of them
    contents = []
    for file in files:
        if not file.content_type or not file.content_type.startswith('image/'):
            raise HTTPException(status_code=400, detail=tr.t("images.invalid_format"))
        content = await file.read()
        if len(content) > settings.MAX_IMAGE_SIZE:
            raise HTTPException(status_code=400, detail=tr.t("images.too_large", name=file.filename))
        contents.append((file, content))

    # All objects are stored before any row is written; a failure removes what was stored
    written = []
    new_images = []
    for index, (file, content) in enumerate(contents):
        path = storage.object_path(product_id, storage.image_extension(file.filename, file.content_type))
        try:
            url = storage.upload(content, path)
        except storage.StorageError:
            discard_uploads(written)
            raise HTTPException(status_code=503, detail=tr.t("images.save_error"))
        written.append(path)
        new_images.append(ProductImage(
            product_id=product_id,
            image_url=url,
            image_order=len(existing) + index + 1,
        ))

    try:
        await db.product_images.insert_many([image.model_dump() for image in new_images])
    except PyMongoError as e:
        logger.error(f"Failed to record images of {product_id}: {e}")
        discard_uploads(written)
        raise HTTPException(status_code=503, detail=tr.t("images.save_error"))

    await db.products.update_one({"id": product_id}, {"$set": {"updated_at": datetime.utcnow()}})
    return renumber(existing + new_images)

@router.put("/products/{product_id}/images/order", response_model=List[ProductImage])
async def reorder_product_images(
    product_id: str,
    reorder: ImageReorderRequest,
    current_user: Profile = Depends(get_current_user),
    db=Depends(get_db),
    tr: Translator = Depends(get_translator)
):
    await get_owned_product(db, product_id, current_user, tr)
    images = await get_image_sequence(db, product_id, tr)
    by_id = {image.id: image for image in images}

    if len(reorder.image_ids) != len(by_id) or set(reorder.image_ids) != set(by_id):
        raise HTTPException(status_code=400, detail=tr.t("images.invalid_order"))

    reordered = renumber(by_id[image_id] for image_id in reorder.image_ids)
    await persist_order(db, reordered, tr)
    return reordered

@router.put("/products/{product_id}/images/{image_id}/position", response_model=List[ProductImage])
async def move_product_image(
    product_id: str,
    image_id: str,
    move: ImagePositionRequest,
    current_user: Profile = Depends(get_current_user),
    db=Depends(get_db),
    tr: Translator = Depends(get_translator)
):
    """Drag-and-drop style move of one image; the others shift around it"""
    await get_owned_product(db, product_id, current_user, tr)
    images = await get_image_sequence(db, product_id, tr)

    index = next((i for i, image in enumerate(images) if image.id == image_id), None)
    if index is None:
        raise HTTPException(status_code=404, detail=tr.t("images.not_found"))
    if move.position >= len(images):
        raise HTTPException(status_code=400, detail=tr.t("images.invalid_position"))

    reordered = move_image(images, index, move.position)
    await persist_order(db, reordered, tr)
    return reordered

@router.delete("/products/{product_id}/images/{image_id}", response_model=List[ProductImage])
async def delete_product_image(
    product_id: str,
    image_id: str,
    current_user: Profile = Depends(get_current_user),
    db=Depends(get_db),
    tr: Translator = Depends(get_translator)
):
    await get_owned_product(db, product_id, current_user, tr)
    images = await get_image_sequence(db, product_id, tr)

    index = next((i for i, image in enumerate(images) if image.id == image_id), None)
    if index is None:
        raise HTTPException(status_code=404, detail=tr.t("images.not_found"))

    removed = images[index]
    try:
        await db.product_images.delete_one({"id": image_id})
    except PyMongoError as e:
        logger.error(f"Failed to delete image {image_id}: {e}")
        raise HTTPException(status_code=503, detail=tr.t("images.save_error"))

    # The row is gone already; a leftover file is only worth a warning
    if not storage.delete(storage.path_from_url(removed.image_url)):
        logger.warning(f"Stored file for image {image_id} was not removed")

    remaining = remove_image_at(images, index)
    await persist_order(db, remaining, tr)
    return remaining

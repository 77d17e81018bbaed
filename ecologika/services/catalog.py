import asyncio
import logging
from collections import defaultdict
from typing import Dict, List, Optional

from pymongo.errors import PyMongoError

from ecologika.models.image import ProductImage
from ecologika.models.product import Listing, Product
from ecologika.services.images import ImageSetResolver, ViewLifetime, select_display_image

logger = logging.getLogger(__name__)

# Listings hidden by is_active=false or any non-approved status never reach the catalog
VISIBLE_QUERY = {"is_active": True, "approval_status": "approved"}


class CatalogUnavailable(Exception):
    pass


def to_listing(product: Product, images: List[ProductImage]) -> Listing:
    return Listing(
        **product.model_dump(),
        images=images,
        display_image=select_display_image(images, product.image_url),
        total_images=len(images),
    )


async def find_visible_product(db, product_id: str) -> Optional[Product]:
    doc = await db.products.find_one({"id": product_id, **VISIBLE_QUERY})
    return Product(**doc) if doc else None


class CatalogLoader:
    def __init__(self, db, lifetime: Optional[ViewLifetime] = None):
        self.db = db
        self.lifetime = lifetime or ViewLifetime()
        self.resolver = ImageSetResolver(db, self.lifetime)

    async def load(self, query: Optional[dict] = None, limit: int = 1000) -> List[Listing]:
        """Fetch visible listings newest first and attach their images."""
        try:
            docs = await self.db.products.find(query or VISIBLE_QUERY).sort("created_at", -1).to_list(limit)
        except PyMongoError as e:
            logger.error(f"Failed to load catalog: {e}")
            raise CatalogUnavailable(str(e))

        products = [Product(**doc) for doc in docs]
        return await self.enrich(products)

    async def enrich(self, products: List[Product]) -> List[Listing]:
        prefetched = await self._prefetch_images([p.id for p in products])

        async def enrich_one(product: Product) -> Optional[Listing]:
            candidate = prefetched.get(product.id, []) if prefetched is not None else None
            images = await self.resolver.resolve(product.id, candidate)
            if images is None:
                return None
            return to_listing(product, images)

        results = await asyncio.gather(*(enrich_one(p) for p in products))
        return [listing for listing in results if listing is not None]

    async def _prefetch_images(self, product_ids: List[str]) -> Optional[Dict[str, List[ProductImage]]]:
        if not product_ids:
            return {}
        try:
            docs = await self.db.product_images.find(
                {"product_id": {"$in": product_ids}}
            ).sort("image_order", 1).to_list(None)
        except Exception as e:
            # Each listing falls back to its own fetch
            logger.warning(f"Image prefetch failed, resolving per listing: {e}")
            return None

        grouped: Dict[str, List[ProductImage]] = defaultdict(list)
        for doc in docs:
            grouped[doc["product_id"]].append(ProductImage(**doc))
        return grouped

import logging
from typing import Dict, Iterable, List, Optional

from ecologika.models.image import ProductImage

logger = logging.getLogger(__name__)

# Client-local object references that never survive an upload
TRANSIENT_SCHEMES = ("blob:", "filesystem:")


def is_transient_url(url: Optional[str]) -> bool:
    if not url:
        return True
    return url.strip().lower().startswith(TRANSIENT_SCHEMES)


def order_images(images: Iterable[ProductImage]) -> List[ProductImage]:
    """Drop transient entries and sort by image_order; sorted() is stable so ties keep insertion order."""
    durable = [image for image in images if not is_transient_url(image.image_url)]
    return sorted(durable, key=lambda image: image.image_order)


def renumber(images: Iterable[ProductImage]) -> List[ProductImage]:
    return [image.model_copy(update={"image_order": i + 1}) for i, image in enumerate(images)]


def move_image(images: List[ProductImage], from_index: int, to_index: int) -> List[ProductImage]:
    updated = list(images)
    moved = updated.pop(from_index)
    updated.insert(to_index, moved)
    return renumber(updated)


def remove_image_at(images: List[ProductImage], index: int) -> List[ProductImage]:
    return renumber(image for i, image in enumerate(images) if i != index)


def select_display_image(images: List[ProductImage], legacy_url: Optional[str] = None) -> Optional[str]:
    """Cover image: first resolved image, else the legacy field, else None for the placeholder."""
    if images:
        return images[0].image_url
    if legacy_url and not is_transient_url(legacy_url):
        return legacy_url
    return None


class GalleryCursor:
    """Cyclic position inside a product's image sequence."""

    def __init__(self, total: int, index: int = 0):
        self.total = total
        self.index = index % total if total else 0

    @property
    def has_navigation(self) -> bool:
        return self.total > 1

    @property
    def counter(self) -> str:
        if not self.total:
            return "0 / 0"
        return f"{self.index + 1} / {self.total}"

    def next(self) -> int:
        if self.total:
            self.index = (self.index + 1) % self.total
        return self.index

    def previous(self) -> int:
        if self.total:
            self.index = (self.index - 1) % self.total
        return self.index


class ViewLifetime:
    """Generation counter tracking whether the consumer of a fetch is still alive.

    Fetches capture the generation when they start; once the view is closed
    the generation moves on and any captured token becomes stale.
    """

    def __init__(self):
        self._generation = 0
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def capture(self) -> int:
        return self._generation

    def is_current(self, token: int) -> bool:
        return not self._closed and token == self._generation

    def close(self):
        self._generation += 1
        self._closed = True


async def fetch_product_images(db, product_id: str) -> List[ProductImage]:
    docs = await db.product_images.find({"product_id": product_id}).sort("image_order", 1).to_list(100)
    return [ProductImage(**doc) for doc in docs]


class ImageSetResolver:
    """Resolve the ordered display images of products for one view."""

    def __init__(self, db, lifetime: Optional[ViewLifetime] = None):
        self.db = db
        self.lifetime = lifetime or ViewLifetime()
        self._resolved: Dict[str, List[ProductImage]] = {}

    async def resolve(
        self,
        product_id: str,
        candidate: Optional[List[ProductImage]] = None
    ) -> Optional[List[ProductImage]]:
        """Return the ordered images, or None when the view went away first.

        Never raises: a failed fetch is logged and yields an empty list.
        """
        token = self.lifetime.capture()

        if candidate is not None:
            images = order_images(candidate)
        elif product_id in self._resolved:
            images = self._resolved[product_id]
        else:
            try:
                images = order_images(await fetch_product_images(self.db, product_id))
            except Exception as e:
                logger.warning(f"Failed to fetch images for product {product_id}: {e}")
                images = []

        if not self.lifetime.is_current(token):
            logger.debug(f"Discarding images for product {product_id}: view closed")
            return None

        self._resolved[product_id] = images
        return images

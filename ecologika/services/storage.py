import logging
import re
import time
import uuid
from pathlib import Path
from typing import Optional

from ecologika.core.config import settings

logger = logging.getLogger(__name__)

BUCKET = "product-images"
PUBLIC_PREFIX = "/uploads"

ALLOWED_IMAGE_EXTENSIONS = {'jpg', 'jpeg', 'png', 'gif', 'webp', 'bmp', 'svg'}


class StorageError(Exception):
    pass


def image_extension(filename: Optional[str], content_type: Optional[str] = None) -> str:
    """Pick a safe file extension for an uploaded image."""
    ext = ""
    if filename and '.' in filename:
        ext = re.sub(r'[^a-z0-9]', '', filename.rsplit('.', 1)[1].lower())
    if ext not in ALLOWED_IMAGE_EXTENSIONS and content_type and content_type.startswith('image/'):
        ext = re.sub(r'[^a-z0-9]', '', content_type.split('/', 1)[1].split('+')[0].lower())
    if ext == 'jpeg':
        ext = 'jpg'
    return ext if ext in ALLOWED_IMAGE_EXTENSIONS else 'jpg'


def object_path(product_id: str, extension: str) -> str:
    # Files uploaded in one batch can share a millisecond
    return f"{product_id}/{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}.{extension}"


def bucket_dir() -> Path:
    return Path(settings.UPLOAD_DIR) / BUCKET


def public_url(path: str) -> str:
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}{PUBLIC_PREFIX}/{BUCKET}/{path}"


def path_from_url(url: str) -> str:
    """Extract '<product_id>/<file>' from a public URL."""
    parts = url.rstrip('/').split('/')
    return '/'.join(parts[-2:])


def upload(content: bytes, path: str) -> str:
    target = bucket_dir() / path
    # Keep writes inside the bucket
    if bucket_dir().resolve() not in target.resolve().parents:
        raise StorageError(f"Invalid object path: {path}")
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "wb") as buffer:
            buffer.write(content)
    except OSError as e:
        logger.error(f"Upload error for {path}: {e}")
        raise StorageError(str(e))
    return public_url(path)


def delete(path: str) -> bool:
    target = bucket_dir() / path
    try:
        target.unlink()
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.warning(f"Could not delete file from storage: {e}")
        return False

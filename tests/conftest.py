import os
import uuid
from datetime import datetime, timedelta

os.environ.setdefault("MONGO_URL", "mongodb://localhost:27017")
os.environ.setdefault("DB_NAME", "ecologika_test")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from server import app
from ecologika.core.config import settings
from ecologika.db.session import get_db
from ecologika.models.image import ProductImage
from ecologika.models.product import Product
from ecologika.models.user import Profile
from ecologika.services.auth import hash_password, issue_token

PASSWORD = "secret123"
PASSWORD_HASH = hash_password(PASSWORD)


@pytest.fixture
def db():
    return AsyncMongoMockClient()[f"ecologika_{uuid.uuid4().hex}"]


@pytest.fixture
async def client(db, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", tmp_path)
    app.dependency_overrides[get_db] = lambda: db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def make_profile(db, **overrides) -> Profile:
    data = {
        "email": f"{uuid.uuid4().hex[:8]}@example.com",
        "name": "Ana Costa",
        "company": "VidroEco",
        "location": "Curitiba, Brasil",
        "user_type": "buyer",
        "approval_status": "approved",
    }
    data.update(overrides)
    profile = Profile(**data)
    doc = profile.model_dump()
    doc["hashed_password"] = PASSWORD_HASH
    await db.profiles.insert_one(doc)
    return profile


def auth_headers(profile: Profile) -> dict:
    return {"Authorization": f"Bearer {issue_token(profile.id)['access_token']}"}


async def make_product(db, seller: Profile, created_offset: int = 0, **overrides) -> Product:
    data = {
        "name": "Papel Reciclado",
        "description": "Papel reciclado de alta qualidade.",
        "material": "Papel",
        "category": "Escritório",
        "price": 150.0,
        "quantity": 1000,
        "unit": "kg",
        "country": "Brasil",
        "city": "São Paulo",
        "location": "São Paulo, Brasil",
        "seller_id": seller.id,
        "seller_name": seller.name,
        "seller_company": seller.company,
        "is_active": True,
        "approval_status": "approved",
        "created_at": datetime.utcnow() + timedelta(seconds=created_offset),
    }
    data.update(overrides)
    product = Product(**data)
    await db.products.insert_one(product.model_dump())
    return product


async def add_images(db, product_id: str, urls, start: int = 1):
    images = []
    for i, url in enumerate(urls):
        image = ProductImage(product_id=product_id, image_url=url, image_order=start + i)
        await db.product_images.insert_one(image.model_dump())
        images.append(image)
    return images

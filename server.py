from fastapi import FastAPI, APIRouter
from fastapi.staticfiles import StaticFiles
from starlette.middleware.cors import CORSMiddleware
import logging

from ecologika.core.config import settings
from ecologika.db.session import close_mongo_connection, ensure_indexes
from ecologika.routers import (
    admin,
    auth,
    checkout,
    favorites,
    images,
    locale,
    notifications,
    products,
    purchases,
    users,
)
from ecologika.services.storage import BUCKET, PUBLIC_PREFIX

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Ecologika API")

# Every route lives under /api
api_router = APIRouter(prefix="/api")
for module in (auth, users, products, images, favorites, checkout, purchases, admin, notifications, locale):
    api_router.include_router(module.router)
app.include_router(api_router)

bucket_path = settings.UPLOAD_DIR / BUCKET
app.mount(f"{PUBLIC_PREFIX}/{BUCKET}", StaticFiles(directory=bucket_path, check_dir=False), name="product-images")

app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.on_event("startup")
async def startup():
    try:
        bucket_path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Upload directory {bucket_path} is not writable: {e}")
    await ensure_indexes()

@app.on_event("shutdown")
async def shutdown_db_client():
    close_mongo_connection()

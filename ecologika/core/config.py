from pathlib import Path
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load the .env file from the project root
load_dotenv()

class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=True)

    # JWT
    JWT_SECRET: str = "your-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # MongoDB
    MONGO_URL: str
    DB_NAME: str

    # Object store
    UPLOAD_DIR: Path = Path("/app/uploads")
    PUBLIC_BASE_URL: str = "http://localhost:8000"
    MAX_PRODUCT_IMAGES: int = 5
    MAX_IMAGE_SIZE: int = 5 * 1024 * 1024

    # Checkout
    SHIPPING_FEE: float = 15.0

    # Language
    DEFAULT_LANGUAGE: str = "pt"
    LANGUAGE_COOKIE: str = "ecologika_language"

    CORS_ORIGINS: List[str] = ["*"]

settings = Settings()

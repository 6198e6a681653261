"""Application settings loaded from environment variables."""
from pydantic_settings import BaseSettings
from typing import Optional

# 개발용 기본값. 배포 시 반드시 JWT_SECRET 환경 변수로 교체
DEFAULT_JWT_SECRET = "dev-secret-change-me-before-deploying-gamehive"


class Settings(BaseSettings):
    """Application configuration settings."""

    # Server Configuration
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 3000
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "*"

    # Storage backend: "firebase", "mongo" or "memory"
    STORAGE_BACKEND: str = "memory"

    # MongoDB
    MONGODB_URL: str = "mongodb://localhost:27017"
    MONGODB_DATABASE: str = "gamehive"

    # Firebase (Realtime Database + Authentication REST APIs)
    FIREBASE_API_KEY: Optional[str] = None
    FIREBASE_DATABASE_URL: Optional[str] = None
    FIREBASE_DATABASE_AUTH: Optional[str] = None  # RTDB secret / ID token (optional)
    FIREBASE_AUTH_URL: str = "https://identitytoolkit.googleapis.com/v1"
    FIREBASE_TIMEOUT: float = 10.0

    # RAWG game metadata API
    RAWG_API_URL: str = "https://api.rawg.io/api"
    RAWG_API_KEY: Optional[str] = None
    RAWG_TIMEOUT: float = 10.0

    # Bearer tokens
    JWT_SECRET: str = DEFAULT_JWT_SECRET
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_DAYS: int = 7

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()

from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

# Turin municipal boundary shipped with the package
DEFAULT_SERVICE_AREA = Path(__file__).resolve().parent / "data" / "boundaries_turin_city.geojson"


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./participium.db"

    # JWT Authentication
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Application
    APP_ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # Photo storage
    UPLOAD_DIR: str = "uploads"

    # Service area
    CITY_NAME: str = "Turin"
    SERVICE_AREA_GEOJSON: str = str(DEFAULT_SERVICE_AREA)

    # Map rendering
    MAP_CLUSTER_ZOOM_THRESHOLD: int = 12

    # Staff assignment; None means no per-staff cap
    MAX_OPEN_REPORTS_PER_STAFF: Optional[int] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()

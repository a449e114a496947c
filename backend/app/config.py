from pydantic_settings import BaseSettings
from typing import List, Literal, Optional


class Settings(BaseSettings):
    # API
    APP_NAME: str = "Penalty Form Service"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Logging
    LOG_LEVEL: str = "INFO"

    # Catalog
    CATALOG_PROFILE: Literal["occurrence", "tier"] = "occurrence"
    CATALOG_DIR: Optional[str] = None  # Defaults to the packaged app/catalog/data

    # Document rendering
    PDF_FILENAME: str = "penalty_form.pdf"
    PDF_FONT_PATH: Optional[str] = None  # TTF with diacritics; Helvetica otherwise
    DATE_FORMAT: str = "%d/%m/%Y"
    CURRENCY: str = "lei"

    class Config:
        env_file = ".env"
        extra = "allow"  # Allow extra environment variables


settings = Settings()

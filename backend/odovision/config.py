"""
OdoVision Configuration Settings
"""
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_name: str = "OdoVision API"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = True

    # Logging
    log_level: str = "INFO"
    log_dir: Optional[str] = None  # daily log file under this directory when set

    # EasyOCR
    ocr_languages: List[str] = ["en"]
    ocr_gpu: bool = False
    ocr_min_confidence: float = 0.0

    # Trip meter discrimination
    trip_meter_fraction: float = 0.1
    trip_meter_min_gap: int = 1000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "ODOVISION_"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

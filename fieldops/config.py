"""
Configuration module for the field operations service.
Loads settings from environment variables.
"""
import os
from typing import List
from pathlib import Path

# Base paths
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings:
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_PATH: str = os.getenv('DATABASE_PATH', str(BASE_DIR / 'fieldops.db'))

    # API Server
    API_HOST: str = os.getenv('API_HOST', '127.0.0.1')
    API_PORT: int = int(os.getenv('API_PORT', '8000'))

    # CORS
    CORS_ORIGINS: list = os.getenv('CORS_ORIGINS', 'http://localhost:5173').split(',')

    # Yandex Disk (incident photos)
    YANDEX_DISK_TOKEN: str = os.getenv('YANDEX_DISK_TOKEN', '')
    YANDEX_DISK_BASE_FOLDER: str = os.getenv('YANDEX_DISK_BASE_FOLDER', 'FieldOps')

    # Dashboard
    RECENT_LIMIT: int = int(os.getenv('RECENT_LIMIT', '5'))
    WEEK_START: int = int(os.getenv('WEEK_START', '0'))  # 0 = Monday

    # Realtime mirrors kept by the API
    SYNC_COLLECTIONS: List[str] = []

    # Logging
    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO')

    @classmethod
    def load_sync_collections(cls) -> List[str]:
        """Load mirrored collection names from environment variable."""
        names = os.getenv('SYNC_COLLECTIONS', 'regions,workers,equipment,incidents,reports')
        return [name.strip() for name in names.split(',') if name.strip()]


# Global settings instance
settings = Settings()
settings.SYNC_COLLECTIONS = settings.load_sync_collections()

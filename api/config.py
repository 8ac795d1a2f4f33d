"""
API Configuration

Settings are loaded from environment variables (or a .env file).
"""

from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # App info
    app_name: str = "batchCOGS API"
    app_version: str = "1.0.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS
    cors_origins: str = "http://localhost:8501,http://localhost:3000"

    # Storage
    # storage_backend picks the ledger store. The sales journal is always a
    # JSON file (sales_file) unless the backend is memory.
    data_dir: str = "./data"
    storage_backend: str = "json"  # json | sqlite | memory
    ledger_file: str = "ledger.json"
    sales_file: str = "sales.json"
    sqlite_file: str = "db/batchcogs.db"

    # Ledger behaviour
    atomic_orders: bool = True  # validate whole orders before deducting any dish

    # Logging
    log_level: str = "INFO"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse comma-separated CORS origins."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def ledger_path(self) -> str:
        return str(Path(self.data_dir) / self.ledger_file)

    @property
    def sales_path(self) -> str:
        return str(Path(self.data_dir) / self.sales_file)

    @property
    def sqlite_path(self) -> str:
        return str(Path(self.data_dir) / self.sqlite_file)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

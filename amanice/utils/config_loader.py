"""
Configuration loader for the catalog service

Loads config/store_config.yml, validates it with Pydantic and applies
environment overrides (REMOTE_STORE_URL, DATABASE_URL, REDIS_URL,
WHATSAPP_NUMBER). AMANICE_CONFIG points at an alternative file.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "store_config.yml"


class CatalogConfig(BaseModel):
    """Where the static products.json document lives"""

    path: str = "data/products.json"
    url: Optional[str] = None


class RemoteConfig(BaseModel):
    """Remote Store endpoints (HTTP) or database connection"""

    base_url: str = ""
    api_key: str = ""
    list_path: str = "/admin/getProducts.php"
    save_path: str = "/admin/saveProduct.php"
    update_path: str = "/admin/updateProduct.php"
    delete_path: str = "/admin/deleteProduct.php"
    timeout_seconds: float = Field(default=20.0, gt=0)
    database_url: Optional[str] = None


class StorageConfig(BaseModel):
    """Key-value backend for local overrides and carts"""

    backend: str = Field(default="memory", pattern="^(memory|redis)$")
    redis_url: str = "redis://localhost:6379/0"
    namespace: str = "amanice"
    max_bytes: Optional[int] = Field(default=5 * 1024 * 1024, ge=1)


class CartConfig(BaseModel):
    whatsapp_number: str = "27731635803"
    storage_key: str = "cart"


class ProjectorConfig(BaseModel):
    """Legacy category matching switches"""

    prefix_fallback: bool = True
    title_matching: bool = True
    index_fallback: bool = True
    recently_added_limit: int = Field(default=6, ge=0)


class UploadsConfig(BaseModel):
    root_dir: str = "."
    upload_dir: str = "Assets/uploads"
    max_bytes: int = Field(default=10 * 1024 * 1024, ge=1)
    allowed_extensions: List[str] = Field(default_factory=lambda: ["jpg", "jpeg", "png", "webp"])
    allowed_mime_types: List[str] = Field(
        default_factory=lambda: ["image/jpeg", "image/jpg", "image/png", "image/webp"]
    )
    deletable_dirs: List[str] = Field(default_factory=lambda: ["Assets/uploads/", "Assets/images/"])
    deletable_extensions: List[str] = Field(default_factory=lambda: ["jpg", "jpeg", "png", "gif", "webp"])


class WatcherConfig(BaseModel):
    enabled: bool = True
    interval_seconds: float = Field(default=2.0, gt=0)


class StoreConfig(BaseModel):
    """Complete catalog service configuration"""

    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    remote: RemoteConfig = Field(default_factory=RemoteConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    cart: CartConfig = Field(default_factory=CartConfig)
    projector: ProjectorConfig = Field(default_factory=ProjectorConfig)
    uploads: UploadsConfig = Field(default_factory=UploadsConfig)
    watcher: WatcherConfig = Field(default_factory=WatcherConfig)


def load_store_config(config_path: Optional[Path] = None) -> StoreConfig:
    """
    Load and validate the store configuration from YAML

    Args:
        config_path: Path to config file. Defaults to $AMANICE_CONFIG, then
            config/store_config.yml

    Returns:
        Validated StoreConfig object; defaults when the file does not exist

    Raises:
        ValidationError: If config doesn't match schema
    """
    if config_path is None:
        env_path = os.getenv("AMANICE_CONFIG")
        config_path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH
    config_path = Path(config_path)

    config_data = {}
    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.info(f"Config file not found at {config_path}; using defaults")

    try:
        config = StoreConfig(**config_data)
    except ValidationError as e:
        logger.error(f"Config validation failed: {e}")
        raise

    apply_env_overrides(config)
    logger.info(f"Successfully loaded store config from {config_path}")
    return config


def apply_env_overrides(config: StoreConfig) -> StoreConfig:
    """Environment variables win over the YAML file"""
    if os.getenv("REMOTE_STORE_URL"):
        config.remote.base_url = os.environ["REMOTE_STORE_URL"]
    if os.getenv("REMOTE_STORE_API_KEY"):
        config.remote.api_key = os.environ["REMOTE_STORE_API_KEY"]
    if os.getenv("DATABASE_URL"):
        config.remote.database_url = os.environ["DATABASE_URL"]
    if os.getenv("REDIS_URL"):
        config.storage.redis_url = os.environ["REDIS_URL"]
        config.storage.backend = "redis"
    if os.getenv("WHATSAPP_NUMBER"):
        config.cart.whatsapp_number = os.environ["WHATSAPP_NUMBER"]
    if os.getenv("CATALOG_URL"):
        config.catalog.url = os.environ["CATALOG_URL"]
    return config

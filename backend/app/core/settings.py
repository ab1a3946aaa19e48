# backend/app/core/settings.py
"""
Inventory Backend - Configuration Management with pydantic-settings

- Loads from environment and root .env
- Validates and normalizes values
- Cached singleton via get_settings()
"""
import json
from functools import lru_cache
from pathlib import Path
from typing import Optional, List, Dict, Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# backend/app/core/settings.py -> <repo>/.env
_ENV_FILE = Path(__file__).resolve().parent.parent.parent.parent / ".env"


class Settings(BaseSettings):
    """
    Application settings with validation.

    Environment variables take precedence over .env file values.
    """

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ===================
    # Application Settings
    # ===================
    PROJECT_NAME: str = "Inventory Backend"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"
    DEBUG: bool = Field(default=False, description="Enable debug mode")
    ENVIRONMENT: str = Field(default="development", description="Deployment environment")

    # ===================
    # Database Settings
    # ===================
    DATABASE_URL: str = Field(
        default="sqlite:///./inventory.db",
        description="SQLAlchemy database URL",
    )

    @property
    def database_url(self) -> str:
        return self.DATABASE_URL

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    # Optimistic-lock retries for stock-mutating requests
    STOCK_WRITE_ATTEMPTS: int = Field(default=3, ge=1, description="Attempts before a 409")

    # ===================
    # CORS Settings
    # ===================
    ALLOWED_ORIGINS: List[str] = Field(
        default=[
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        description="Allowed CORS origins",
    )

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    FRONTEND_URL: Optional[str] = Field(default=None, description="Frontend URL for CORS")

    @model_validator(mode="after")
    def add_frontend_url_to_cors(self):
        """Ensure FRONTEND_URL is allowed for CORS."""
        if self.FRONTEND_URL and self.FRONTEND_URL not in self.ALLOWED_ORIGINS:
            self.ALLOWED_ORIGINS = list(self.ALLOWED_ORIGINS) + [self.FRONTEND_URL]
        return self

    # ===================
    # File Storage
    # ===================
    UPLOAD_DIR: str = Field(default="./uploads", description="Attachment upload dir")
    MAX_UPLOAD_SIZE_MB: int = Field(default=50, description="Max upload size (MB)")
    ALLOWED_UPLOAD_EXTENSIONS: List[str] = Field(
        default=[
            ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".txt",
            ".jpg", ".jpeg", ".png", ".gif", ".csv",
        ],
        description="Allowed attachment extensions",
    )

    @field_validator("ALLOWED_UPLOAD_EXTENSIONS", mode="before")
    @classmethod
    def parse_upload_extensions(cls, v):
        if isinstance(v, str):
            return [ext.strip().lower() for ext in v.split(",") if ext.strip()]
        return v

    @property
    def max_upload_size_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    # ===================
    # Shopify
    # ===================
    SHOPIFY_WEBHOOK_SECRET: Optional[str] = Field(
        default=None, description="Shared secret for X-Shopify-Hmac-Sha256 verification"
    )
    SHOPIFY_SKIP_DUPLICATE_ORDERS: bool = Field(
        default=False, description="Skip deductions for an already logged order id"
    )

    # ===================
    # Fulfillment / BOM
    # ===================
    # mL of oil per sold unit of each variant
    VARIANT_VOLUMES: Optional[Any] = Field(
        default=None,
        description="JSON: {'SA_CA': 400, 'SA_HF': 500, ...}",
    )
    # BOM component code prefix -> product code prefix
    COMPONENT_CODE_ALIASES: Optional[Any] = Field(
        default=None,
        description="JSON: {'SA_RAWM_': 'SA_RM_'}",
    )
    BOM_HEADER_CODE: str = "PRODUCT_CODE"
    BOM_FINISHED_GOOD_MARKERS: List[str] = Field(
        default=["Oil Cartridge", "Oil Refill", "Bottle"],
        description="Component codes containing these are finished-good rows",
    )

    @field_validator("BOM_FINISHED_GOOD_MARKERS", mode="before")
    @classmethod
    def parse_markers(cls, v):
        if isinstance(v, str):
            return [m.strip() for m in v.split(",") if m.strip()]
        return v

    @field_validator("VARIANT_VOLUMES", "COMPONENT_CODE_ALIASES", mode="before")
    @classmethod
    def parse_json_string(cls, v):
        """Accept JSON string or already-parsed object."""
        if v is None or v == "":
            return None
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return None
        return v

    @property
    def variant_volumes(self) -> Dict[str, int]:
        if self.VARIANT_VOLUMES and isinstance(self.VARIANT_VOLUMES, dict):
            return {str(k): int(v) for k, v in self.VARIANT_VOLUMES.items()}  # type: ignore[union-attr]
        return {
            "SA_CA": 400,     # Oil Cartridge 400ml
            "SA_HF": 500,     # 500ml Refill Bottle
            "SA_CDIFF": 700,  # 700ml Oil Refill
            "SA_1L": 1000,    # 1L Refill Bottle
            "SA_PRO": 1000,   # 1L Pro Refill Bottle
        }

    @property
    def component_code_aliases(self) -> Dict[str, str]:
        if self.COMPONENT_CODE_ALIASES and isinstance(self.COMPONENT_CODE_ALIASES, dict):
            return {str(k): str(v) for k, v in self.COMPONENT_CODE_ALIASES.items()}  # type: ignore[union-attr]
        return {"SA_RAWM_": "SA_RM_"}

    # ===================
    # First-run admin
    # ===================
    DEFAULT_ADMIN_NAME: str = "admin"
    DEFAULT_ADMIN_PASSWORD: Optional[str] = Field(
        default=None, description="Seed an admin user on first start when set"
    )

    # ===================
    # Logging
    # ===================
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json or text
    LOG_FILE: Optional[str] = None

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Singleton settings loader (cached)."""
    return Settings()


settings = get_settings()

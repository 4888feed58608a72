"""Application configuration loaded via pydantic settings."""

from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Strongly-typed application settings with environment overrides."""

    # Application
    APP_NAME: str = "Artisan Marketplace Admin"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # Security
    # No default: a missing secret is reported when a token is signed or verified.
    JWT_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    ADMIN_TOKEN_EXPIRE_DAYS: int = 1
    ARTISAN_TOKEN_EXPIRE_DAYS: int = 7
    ADMIN_COOKIE_NAME: str = "adminToken"
    ADMIN_PAGE_PREFIXES: List[str] = [
        "/dashboard",
        "/users",
        "/categories",
        "/approvals",
        "/settings",
    ]
    ADMIN_LOGIN_PATH: str = "/login"
    BCRYPT_ROUNDS: int = 12

    # Database
    DATABASE_URL: str = "sqlite:///./artisan_admin/marketplace.db"

    # Categories
    CATEGORY_TREE_MAX_DEPTH: int = 3

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_LEVELS: str = "TRACE,ERROR,WARNING,INFO"
    LOG_FILE_PATH: str = "./artisan_admin/logs/app.log"

    # Development seed account
    SEED_DEFAULT_ADMIN: bool = True
    DEFAULT_ADMIN_EMAIL: str = "admin@artisan.local"
    DEFAULT_ADMIN_PASSWORD: str = "adminpassword123"
    DEFAULT_ADMIN_NAME: str = "Super Admin"

    class Config:
        """Configure environment file loading behavior."""

        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True

    @property
    def is_production(self) -> bool:
        """Return True when running with ENVIRONMENT=production."""
        return self.ENVIRONMENT.lower() == "production"


settings = Settings()

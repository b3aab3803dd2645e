"""
Application configuration management using Pydantic Settings
Handles all environment variables and application settings
"""

from pydantic_settings import BaseSettings
from typing import Optional, List
from functools import lru_cache

class Settings(BaseSettings):
    """Main application settings"""

    # Application Settings
    APP_NAME: str = "Mini Marketplace"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Supabase (auth, relational storage, object storage)
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: str = ""
    PRODUCT_IMAGE_BUCKET: str = "product-images"

    # Frontend / CORS Configuration
    FRONTEND_URL: str = "http://localhost:3000"
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]
    PASSWORD_RESET_REDIRECT_URL: Optional[str] = None

    # File Upload Settings
    MAX_IMAGE_SIZE: int = 5 * 1024 * 1024  # 5MB
    ALLOWED_IMAGE_EXTENSIONS: List[str] = [".jpg", ".jpeg", ".png", ".gif", ".webp"]
    PLACEHOLDER_IMAGE_URL: str = "https://via.placeholder.com/300x240?text=No+Image"

    # Remove a freshly uploaded image when the record write that follows fails
    COMPENSATE_ORPHANED_UPLOADS: bool = False

    # Contact links
    PHONE_COUNTRY_CODE: str = "91"

    # Validation
    PASSWORD_MIN_LENGTH: int = 6
    NAME_MIN_LENGTH: int = 2

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def password_reset_redirect(self) -> str:
        """Where the reset link sends the user back to"""
        if self.PASSWORD_RESET_REDIRECT_URL:
            return self.PASSWORD_RESET_REDIRECT_URL
        return f"{self.FRONTEND_URL.rstrip('/')}/reset-password"

@lru_cache()
def get_settings() -> Settings:
    """
    Create cached settings instance
    This ensures settings are loaded only once
    """
    return Settings()

# Global settings instance
settings = get_settings()

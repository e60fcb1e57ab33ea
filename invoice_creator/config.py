"""Application configuration"""

import os
from decimal import Decimal
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings"""
    
    # Application
    APP_NAME: str = "InvoiceCreator"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    
    # API
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "8000"))
    
    # Database (key/value store backing)
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./invoice_creator.db")
    
    # Exported artifacts (device downloads)
    EXPORT_PATH: str = os.getenv("EXPORT_PATH", "./exports")
    
    # Document rules
    TAX_RATE: Decimal = Decimal(os.getenv("TAX_RATE", "0.08"))
    PAYMENT_TERM_DAYS: int = int(os.getenv("PAYMENT_TERM_DAYS", "30"))
    PRICE_STALE_DAYS: int = int(os.getenv("PRICE_STALE_DAYS", "42"))
    
    # Attachments
    MAX_ATTACHMENT_SIZE_MB: int = int(os.getenv("MAX_ATTACHMENT_SIZE_MB", "50"))
    
    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE: Optional[str] = os.getenv("LOG_FILE")
    
    class Config:
        env_file = ".env"
        case_sensitive = True


# Global settings instance
settings = Settings()

from pydantic import BaseModel
from typing import List
import os

class Settings(BaseModel):
    """Application settings and configuration."""

    # App settings
    APP_NAME: str = "Expense Tracker API"
    VERSION: str = "1.0.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "3000"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # CORS
    ALLOWED_ORIGINS: List[str] = ["*"]

    # Daily summary job
    SCHEDULER_ENABLED: bool = os.getenv("SCHEDULER_ENABLED", "true").lower() == "true"
    DAILY_SUMMARY_CRON: str = os.getenv("DAILY_SUMMARY_CRON", "0 0 * * *")

    class Config:
        case_sensitive = True

# Create settings instance
settings = Settings()

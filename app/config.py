"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # ── Database ──────────────────────────────────────────────────────────
    DATABASE_URL: str = "sqlite:///./fleetpro.db"

    # ── Network ───────────────────────────────────────────────────────────
    BACKEND_IP: str = "127.0.0.1"
    BACKEND_PORT: int = 8080

    # ── Security ──────────────────────────────────────────────────────────
    API_KEY: Optional[str] = None   # Set in .env to enable auth on API endpoints

    # ── Assignment ledger ─────────────────────────────────────────────────
    REQUIRE_TRANSFER_REASON: bool = True

    # ── Dispatch simulator (demo stand-in for the chauffeur app) ──────────
    DISPATCH_SIMULATION_ENABLED: bool = True
    DISPATCH_RESPONSE_MIN_SECONDS: float = 10.0
    DISPATCH_RESPONSE_MAX_SECONDS: float = 15.0
    DISPATCH_ACCEPT_PROBABILITY: float = 0.8

    # ── Chauffeur onboarding simulator ────────────────────────────────────
    ONBOARDING_SIMULATION_ENABLED: bool = True
    ONBOARDING_DELAY_MIN_SECONDS: float = 15.0
    ONBOARDING_DELAY_MAX_SECONDS: float = 25.0

    # ── Notifications ─────────────────────────────────────────────────────
    NOTIFICATION_READ_DELAY_SECONDS: float = 2.0

    # ── Compliance ────────────────────────────────────────────────────────
    COMPLIANCE_CHECK_ENABLED: bool = True
    COMPLIANCE_CHECK_INTERVAL_SECONDS: int = 24 * 60 * 60
    FLEET_SYSTEM_NAME: str = "FleetPro"

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = True
    LOG_FILE_NAME: str = "fleetpro.log"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()

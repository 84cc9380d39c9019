"""
BiasWatch Configuration

Central settings loaded from environment variables.
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Immutable application settings."""

    # --- Versioning ---
    CORE_VERSION: str = "1.0.0"

    # --- Monitoring ---
    ALERT_THRESHOLD: float = float(os.getenv("BIASWATCH_ALERT_THRESHOLD", "0.5"))
    MAX_PROCESSING_MS: float = float(os.getenv("BIASWATCH_MAX_PROCESSING_MS", "3000"))
    TIMING_WINDOW: int = int(os.getenv("BIASWATCH_TIMING_WINDOW", "100"))
    MAX_CACHED_CHAINS: int = int(os.getenv("BIASWATCH_MAX_CACHED_CHAINS", "1000"))

    # --- Learning ---
    DEFAULT_SENSITIVITY: float = float(
        os.getenv("BIASWATCH_DEFAULT_SENSITIVITY", "0.5")
    )
    WEIGHT_MIN: float = float(os.getenv("BIASWATCH_WEIGHT_MIN", "0.1"))
    WEIGHT_MAX: float = float(os.getenv("BIASWATCH_WEIGHT_MAX", "2.0"))

    # --- Logging ---
    LOG_LEVEL: str = os.getenv("BIASWATCH_LOG_LEVEL", "INFO").upper()
    LOG_FORMAT: str = os.getenv("BIASWATCH_LOG_FORMAT", "json")


settings = Settings()

"""
Configuration for the Text Statistics Engine
============================================

Central configuration for the API server, the persistence store and the
statistics pipeline. Values come from field defaults and are overridden by
environment variables (a local .env file is honoured).
"""

import os
from typing import Literal

from pydantic import BaseModel, Field
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

TRUTHY_ENV_VALUES = {"1", "true", "yes", "on"}


class StatisticsDefaults(BaseModel):
    """Default rates (units per minute) for the time estimates."""

    reading_rate: int = Field(default=275, ge=0, description="Words read per minute")
    speaking_rate: int = Field(default=180, ge=0, description="Words spoken per minute")
    hand_writing_rate: int = Field(default=68, ge=0, description="Words hand-written per minute")


class Config(BaseModel):
    """Configuration settings for the Text Statistics Engine."""

    STATISTICS: StatisticsDefaults = Field(
        default_factory=StatisticsDefaults,
        description="Default time-estimate rates",
    )

    # Persistence
    STORE_PATH: str = Field(
        default="data/session_store.json",
        description="JSON file backing the session key-value store (empty = in-memory only)",
    )

    # Keyword table
    KEYWORD_DENSITY_BASIS: Literal["distinct_keys", "total_words"] = Field(
        default="distinct_keys",
        description="Divisor used for keyword density percentages",
    )

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Root log level")
    VERBOSE_RECOMPUTE: bool = Field(
        default=False,
        description="Log per-phase timings for every recompute pass",
    )

    # FastAPI Configuration
    APP_HOST: str = Field(default="0.0.0.0", description="FastAPI host")
    APP_PORT: int = Field(default=8000, description="FastAPI port")
    APP_RELOAD: bool = Field(default=False, description="FastAPI reload mode")

    def __init__(self, **data):
        super().__init__(**data)
        self.load_from_environment()

    def load_from_environment(self):
        """Load configuration overrides from environment variables."""
        store_path = os.getenv("STORE_PATH")
        if store_path is not None:
            self.STORE_PATH = store_path.strip()

        density_basis = os.getenv("KEYWORD_DENSITY_BASIS")
        if density_basis and density_basis.strip().lower() in {"distinct_keys", "total_words"}:
            self.KEYWORD_DENSITY_BASIS = density_basis.strip().lower()

        for env_name, attr in (
            ("DEFAULT_READING_RATE", "reading_rate"),
            ("DEFAULT_SPEAKING_RATE", "speaking_rate"),
            ("DEFAULT_HAND_WRITING_RATE", "hand_writing_rate"),
        ):
            override = os.getenv(env_name)
            if override:
                try:
                    parsed = int(override)
                    if parsed >= 0:
                        setattr(self.STATISTICS, attr, parsed)
                except ValueError:
                    pass

        self.LOG_LEVEL = os.getenv("LOG_LEVEL", self.LOG_LEVEL).upper()
        verbose_override = os.getenv("VERBOSE_RECOMPUTE")
        if verbose_override:
            self.VERBOSE_RECOMPUTE = verbose_override.lower() in TRUTHY_ENV_VALUES

        # FastAPI Configuration
        self.APP_HOST = os.getenv("APP_HOST", self.APP_HOST)
        try:
            self.APP_PORT = int(os.getenv("APP_PORT", str(self.APP_PORT)))
        except ValueError:
            pass
        self.APP_RELOAD = os.getenv("APP_RELOAD", str(self.APP_RELOAD)).lower() in TRUTHY_ENV_VALUES


config = Config()

# core/config.py
"""
Process-wide settings read from ``SUBMITTER_*`` environment variables.

A ``.env`` file in the working directory is loaded first, so site
credentials (referenced by name from each site configuration) and the
settings below can live there during local runs.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    """Application configuration"""

    PROJECT_NAME: str = "dynamic-article-submitter"
    LOG_LEVEL: str = os.getenv("SUBMITTER_LOG_LEVEL", "INFO")

    # Browser
    HEADLESS: bool = _env_flag("SUBMITTER_HEADLESS", "true")
    PAGE_LOAD_TIMEOUT: int = int(os.getenv("SUBMITTER_PAGE_LOAD_TIMEOUT", "30"))

    # Artefacts
    SCREENSHOT_DIR: Path = Path(os.getenv("SUBMITTER_SCREENSHOT_DIR", "./screenshots"))
    REPORT_DIR: Path = Path(os.getenv("SUBMITTER_REPORT_DIR", "./reports"))

    # Inputs – either a multi-site manifest or a single config + article batch
    MANIFEST_PATH: Optional[str] = os.getenv("SUBMITTER_MANIFEST")
    SITE_CONFIG_PATH: Optional[str] = os.getenv("SUBMITTER_SITE_CONFIG")
    ARTICLES_PATH: Optional[str] = os.getenv("SUBMITTER_ARTICLES")

    # Prometheus exporter; disabled when unset
    METRICS_PORT: Optional[int] = (
        int(os.environ["SUBMITTER_METRICS_PORT"]) if os.getenv("SUBMITTER_METRICS_PORT") else None
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()

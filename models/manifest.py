# models/manifest.py
from typing import Any, List, Optional

from pydantic import Field, field_validator

from .article import Article
from .base import ConfigModel


class WebsiteDefinition(ConfigModel):
    """One entry of the multi-site manifest."""

    name: str
    enabled: bool = False
    config_path: str
    articles: List[Article] = Field(default_factory=list)
    max_retries: Optional[int] = None

    @field_validator("max_retries", mode="before")
    @classmethod
    def _unset_below_one(cls, v: Any) -> Any:
        """``0`` (or any falsy count) means "use the global setting"."""
        if v is None or (isinstance(v, (int, float)) and v < 1):
            return None
        return v


class GlobalSettings(ConfigModel):
    delay_between_sites: int = 0      # ms
    max_retries: int = 1
    continue_on_error: bool = False
    generate_report: bool = False
    report_path: Optional[str] = None

    @field_validator("max_retries", mode="before")
    @classmethod
    def _at_least_one(cls, v: Any) -> Any:
        if v is None or (isinstance(v, (int, float)) and v < 1):
            return 1
        return v


class Manifest(ConfigModel):
    """Top-level container – ordered site definitions plus global settings."""

    websites: List[WebsiteDefinition] = Field(default_factory=list)
    global_settings: GlobalSettings = Field(default_factory=GlobalSettings)

    @property
    def enabled_websites(self) -> List[WebsiteDefinition]:
        return [w for w in self.websites if w.enabled]

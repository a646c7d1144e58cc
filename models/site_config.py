# models/site_config.py
"""
Declarative description of one target site: how to log in, how to reach
the new-entry form, which fields to fill and which buttons finish the job.

Example (JSON or YAML)::

    name: Generic WordPress
    baseUrl: https://blog.example.com
    authentication:
      type: form
      loginUrl: https://blog.example.com/wp-login.php
      credentials: {usernameEnv: WP_USER, passwordEnv: WP_PASS}
      selectors: {username: "#user_login", password: "#user_pass", submitButton: "#wp-submit"}
    navigation:
      newArticleUrl: https://blog.example.com/wp-admin/post-new.php
      waitForElement: "#title"
    formFields:
      title: {selector: "#title", fieldType: text, required: true}
    actions:
      save: {selector: "#save-post", successIndicator: ".notice-success"}
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from .base import ConfigModel


# ----------------------------------------------------------------------
# Locators
# ----------------------------------------------------------------------
class LocatorStrategy(str, Enum):
    CSS = "css"
    XPATH = "xpath"
    ID = "id"
    NAME = "name"
    CLASS_NAME = "className"
    LINK_TEXT = "linkText"


_STRATEGY_ALIASES = {
    "css-selector": LocatorStrategy.CSS,
    "css_selector": LocatorStrategy.CSS,
    "class": LocatorStrategy.CLASS_NAME,
    "class_name": LocatorStrategy.CLASS_NAME,
    "classname": LocatorStrategy.CLASS_NAME,
    "link_text": LocatorStrategy.LINK_TEXT,
    "link-text": LocatorStrategy.LINK_TEXT,
    "linktext": LocatorStrategy.LINK_TEXT,
}


def normalize_strategy(value: Any) -> LocatorStrategy:
    """Map a configured strategy name onto ``LocatorStrategy``; unknown names mean CSS."""
    if isinstance(value, LocatorStrategy):
        return value
    if value is None:
        return LocatorStrategy.CSS
    text = str(value).strip()
    try:
        return LocatorStrategy(text)
    except ValueError:
        return _STRATEGY_ALIASES.get(text.lower(), LocatorStrategy.CSS)


class Locator(ConfigModel):
    """A (strategy, value) pair identifying how to find a page element."""

    strategy: LocatorStrategy = LocatorStrategy.CSS
    value: str

    @field_validator("strategy", mode="before")
    @classmethod
    def _normalize(cls, v: Any) -> LocatorStrategy:
        return normalize_strategy(v)

    def __str__(self) -> str:
        return f"{self.strategy.value}={self.value}"


class Locatable(ConfigModel):
    """Primary selector plus ordered fallbacks of the same selector family."""

    selector: str
    selector_type: LocatorStrategy = LocatorStrategy.CSS
    fallback_selectors: List[str] = Field(default_factory=list)

    @field_validator("selector_type", mode="before")
    @classmethod
    def _normalize_type(cls, v: Any) -> LocatorStrategy:
        return normalize_strategy(v)

    @property
    def locators(self) -> List[Locator]:
        """Strict priority list: primary first, then fallbacks in declared order."""
        return [
            Locator(strategy=self.selector_type, value=sel)
            for sel in [self.selector, *self.fallback_selectors]
            if sel
        ]


# ----------------------------------------------------------------------
# Form fields & actions
# ----------------------------------------------------------------------
class FieldType(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    SELECT = "select"
    DATE = "date"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    FILE = "file"


class FieldSpec(Locatable):
    field_type: FieldType = FieldType.TEXT
    required: bool = False
    clear_before: bool = False
    date_format: Optional[str] = None
    value_mapping: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("field_type", mode="before")
    @classmethod
    def _unknown_is_text(cls, v: Any) -> FieldType:
        """Unrecognised field types are filled as plain text."""
        try:
            return FieldType(v)
        except ValueError:
            return FieldType.TEXT


class ActionSpec(Locatable):
    confirm_dialog: bool = False
    success_indicator: Optional[str] = None     # CSS selector
    wait_after: int = 2000                       # ms
    success_timeout: int = 5000                  # ms


# ----------------------------------------------------------------------
# Authentication & navigation
# ----------------------------------------------------------------------
class AuthType(str, Enum):
    NONE = "none"
    BASIC = "basic"
    FORM = "form"


class Credentials(ConfigModel):
    """Names of the environment variables holding the credentials."""

    username_env: Optional[str] = None
    password_env: Optional[str] = None


class LoginSelectors(ConfigModel):
    username: Optional[str] = None
    password: Optional[str] = None
    submit_button: Optional[str] = None


class Authentication(ConfigModel):
    type: AuthType = AuthType.NONE
    credentials: Credentials = Field(default_factory=Credentials)
    login_url: Optional[str] = None
    selectors: LoginSelectors = Field(default_factory=LoginSelectors)
    selector_type: LocatorStrategy = LocatorStrategy.CSS

    @field_validator("selector_type", mode="before")
    @classmethod
    def _normalize_type(cls, v: Any) -> LocatorStrategy:
        return normalize_strategy(v)


class ClickPath(ConfigModel):
    """One fallback route to the new-entry form: a single element to click."""

    type: LocatorStrategy = LocatorStrategy.CSS
    selector: str
    description: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, v: Any) -> LocatorStrategy:
        return normalize_strategy(v)

    @property
    def locator(self) -> Locator:
        return Locator(strategy=self.type, value=self.selector)

    @property
    def label(self) -> str:
        return self.description or self.selector


class Navigation(ConfigModel):
    new_article_url: str
    wait_for_element: Optional[str] = None       # CSS landmark of the form
    landmark_timeout: int = 5000                 # ms
    fallback_selectors: List[ClickPath] = Field(default_factory=list)


# ----------------------------------------------------------------------
# Settings & hooks
# ----------------------------------------------------------------------
class SiteSettings(ConfigModel):
    """Per-site timings.  Durations are milliseconds, as in the documents."""

    headless: Optional[bool] = None
    wait_timeout: int = 10000
    delay_between_actions: int = 500
    delay_between_articles: int = 2000
    retry_delay: int = 2000
    max_retries: Optional[int] = None
    screenshot_on_error: bool = False

    @field_validator("max_retries", mode="before")
    @classmethod
    def _unset_below_one(cls, v: Any) -> Any:
        """A count below one defers to the manifest's retry setting."""
        if v is None or (isinstance(v, (int, float)) and v < 1):
            return None
        return v

    @property
    def wait_timeout_seconds(self) -> float:
        return self.wait_timeout / 1000


class CustomScripts(ConfigModel):
    """JavaScript snippets run at fixed extension points (best effort)."""

    after_login: Optional[str] = None
    before_submit: Optional[str] = None
    after_submit: Optional[str] = None


# ----------------------------------------------------------------------
# Site configuration
# ----------------------------------------------------------------------
DEFAULT_ACTION = "save"


class SiteConfig(ConfigModel):
    """Complete configuration for a single target site."""

    name: str
    base_url: str
    authentication: Authentication = Field(default_factory=Authentication)
    navigation: Navigation
    form_fields: Dict[str, FieldSpec] = Field(default_factory=dict)
    actions: Dict[str, ActionSpec] = Field(default_factory=dict)
    action_progression: List[str] = Field(default_factory=list)
    status_aliases: Dict[str, str] = Field(default_factory=dict)
    settings: SiteSettings = Field(default_factory=SiteSettings)
    custom_scripts: CustomScripts = Field(default_factory=CustomScripts)

    def normalize_status(self, status: Optional[str]) -> str:
        status = status or DEFAULT_ACTION
        return self.status_aliases.get(status, status)

    def actions_for_status(self, status: Optional[str]) -> List[str]:
        """
        Ordered action names that take an article to ``status``.

        With an ``actionProgression`` containing the status, every step up to
        and including it runs (e.g. save → pending → public).  Otherwise the
        action named after the status runs, falling back to ``save``.
        """
        target = self.normalize_status(status)
        if target in self.action_progression:
            return self.action_progression[: self.action_progression.index(target) + 1]
        if target in self.actions:
            return [target]
        return [DEFAULT_ACTION]

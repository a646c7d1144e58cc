# ────────────────────────────────────────────────────────────────
# tests/conftest.py
# ────────────────────────────────────────────────────────────────
"""
In-memory browser doubles.

``FakeSession`` keeps a ``{(by, value): element}`` map: ``find`` and
``wait_for`` only succeed for registered locators, so a test describes a
page simply by registering the elements it should contain.
"""

import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest
from selenium.webdriver.common.by import By

from services.browser.session import BrowserSession
from models.site_config import SiteConfig


class FakeElement:
    """Just enough of Selenium's ``WebElement`` for the submitter."""

    def __init__(
        self,
        name: str = "element",
        *,
        selected: bool = False,
        value: Optional[str] = None,
        text: str = "",
        options: Optional[List["FakeElement"]] = None,
        on_click: Optional[Callable[[], None]] = None,
        click_error: Optional[Exception] = None,
        send_error: Optional[Exception] = None,
    ):
        self.name = name
        self.selected = selected
        self.value = value
        self.text = text
        self.options = options or []
        self.on_click = on_click
        self.click_error = click_error
        self.send_error = send_error
        self.clicks = 0
        self.cleared = 0
        self.typed: List[str] = []

    def click(self) -> None:
        if self.click_error is not None:
            raise self.click_error
        self.clicks += 1
        self.selected = not self.selected
        if self.on_click is not None:
            self.on_click()

    def clear(self) -> None:
        self.cleared += 1

    def send_keys(self, text: str) -> None:
        if self.send_error is not None:
            raise self.send_error
        self.typed.append(text)

    def is_selected(self) -> bool:
        return self.selected

    def get_attribute(self, name: str) -> Optional[str]:
        return self.value if name == "value" else None

    def find_elements(self, by: str, value: str) -> List["FakeElement"]:
        return list(self.options) if (by, value) == (By.TAG_NAME, "option") else []

    def __repr__(self) -> str:
        return f"FakeElement({self.name!r})"


class FakeSession(BrowserSession):
    def __init__(self, elements: Optional[Dict[Tuple[str, str], Any]] = None):
        self.elements: Dict[Tuple[str, str], Any] = dict(elements or {})
        self.visited: List[str] = []
        self.lookups: List[Tuple[str, str]] = []
        self.scripts: List[str] = []
        self.script_clicks: List[Any] = []
        self.screenshots: List[Path] = []
        self.alert_present = False
        self.alerts_accepted = 0
        self.navigate_error: Optional[Exception] = None
        self.script_error: Optional[Exception] = None
        self.quit_count = 0

    # helpers -----------------------------------------------------------
    def add(self, value: str, element: Any = None, by: str = By.CSS_SELECTOR) -> Any:
        element = element if element is not None else FakeElement(value)
        self.elements[(by, value)] = element
        return element

    # BrowserSession ----------------------------------------------------
    def navigate(self, url: str) -> None:
        self.visited.append(url)
        if self.navigate_error is not None:
            raise self.navigate_error

    def find(self, by: str, value: str) -> Optional[Any]:
        self.lookups.append((by, value))
        return self.elements.get((by, value))

    def wait_for(self, by: str, value: str, timeout: float) -> bool:
        return (by, value) in self.elements

    def click_via_script(self, element: Any) -> None:
        self.script_clicks.append(element)
        element.click()

    def accept_alert(self, timeout: float = 1.0) -> bool:
        if self.alert_present:
            self.alerts_accepted += 1
            return True
        return False

    def execute_script(self, script: str, *args: Any) -> Any:
        if self.script_error is not None:
            raise self.script_error
        self.scripts.append(script)
        return None

    def screenshot(self, path: Path) -> Optional[Path]:
        self.screenshots.append(path)
        return path

    def quit(self) -> None:
        self.quit_count += 1


def make_site_config(**overrides: Any) -> SiteConfig:
    """Minimal valid site configuration, camelCase keys as in the documents."""
    data: Dict[str, Any] = {
        "name": "Test CMS",
        "baseUrl": "https://cms.example.com",
        "navigation": {
            "newArticleUrl": "https://cms.example.com/articles/new",
            "waitForElement": "#article-form",
        },
        "formFields": {
            "title": {"selector": "#title", "fieldType": "text", "required": True},
        },
        "actions": {
            "save": {"selector": "#save"},
        },
    }
    data.update(overrides)
    return SiteConfig.model_validate(data)


# -------------------------------------------------------------------
# Fixtures
# -------------------------------------------------------------------
@pytest.fixture(autouse=True)
def sleeps(monkeypatch):
    """Record every blocking sleep instead of waiting."""
    recorded: List[float] = []
    monkeypatch.setattr(time, "sleep", lambda seconds: recorded.append(seconds))
    return recorded


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def form_page(session):
    """A session already showing a form with a title input and a save button."""
    session.add("#article-form")
    session.add("#title")
    session.add("#save")
    return session

# services/browser/locators.py
"""
Fallback selector resolution as a plain ordered lookup: the first locator
that yields an element wins and the remaining ones are never tried.
"""

from typing import Any, Iterable, Optional

from loguru import logger
from selenium.webdriver.common.by import By

from models.site_config import Locator, LocatorStrategy

from .session import BrowserSession

_BY = {
    LocatorStrategy.CSS: By.CSS_SELECTOR,
    LocatorStrategy.XPATH: By.XPATH,
    LocatorStrategy.ID: By.ID,
    LocatorStrategy.NAME: By.NAME,
    LocatorStrategy.CLASS_NAME: By.CLASS_NAME,
    LocatorStrategy.LINK_TEXT: By.LINK_TEXT,
}


def to_by(strategy: LocatorStrategy) -> str:
    """Selenium ``By`` constant for a configured strategy."""
    return _BY.get(strategy, By.CSS_SELECTOR)


def resolve_first(session: BrowserSession, locators: Iterable[Locator]) -> Optional[Any]:
    """Return the element for the first locator that resolves, else ``None``."""
    for locator in locators:
        element = session.find(to_by(locator.strategy), locator.value)
        if element is not None:
            logger.debug(f"Resolved {locator}")
            return element
        logger.debug(f"No match for {locator}")
    return None

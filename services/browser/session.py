# --------------------------------------------------------------
# services/browser/session.py
# --------------------------------------------------------------
"""
The browser session is an explicitly owned resource: the orchestrator
creates one per site, hands it to exactly one ``SiteSessionRunner`` and the
runner quits it when the batch ends.  Nothing here is process-global.

``BrowserSession`` is the narrow surface the submitter needs.  Elements
returned by ``find`` follow Selenium's ``WebElement`` API (``click``,
``clear``, ``send_keys``, ``is_selected``, ``get_attribute``, ``text``,
``find_elements``).
"""

# ---------- Standard library ----------
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

# ---------- Selenium / WebDriver ----------
from selenium import webdriver
from selenium.common.exceptions import (
    InvalidSessionIdException,
    NoAlertPresentException,
    TimeoutException,
    WebDriverException,
)
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait
from webdriver_manager.chrome import ChromeDriverManager

# ---------- Logging ----------
from loguru import logger

# ---------- Third‑party helpers ----------
from tenacity import (
    retry,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

# ---------- Project‑specific imports ----------
from core.config import Settings, get_settings
from core.exceptions import SessionError
from models.site_config import SiteConfig

POLL_FREQUENCY = 0.25


class BrowserSession(ABC):
    """One browsing context bound to a single site for its whole batch."""

    @abstractmethod
    def navigate(self, url: str) -> None:
        """Load ``url``; raises ``WebDriverException`` on failure."""

    @abstractmethod
    def find(self, by: str, value: str) -> Optional[Any]:
        """Return the first element matching ``(by, value)`` or ``None``."""

    @abstractmethod
    def wait_for(self, by: str, value: str, timeout: float) -> bool:
        """Poll up to ``timeout`` seconds for an element; ``True`` if it appeared."""

    @abstractmethod
    def click_via_script(self, element: Any) -> None:
        """Click through JavaScript, bypassing overlays that intercept pointer events."""

    @abstractmethod
    def accept_alert(self, timeout: float = 1.0) -> bool:
        """Accept a native alert if one shows up within ``timeout``."""

    @abstractmethod
    def execute_script(self, script: str, *args: Any) -> Any:
        ...

    @abstractmethod
    def screenshot(self, path: Path) -> Optional[Path]:
        """Write a PNG to ``path``; ``None`` when the capture failed."""

    @abstractmethod
    def quit(self) -> None:
        ...

    # Context‑manager sugar so ad‑hoc scripts can ``with create_session(...)``
    def __enter__(self) -> "BrowserSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.quit()
        return False


# ----------------------------------------------------------------------
# Selenium‑only safe_get_url
# ----------------------------------------------------------------------
@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=4, max=10),
    retry=(
        retry_if_exception_type(WebDriverException)
        & retry_if_not_exception_type(InvalidSessionIdException)
    ),
    reraise=True,
)
def safe_get_url(browser: webdriver.Chrome, url: str, timeout: int):
    """Safely navigate to a URL with Selenium, applying a timeout."""
    browser.set_page_load_timeout(timeout)
    return browser.get(url)


class SeleniumSession(BrowserSession):
    """``BrowserSession`` backed by a Chrome WebDriver."""

    def __init__(self, driver: webdriver.Chrome, wait_timeout: float = 10.0, page_load_timeout: int = 30):
        self.driver = driver
        self.wait_timeout = wait_timeout
        self.page_load_timeout = page_load_timeout
        self._closed = False

    def navigate(self, url: str) -> None:
        logger.debug(f"Navigating to {url}")
        start = time.time()
        try:
            safe_get_url(self.driver, url, self.page_load_timeout)
        except InvalidSessionIdException as exc:
            raise SessionError(f"Browser session is gone: {exc.msg}") from exc
        logger.debug(f"Navigation finished in {time.time() - start:.2f}s")

    def find(self, by: str, value: str) -> Optional[Any]:
        try:
            elements = WebDriverWait(
                self.driver, self.wait_timeout, poll_frequency=POLL_FREQUENCY
            ).until(lambda d: d.find_elements(by, value))
            return elements[0]
        except TimeoutException:
            return None
        except InvalidSessionIdException as exc:
            raise SessionError(f"Browser session is gone: {exc.msg}") from exc
        except WebDriverException as exc:
            logger.debug(f"Lookup {by}={value} failed: {exc.msg}")
            return None

    def wait_for(self, by: str, value: str, timeout: float) -> bool:
        try:
            WebDriverWait(self.driver, timeout, poll_frequency=POLL_FREQUENCY).until(
                EC.presence_of_element_located((by, value))
            )
            return True
        except TimeoutException:
            return False
        except InvalidSessionIdException as exc:
            raise SessionError(f"Browser session is gone: {exc.msg}") from exc
        except WebDriverException as exc:
            logger.debug(f"Wait for {by}={value} failed: {exc.msg}")
            return False

    def click_via_script(self, element: Any) -> None:
        self.driver.execute_script("arguments[0].click();", element)

    def accept_alert(self, timeout: float = 1.0) -> bool:
        try:
            WebDriverWait(self.driver, timeout).until(EC.alert_is_present())
            self.driver.switch_to.alert.accept()
            return True
        except (TimeoutException, NoAlertPresentException):
            return False

    def execute_script(self, script: str, *args: Any) -> Any:
        return self.driver.execute_script(script, *args)

    def screenshot(self, path: Path) -> Optional[Path]:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            if not self.driver.save_screenshot(str(path)):
                logger.error(f"Screenshot could not be written to {path}")
                return None
            logger.info(f"Screenshot saved: {path}")
            return path
        except (OSError, WebDriverException) as exc:
            logger.error(f"Screenshot failed: {exc}")
            return None

    def quit(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self.driver.quit()
            logger.info("WebDriver closed")
        except WebDriverException as exc:
            logger.warning(f"Issue while closing WebDriver: {exc.msg}")


# ----------------------------------------------------------------------
# Factory
# ----------------------------------------------------------------------
def _chrome_options(headless: bool) -> Options:
    options = Options()
    if headless:
        options.add_argument("--headless=new")
    for arg in (
        "--no-sandbox",
        "--disable-dev-shm-usage",
        "--disable-gpu",
        "--window-size=1920,1080",
        "--disable-blink-features=AutomationControlled",
    ):
        options.add_argument(arg)
    return options


def create_session(site_config: SiteConfig, settings: Optional[Settings] = None) -> SeleniumSession:
    """Launch a fresh Chrome for one site.  Raises ``SessionError`` if it won't start."""
    settings = settings or get_settings()
    headless = site_config.settings.headless
    if headless is None:
        headless = settings.HEADLESS

    logger.info(f"Creating Chrome session for {site_config.name} (headless={headless})")
    try:
        service = Service(ChromeDriverManager().install())
        driver = webdriver.Chrome(service=service, options=_chrome_options(headless))
        driver.set_script_timeout(settings.PAGE_LOAD_TIMEOUT)
    except WebDriverException as exc:
        raise SessionError(f"Could not start Chrome for '{site_config.name}': {exc.msg}") from exc

    return SeleniumSession(
        driver,
        wait_timeout=site_config.settings.wait_timeout_seconds,
        page_load_timeout=settings.PAGE_LOAD_TIMEOUT,
    )

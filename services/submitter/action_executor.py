# services/submitter/action_executor.py
import time
from pathlib import Path
from typing import List, Optional

from loguru import logger
from selenium.common.exceptions import InvalidSessionIdException, WebDriverException
from selenium.webdriver.common.by import By

from core.exceptions import ActionError
from models.site_config import ActionSpec, SiteConfig
from services.browser.locators import resolve_first
from services.browser.session import BrowserSession

from .hooks import Hooks, run_hook
from .screenshots import capture_error_screenshot

ALERT_TIMEOUT = 1.0


class ActionExecutor:
    """
    Clicks a named terminal control (save, publish, ...) and confirms it.

    A missing action element is fatal; a missing confirmation dialog or a
    success indicator that never shows up only produce warnings, the click
    is assumed to have taken effect.
    """

    def __init__(
        self,
        session: BrowserSession,
        site_config: SiteConfig,
        hooks: Optional[Hooks] = None,
        screenshot_dir: Optional[Path] = None,
    ):
        self.session = session
        self.site_config = site_config
        self.hooks = hooks or Hooks()
        self.screenshot_dir = screenshot_dir if site_config.settings.screenshot_on_error else None

    def perform(self, action_name: str) -> List[str]:
        """Run one action; returns warnings, raises ``ActionError`` when fatal."""
        try:
            return self._perform(action_name)
        except ActionError as exc:
            logger.error(str(exc))
            capture_error_screenshot(self.session, self.screenshot_dir, action_name)
            raise

    def _perform(self, action_name: str) -> List[str]:
        spec: Optional[ActionSpec] = self.site_config.actions.get(action_name)
        if spec is None:
            raise ActionError(action_name, "not configured")

        element = resolve_first(self.session, spec.locators)
        if element is None:
            raise ActionError(action_name, "button not found")

        warnings: List[str] = []
        try:
            element.click()
        except InvalidSessionIdException:
            raise
        except WebDriverException as exc:
            raise ActionError(action_name, f"click failed: {exc.msg}") from exc

        if spec.confirm_dialog:
            if self.session.accept_alert(timeout=ALERT_TIMEOUT):
                logger.info(f"Confirmed dialog for action '{action_name}'")
            else:
                warnings.append(f"Expected confirmation dialog for '{action_name}' not found")
                logger.warning(warnings[-1])

        time.sleep(spec.wait_after / 1000)

        if spec.success_indicator:
            if self.session.wait_for(By.CSS_SELECTOR, spec.success_indicator, spec.success_timeout / 1000):
                logger.info(f"Action '{action_name}' completed successfully")
            else:
                warnings.append(f"Success indicator not found for action '{action_name}'")
                logger.warning(warnings[-1])

        if not run_hook("afterSubmit", self.hooks.after_action, self.session):
            warnings.append(f"afterSubmit hook failed after '{action_name}'")
        return warnings

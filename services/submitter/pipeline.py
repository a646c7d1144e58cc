# services/submitter/pipeline.py
"""
Per-article state machine::

    NAVIGATE ──► FILL ──► ACT ──► DONE
        └──────────┴────────┴───► ERROR

One call to :meth:`SubmissionPipeline.submit` is one attempt.  Retrying is
the caller's business; the pipeline only turns article-level failures into
a failed ``SubmissionResult``.  A dead browser session is not an article
problem and is raised as ``SessionError``.
"""

import time
from pathlib import Path
from typing import List, Optional

from loguru import logger
from prometheus_client import Counter, Histogram
from selenium.common.exceptions import InvalidSessionIdException, WebDriverException
from selenium.webdriver.common.by import By

from core.exceptions import ArticleError, NavigationError, SessionError
from models.article import Article
from models.results import PipelineState, SubmissionResult
from models.site_config import SiteConfig
from services.browser.locators import resolve_first
from services.browser.session import BrowserSession

from .action_executor import ActionExecutor
from .field_dispatcher import FieldDispatcher
from .hooks import Hooks, run_hook
from .screenshots import capture_error_screenshot

# Seconds to let the page settle after a script-driven navigation click
NAVIGATION_SETTLE = 2.0

SUBMISSION_ATTEMPTS = Counter('submission_attempts_total', 'Total number of article submission attempts')
SUBMISSION_FAILURES = Counter('submission_failures_total', 'Total number of failed article submission attempts')
SUBMISSION_DURATION = Histogram('submission_duration_seconds', 'Time spent on one article submission attempt')


class SubmissionPipeline:
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
        self.fields = FieldDispatcher(session, site_config.settings)
        self.executor = ActionExecutor(session, site_config, self.hooks, screenshot_dir)

    # ------------------------------------------------------------------
    def submit(self, article: Article, attempt: int = 1) -> SubmissionResult:
        SUBMISSION_ATTEMPTS.inc()
        state = PipelineState.NAVIGATE
        warnings: List[str] = []
        acted: Optional[str] = None

        try:
            with SUBMISSION_DURATION.time():
                warnings += self.navigate()

                state = PipelineState.FILL
                if not run_hook("beforeSubmit", self.hooks.before_submit, self.session):
                    warnings.append("beforeSubmit hook failed")
                warnings += self.fields.fill_all(self.site_config.form_fields, article)

                state = PipelineState.ACT
                for action_name in self.site_config.actions_for_status(article.status):
                    warnings += self.executor.perform(action_name)
                    acted = action_name

        except InvalidSessionIdException as exc:
            raise SessionError(f"Browser session is gone: {exc.msg}") from exc
        except (ArticleError, WebDriverException) as exc:
            SUBMISSION_FAILURES.inc()
            message = exc.message if isinstance(exc, ArticleError) else f"Browser error: {exc.msg}"
            logger.error(
                f"Failed to submit article '{article.title}' during {state.value}: {message}"
            )
            capture_error_screenshot(self.session, self.screenshot_dir, "submit")
            return SubmissionResult(
                success=False,
                title=article.title,
                status=acted or self.site_config.normalize_status(article.status),
                error=message,
                attempt=attempt,
                state=PipelineState.ERROR,
                failed_state=state,
                warnings=tuple(warnings),
            )

        logger.info(f"Article '{article.title}' submitted successfully with status: {acted}")
        return SubmissionResult(
            success=True,
            title=article.title,
            status=acted,
            attempt=attempt,
            state=PipelineState.DONE,
            warnings=tuple(warnings),
        )

    # ------------------------------------------------------------------
    # NAVIGATE
    # ------------------------------------------------------------------
    def navigate(self) -> List[str]:
        """Reach the new-entry form: direct URL first, then each click path in order."""
        nav = self.site_config.navigation
        warnings: List[str] = []

        try:
            self.session.navigate(nav.new_article_url)
            if self._on_form():
                logger.info("Navigated to new article form via direct URL")
                return warnings
            warnings.append("Direct URL did not show the form, trying fallback selectors")
        except InvalidSessionIdException:
            raise
        except WebDriverException as exc:
            warnings.append(f"Direct navigation failed: {exc.msg}")
        logger.warning(warnings[-1])

        for path in nav.fallback_selectors:
            element = resolve_first(self.session, [path.locator])
            if element is None:
                warnings.append(f"Fallback selector not found: {path.label}")
                logger.warning(warnings[-1])
                continue
            try:
                self.session.click_via_script(element)
            except InvalidSessionIdException:
                raise
            except WebDriverException as exc:
                warnings.append(f"Fallback click failed for {path.label}: {exc.msg}")
                logger.warning(warnings[-1])
                continue

            time.sleep(NAVIGATION_SETTLE)
            if self._on_form():
                logger.info(f"Navigated using fallback: {path.label}")
                return warnings
            warnings.append(f"Fallback did not reach the form: {path.label}")
            logger.warning(warnings[-1])

        raise NavigationError("Failed to navigate to new article form using all available methods")

    def _on_form(self) -> bool:
        nav = self.site_config.navigation
        if not nav.wait_for_element:
            return True
        return self.session.wait_for(By.CSS_SELECTOR, nav.wait_for_element, nav.landmark_timeout / 1000)

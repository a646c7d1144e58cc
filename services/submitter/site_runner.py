# services/submitter/site_runner.py
import os
import time
from pathlib import Path
from typing import List, Optional, Sequence
from urllib.parse import quote, urlsplit, urlunsplit

from loguru import logger
from prometheus_client import Counter, Histogram
from selenium.common.exceptions import InvalidSessionIdException, WebDriverException
from tenacity import Retrying, retry_if_result, stop_after_attempt, wait_fixed

from core.exceptions import ConfigError, SessionError, SubmitterException
from models.article import Article
from models.results import PipelineState, SiteResult, SubmissionResult, utcnow
from models.site_config import AuthType, Locator, SiteConfig
from services.browser.locators import resolve_first
from services.browser.session import BrowserSession

from .hooks import Hooks, run_hook
from .pipeline import SubmissionPipeline

# Seconds to wait for the login page to render and for the login to settle
LOGIN_PAGE_SETTLE = 2.0
LOGIN_SETTLE = 3.0

SITE_RUNS = Counter('site_runs_total', 'Total number of site batches run')
SITE_FAILURES = Counter('site_failures_total', 'Total number of site batches that did not fully succeed')
SITE_DURATION = Histogram('site_run_duration_seconds', 'Time spent on one site batch')


def _with_credentials(url: str, username: str, password: str) -> str:
    parts = urlsplit(url)
    host = parts.netloc.rsplit("@", 1)[-1]
    netloc = f"{quote(username, safe='')}:{quote(password, safe='')}@{host}"
    return urlunsplit(parts._replace(netloc=netloc))


class SiteSessionRunner:
    """
    Authenticates once, then pushes a batch of articles through the
    submission pipeline with a bounded retry per article.

    The runner owns ``session`` from construction until ``run`` returns and
    always quits it, whatever happened in between.
    """

    def __init__(
        self,
        site_config: SiteConfig,
        session: BrowserSession,
        *,
        max_attempts: Optional[int] = None,
        hooks: Optional[Hooks] = None,
        screenshot_dir: Optional[Path] = None,
        pipeline: Optional[SubmissionPipeline] = None,
        config_path: Optional[str] = None,
    ):
        self.site_config = site_config
        self.session = session
        self.config_path = config_path
        settings = site_config.settings
        self.max_attempts = settings.max_retries or max_attempts or 1
        self.retry_delay = settings.retry_delay / 1000
        self.article_delay = settings.delay_between_articles / 1000
        # attempts made so far on the article currently being submitted
        self._in_flight = 0
        self.hooks = hooks or Hooks.from_scripts(site_config.custom_scripts)
        self.pipeline = pipeline or SubmissionPipeline(
            session, site_config, hooks=self.hooks, screenshot_dir=screenshot_dir
        )

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------
    def authenticate(self) -> None:
        auth = self.site_config.authentication
        logger.info(f"Authenticating to {self.site_config.name} ({auth.type.value})")

        if auth.type == AuthType.BASIC:
            username, password = self._credentials()
            self.session.navigate(_with_credentials(self.site_config.base_url, username, password))
        elif auth.type == AuthType.FORM:
            self._form_login()

        if not run_hook("afterLogin", self.hooks.after_auth, self.session):
            logger.warning(f"afterLogin hook failed for {self.site_config.name}, continuing")

    def _credentials(self):
        creds = self.site_config.authentication.credentials
        values = []
        for env_name in (creds.username_env, creds.password_env):
            value = os.getenv(env_name) if env_name else None
            if not value:
                raise ConfigError(
                    f"Credential environment variable '{env_name}' is not set for site '{self.site_config.name}'",
                    details={"site": self.site_config.name, "variable": env_name},
                )
            values.append(value)
        return values[0], values[1]

    def _form_login(self) -> None:
        auth = self.site_config.authentication
        username, password = self._credentials()
        if not auth.login_url:
            raise ConfigError(f"Form authentication for '{self.site_config.name}' has no loginUrl")

        try:
            self.session.navigate(auth.login_url)
            time.sleep(LOGIN_PAGE_SETTLE)

            elements = {}
            for role in ("username", "password", "submit_button"):
                selector = getattr(auth.selectors, role)
                element = resolve_first(
                    self.session, [Locator(strategy=auth.selector_type, value=selector)] if selector else []
                )
                if element is None:
                    raise SessionError(
                        f"Login {role.replace('_', ' ')} field not found for '{self.site_config.name}'",
                        details={"site": self.site_config.name, "selector": selector},
                    )
                elements[role] = element

            elements["username"].clear()
            elements["username"].send_keys(username)
            elements["password"].clear()
            elements["password"].send_keys(password)
            elements["submit_button"].click()
            time.sleep(LOGIN_SETTLE)
        except WebDriverException as exc:
            raise SessionError(f"Login to '{self.site_config.name}' failed: {exc.msg}") from exc

        logger.info(f"Form login submitted for {self.site_config.name}")

    # ------------------------------------------------------------------
    # Articles
    # ------------------------------------------------------------------
    def submit_with_retry(self, article: Article) -> SubmissionResult:
        """First successful attempt, or the last failure after ``max_attempts``."""
        self._in_flight = 0

        def _attempt() -> SubmissionResult:
            self._in_flight += 1
            if self._in_flight > 1:
                logger.info(f"Retrying '{article.title}' (attempt {self._in_flight}/{self.max_attempts})")
            return self.pipeline.submit(article, attempt=self._in_flight)

        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_fixed(self.retry_delay),
            retry=retry_if_result(lambda result: not result.success),
            retry_error_callback=lambda state: state.outcome.result(),
            sleep=time.sleep,
        )
        return retrying(_attempt)

    def run(self, articles: Sequence[Article]) -> SiteResult:
        """Authenticate, submit every article in order and release the session."""
        SITE_RUNS.inc()
        started = utcnow()
        results: List[SubmissionResult] = []
        error: Optional[str] = None
        logger.info(f"Processing {len(articles)} articles for {self.site_config.name}")

        try:
            with SITE_DURATION.time():
                self.authenticate()
                for index, article in enumerate(articles, start=1):
                    logger.info(f"[{index}/{len(articles)}] {article.title}")
                    results.append(self.submit_with_retry(article))
                    self._in_flight = 0
                    time.sleep(self.article_delay)
        except InvalidSessionIdException as exc:
            error = f"Browser session is gone: {exc.msg}"
        except SubmitterException as exc:
            error = exc.message
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception(f"Unexpected failure while processing {self.site_config.name}")
            error = f"Unexpected error: {exc}"
        finally:
            self.session.quit()

        if error is not None:
            logger.error(f"Site {self.site_config.name} aborted: {error}")
            remaining = list(articles[len(results):])
            if remaining and self._in_flight:
                # the article that was being submitted when the site failed
                current = remaining.pop(0)
                results.append(
                    SubmissionResult(
                        success=False,
                        title=current.title,
                        error=error,
                        attempt=self._in_flight,
                        state=PipelineState.ERROR,
                    )
                )
            results.extend(SubmissionResult.not_attempted(a.title, error) for a in remaining)

        site = SiteResult.from_results(
            self.site_config.name,
            results,
            error=error,
            config_path=self.config_path,
            started_at=started,
        )
        if not site.success:
            SITE_FAILURES.inc()
        logger.info(
            f"Site {site.name} finished: {site.successful_articles}/{site.total_articles} articles submitted"
        )
        return site

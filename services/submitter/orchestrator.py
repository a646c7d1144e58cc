# services/submitter/orchestrator.py
import time
from typing import Callable, Optional

from loguru import logger

from core.config import Settings, get_settings
from core.exceptions import SubmitterException
from models.manifest import Manifest, WebsiteDefinition
from models.results import RunResult, SiteResult, SubmissionResult, utcnow
from models.site_config import SiteConfig
from services.browser.session import BrowserSession, create_session

from .config_loader import load_site_config
from .screenshots import sanitize_filename
from .site_runner import SiteSessionRunner

SessionFactory = Callable[[SiteConfig], BrowserSession]
ConfigLoader = Callable[[str], SiteConfig]


class MultiSiteOrchestrator:
    """
    Runs every enabled website of a manifest, one after the other, each
    through its own freshly created session and ``SiteSessionRunner``.
    """

    def __init__(
        self,
        manifest: Manifest,
        *,
        session_factory: Optional[SessionFactory] = None,
        config_loader: ConfigLoader = load_site_config,
        settings: Optional[Settings] = None,
    ):
        self.manifest = manifest
        self.settings = settings or get_settings()
        self.session_factory = session_factory or (lambda cfg: create_session(cfg, self.settings))
        self.config_loader = config_loader

    def run(self) -> RunResult:
        result = RunResult()
        gs = self.manifest.global_settings
        sites = self.manifest.enabled_websites
        logger.info(f"Starting multi-site run: {len(sites)} of {len(self.manifest.websites)} websites enabled")

        for index, website in enumerate(sites):
            site = self.run_site(website)
            result.websites.append(site)
            result.summary.record(site)

            if not site.success and not gs.continue_on_error:
                result.summary.skipped_websites = len(sites) - index - 1
                logger.warning(
                    f"Stopping after {website.name}: site did not fully succeed and continueOnError is off"
                )
                break

            if index < len(sites) - 1 and gs.delay_between_sites:
                logger.info(f"Waiting {gs.delay_between_sites}ms before next website")
                time.sleep(gs.delay_between_sites / 1000)

        result.summary.ended_at = utcnow()
        summary = result.summary
        logger.info(
            f"Run finished: {summary.successful_websites}/{summary.total_websites} websites, "
            f"{summary.successful_articles}/{summary.total_articles} articles"
        )
        return result

    def run_site(self, website: WebsiteDefinition) -> SiteResult:
        """Load, open a session for and run one website; failures become a failed ``SiteResult``."""
        logger.info(f"Processing website: {website.name}")
        started = utcnow()
        session: Optional[BrowserSession] = None

        try:
            site_config = self.config_loader(website.config_path)
            session = self.session_factory(site_config)
            runner = SiteSessionRunner(
                site_config,
                session,
                max_attempts=website.max_retries or self.manifest.global_settings.max_retries,
                screenshot_dir=self.settings.SCREENSHOT_DIR / sanitize_filename(website.name),
                config_path=website.config_path,
            )
        except SubmitterException as exc:
            logger.error(f"Could not start website {website.name}: {exc.message}")
            self._release(session)
            return self._aborted(website, exc.message, started)
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception(f"Unexpected failure while starting website {website.name}")
            self._release(session)
            return self._aborted(website, f"Unexpected error: {exc}", started)

        site = runner.run(website.articles)
        return site.model_copy(update={"name": website.name})

    @staticmethod
    def _release(session: Optional[BrowserSession]) -> None:
        if session is None:
            return
        try:
            session.quit()
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning(f"Issue while releasing browser session: {exc}")

    @staticmethod
    def _aborted(website: WebsiteDefinition, error: str, started) -> SiteResult:
        return SiteResult.from_results(
            website.name,
            [SubmissionResult.not_attempted(a.title, error) for a in website.articles],
            error=error,
            config_path=website.config_path,
            started_at=started,
        )

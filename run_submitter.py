# run_submitter.py
"""
Command-line entry point.

Two modes, picked from the environment (or a ``.env`` file):

* ``SUBMITTER_MANIFEST=data/multi-website-data.json`` – run every enabled
  website of a manifest.
* ``SUBMITTER_SITE_CONFIG=configs/webow-cms.json`` plus
  ``SUBMITTER_ARTICLES=data/articles.json`` – one site, one batch.

Exits non-zero when any attempted site did not fully succeed.
"""

import sys
from pathlib import Path

# Make the repo root importable
repo_root = Path(__file__).resolve().parent
if str(repo_root) not in sys.path:
    sys.path.append(str(repo_root))

from loguru import logger
from prometheus_client import start_http_server

from core.config import Settings, get_settings
from core.exceptions import ConfigError
from models.manifest import GlobalSettings, Manifest, WebsiteDefinition
from models.results import RunResult
from services.submitter import MultiSiteOrchestrator, load_articles, load_manifest, write_report


def build_manifest(settings: Settings) -> Manifest:
    if settings.MANIFEST_PATH:
        return load_manifest(settings.MANIFEST_PATH)
    if settings.SITE_CONFIG_PATH and settings.ARTICLES_PATH:
        return Manifest(
            websites=[
                WebsiteDefinition(
                    name=Path(settings.SITE_CONFIG_PATH).stem,
                    enabled=True,
                    config_path=settings.SITE_CONFIG_PATH,
                    articles=load_articles(settings.ARTICLES_PATH),
                )
            ],
            global_settings=GlobalSettings(generate_report=True),
        )
    raise ConfigError("Set SUBMITTER_MANIFEST, or SUBMITTER_SITE_CONFIG together with SUBMITTER_ARTICLES")


def print_summary(run: RunResult) -> None:
    s = run.summary
    print("\n=== SUBMISSION SUMMARY ===")
    print(f"Websites : {s.successful_websites}/{s.total_websites} succeeded"
          + (f", {s.skipped_websites} skipped" if s.skipped_websites else ""))
    print(f"Articles : {s.successful_articles}/{s.total_articles} succeeded")
    print(f"Duration : {s.duration_seconds or 0:.1f}s")

    for site in run.websites:
        mark = "OK " if site.success else "ERR"
        print(f"\n[{mark}] {site.name}" + (f" – {site.error}" if site.error else ""))
        for article in site.articles:
            detail = article.status if article.success else article.error
            print(f"    {'+' if article.success else '-'} {article.title} ({detail})")


def main() -> int:
    settings = get_settings()
    logger.remove()
    logger.add(sys.stderr, level=settings.LOG_LEVEL)

    if settings.METRICS_PORT:
        start_http_server(settings.METRICS_PORT)
        logger.info(f"Prometheus metrics exposed on :{settings.METRICS_PORT}")

    try:
        manifest = build_manifest(settings)
    except ConfigError as exc:
        logger.error(exc.message)
        return 2

    run = MultiSiteOrchestrator(manifest, settings=settings).run()
    print_summary(run)

    gs = manifest.global_settings
    if gs.generate_report:
        report_dir = Path(gs.report_path) if gs.report_path else settings.REPORT_DIR
        write_report(run, report_dir, gs)

    return 0 if run.success else 1


if __name__ == "__main__":
    sys.exit(main())

from .action_executor import ActionExecutor
from .config_loader import clear_cache, load_articles, load_manifest, load_site_config
from .field_dispatcher import FieldDispatcher
from .hooks import Hooks
from .orchestrator import MultiSiteOrchestrator
from .pipeline import SubmissionPipeline
from .report import build_report, write_report
from .site_runner import SiteSessionRunner

__all__ = [
    "ActionExecutor",
    "FieldDispatcher",
    "Hooks",
    "MultiSiteOrchestrator",
    "SiteSessionRunner",
    "SubmissionPipeline",
    "build_report",
    "clear_cache",
    "load_articles",
    "load_manifest",
    "load_site_config",
    "write_report",
]

from .article import Article, article_from_mapping
from .manifest import GlobalSettings, Manifest, WebsiteDefinition
from .results import PipelineState, RunResult, RunSummary, SiteResult, SubmissionResult
from .site_config import (
    ActionSpec,
    AuthType,
    FieldSpec,
    FieldType,
    Locator,
    LocatorStrategy,
    SiteConfig,
    SiteSettings,
)

__all__ = [
    'Article', 'article_from_mapping',
    'GlobalSettings', 'Manifest', 'WebsiteDefinition',
    'PipelineState', 'RunResult', 'RunSummary', 'SiteResult', 'SubmissionResult',
    'ActionSpec', 'AuthType', 'FieldSpec', 'FieldType', 'Locator', 'LocatorStrategy',
    'SiteConfig', 'SiteSettings',
]

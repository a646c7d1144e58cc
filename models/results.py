# models/results.py
"""
Structured output of a run.  Nothing here is rendered; reporting tools
consume these models (``model_dump(mode="json", by_alias=True)``).
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from pydantic import ConfigDict, Field, computed_field

from .base import ResultModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PipelineState(str, Enum):
    NAVIGATE = "navigate"
    FILL = "fill"
    ACT = "act"
    DONE = "done"
    ERROR = "error"


# ----------------------------------------------------------------------
# Per article
# ----------------------------------------------------------------------
class SubmissionResult(ResultModel):
    """Outcome of one pipeline attempt for one article."""

    model_config = ConfigDict(frozen=True)

    success: bool
    title: Optional[str] = None
    status: Optional[str] = None            # last action acted on
    error: Optional[str] = None
    attempt: int = 1
    state: Optional[PipelineState] = PipelineState.DONE
    failed_state: Optional[PipelineState] = None
    warnings: Tuple[str, ...] = ()

    @classmethod
    def not_attempted(cls, title: Optional[str], error: str) -> "SubmissionResult":
        """Result for an article the site never got to (site-level abort)."""
        return cls(success=False, title=title, error=error, attempt=0, state=None)


# ----------------------------------------------------------------------
# Per site
# ----------------------------------------------------------------------
class SiteResult(ResultModel):
    name: str
    config_path: Optional[str] = None
    success: bool = False
    total_articles: int = 0
    successful_articles: int = 0
    failed_articles: int = 0
    articles: List[SubmissionResult] = Field(default_factory=list)
    error: Optional[str] = None
    started_at: datetime = Field(default_factory=utcnow)
    ended_at: Optional[datetime] = None

    @classmethod
    def from_results(
        cls,
        name: str,
        results: Sequence[SubmissionResult],
        *,
        error: Optional[str] = None,
        config_path: Optional[str] = None,
        started_at: Optional[datetime] = None,
        ended_at: Optional[datetime] = None,
    ) -> "SiteResult":
        """
        Aggregate per-article results.  A site-level ``error`` counts every
        article as failed; the individual records keep their own outcome.
        """
        successful = 0 if error is not None else sum(1 for r in results if r.success)
        failed = len(results) - successful
        return cls(
            name=name,
            config_path=config_path,
            success=error is None and failed == 0,
            total_articles=len(results),
            successful_articles=successful,
            failed_articles=failed,
            articles=list(results),
            error=error,
            started_at=started_at or utcnow(),
            ended_at=ended_at or utcnow(),
        )

    @computed_field
    @property
    def duration_seconds(self) -> Optional[float]:
        if self.ended_at is None:
            return None
        return (self.ended_at - self.started_at).total_seconds()


# ----------------------------------------------------------------------
# Per run
# ----------------------------------------------------------------------
class RunSummary(ResultModel):
    """Counts across the sites actually attempted."""

    total_websites: int = 0
    successful_websites: int = 0
    failed_websites: int = 0
    skipped_websites: int = 0
    total_articles: int = 0
    successful_articles: int = 0
    failed_articles: int = 0
    started_at: datetime = Field(default_factory=utcnow)
    ended_at: Optional[datetime] = None

    def record(self, site: SiteResult) -> None:
        self.total_websites += 1
        if site.success:
            self.successful_websites += 1
        else:
            self.failed_websites += 1
        self.total_articles += site.total_articles
        self.successful_articles += site.successful_articles
        self.failed_articles += site.failed_articles

    @computed_field
    @property
    def success(self) -> bool:
        return self.failed_websites == 0

    @computed_field
    @property
    def duration_seconds(self) -> Optional[float]:
        if self.ended_at is None:
            return None
        return (self.ended_at - self.started_at).total_seconds()


class RunResult(ResultModel):
    summary: RunSummary = Field(default_factory=RunSummary)
    websites: List[SiteResult] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.summary.success

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

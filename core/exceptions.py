# core/exceptions.py
"""
Error taxonomy for the submitter.

Two scopes matter to callers:

* **Site level** – ``ConfigError`` and ``SessionError`` abort the whole site.
  The ``SiteSessionRunner`` turns them into a failed ``SiteResult``.
* **Article level** – every ``ArticleError`` subclass aborts only the
  current article.  The ``SubmissionPipeline`` turns them into a failed
  ``SubmissionResult``.
"""

from typing import Any, Dict, Optional


class SubmitterException(Exception):
    """Base class for every error raised by the submitter."""

    code = "SUBMITTER_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Structured form used by reports."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                **self.details,
            }
        }


# ----------------------------------------------------------------------
# Site level
# ----------------------------------------------------------------------
class ConfigError(SubmitterException):
    """Malformed configuration or an unset credential variable."""

    code = "CONFIG_ERROR"


class SessionError(SubmitterException):
    """Authentication failed or the browser session died."""

    code = "SESSION_ERROR"


# ----------------------------------------------------------------------
# Article level
# ----------------------------------------------------------------------
class ArticleError(SubmitterException):
    """Base for failures that are fatal to one article only."""

    code = "ARTICLE_ERROR"


class NavigationError(ArticleError):
    """The new-entry form could not be reached."""

    code = "NAVIGATION_ERROR"


class FieldResolutionError(ArticleError):
    """A required form field could not be located on the page."""

    code = "FIELD_RESOLUTION_ERROR"

    def __init__(self, field_name: str, reason: str = "not found"):
        super().__init__(
            f"Required field '{field_name}' {reason}",
            details={"field": field_name},
        )
        self.field_name = field_name


class OptionNotFoundError(ArticleError):
    """A select field has no option matching the mapped value."""

    code = "OPTION_NOT_FOUND"

    def __init__(self, field_name: str, value: Any):
        super().__init__(
            f"Option '{value}' not found in select field '{field_name}'",
            details={"field": field_name, "value": value},
        )
        self.field_name = field_name
        self.value = value


class ActionError(ArticleError):
    """A terminal form action could not be executed."""

    code = "ACTION_ERROR"

    def __init__(self, action_name: str, reason: str):
        super().__init__(
            f"Action '{action_name}' failed: {reason}",
            details={"action": action_name},
        )
        self.action_name = action_name

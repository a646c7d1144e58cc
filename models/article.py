# models/article.py
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class Article(BaseModel):
    """
    One content unit to submit.

    Only ``title`` is mandatory.  ``status`` selects the terminal action
    (missing means ``save``); every other key is matched by name against
    the site's ``formFields``.
    """

    model_config = ConfigDict(extra="allow")

    title: str
    status: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def _title_as_text(cls, v: Any) -> Any:
        if isinstance(v, (int, float)):
            return str(v)
        return v

    def value_for(self, field_name: str) -> Any:
        """Raw value for a form field, or ``None`` when the article has none."""
        if field_name in ("title", "status"):
            return getattr(self, field_name)
        return (self.model_extra or {}).get(field_name)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


def article_from_mapping(data: Mapping[str, Any]) -> Article:
    """Build an :class:`Article` from any ``dict``-like record."""
    return Article.model_validate(dict(data))

# services/submitter/config_loader.py
"""
Reads site configurations, article batches and multi-site manifests from
JSON or YAML files and validates them with the Pydantic models.

``yaml.safe_load`` parses both formats (JSON is a subset of YAML), so the
file extension does not matter.  Every failure – missing file, broken
syntax, schema violation – surfaces as ``ConfigError``.

Public API:
* ``load_site_config(path)`` – cached per resolved path.
* ``load_articles(path)`` – bare list, ``{rows: [...]}`` or ``{articles: [...]}``.
* ``load_manifest(path)``.
"""

from pathlib import Path
from typing import Any, Dict, List, Union

import yaml
from loguru import logger
from pydantic import ValidationError

from core.exceptions import ConfigError
from models.article import Article, article_from_mapping
from models.manifest import Manifest
from models.site_config import SiteConfig

PathLike = Union[str, Path]

# Simple in-process cache so a config shared by several websites is parsed once
_site_cache: Dict[Path, SiteConfig] = {}


# ----------------------------------------------------------------------
# Internal helpers
# ----------------------------------------------------------------------
def _read_document(path: PathLike) -> Any:
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            return yaml.safe_load(fh)
    except FileNotFoundError as exc:
        raise ConfigError(f"Configuration file not found: {path}", details={"path": str(path)}) from exc
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Could not parse {path}: {exc}", details={"path": str(path)}) from exc


def _validation_message(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}" if location else first["msg"]


# ----------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------
def load_site_config(path: PathLike) -> SiteConfig:
    """
    Return a **validated** ``SiteConfig`` for the document at ``path``.

    Raises
    ------
    ConfigError
        If the file is missing, unparsable or does not match the schema.
    """
    key = Path(path).resolve()
    if key in _site_cache:
        return _site_cache[key]

    raw = _read_document(path)
    if not isinstance(raw, dict):
        raise ConfigError(f"Site configuration must be a mapping: {path}")
    try:
        config = SiteConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(
            f"Invalid site configuration {path}: {_validation_message(exc)}",
            details={"path": str(path)},
        ) from exc

    logger.info(f"Loaded configuration for: {config.name}")
    _site_cache[key] = config
    return config


def clear_cache() -> None:
    _site_cache.clear()


def load_articles(path: PathLike) -> List[Article]:
    """Article batch from a bare list or a ``rows``/``articles`` wrapper."""
    raw = _read_document(path)
    if isinstance(raw, dict):
        raw = raw.get("rows", raw.get("articles"))
    if not isinstance(raw, list):
        raise ConfigError(f"Article data must be a list or contain 'rows': {path}")

    try:
        articles = [article_from_mapping(item) for item in raw]
    except (TypeError, ValueError) as exc:
        # pydantic's ValidationError is a ValueError
        raise ConfigError(f"Invalid article in {path}: {exc}", details={"path": str(path)}) from exc

    logger.info(f"Loaded {len(articles)} articles from {path}")
    return articles


def load_manifest(path: PathLike) -> Manifest:
    raw = _read_document(path)
    if not isinstance(raw, dict):
        raise ConfigError(f"Manifest must be a mapping: {path}")
    try:
        manifest = Manifest.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(
            f"Invalid manifest {path}: {_validation_message(exc)}",
            details={"path": str(path)},
        ) from exc

    logger.info(
        f"Loaded manifest with {len(manifest.websites)} websites "
        f"({len(manifest.enabled_websites)} enabled)"
    )
    return manifest

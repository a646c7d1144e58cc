# services/submitter/field_dispatcher.py
"""
Fills declared form fields from an article's raw values.

Each field type has its own handler.  Two failures are fatal to the
article: a required field that resolves to nothing
(``FieldResolutionError``) and a select with no matching option
(``OptionNotFoundError``).  Everything else is reported back as a warning
and the remaining fields are still processed.
"""

import time
from typing import Any, Callable, Dict, List, Mapping, Optional

from loguru import logger
from selenium.common.exceptions import InvalidSessionIdException, WebDriverException
from selenium.webdriver.common.by import By

from core.exceptions import FieldResolutionError, OptionNotFoundError
from models.article import Article
from models.site_config import FieldSpec, FieldType, SiteSettings
from services.browser.locators import resolve_first
from services.browser.session import BrowserSession

from .dates import format_date

_FALSE_STRINGS = {"", "false", "0", "no", "off"}


def as_bool(value: Any) -> bool:
    """Truthiness of a raw article value; common "false" spellings count as false."""
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


class FieldDispatcher:
    """Type-aware filling of one field at a time."""

    def __init__(self, session: BrowserSession, settings: SiteSettings):
        self.session = session
        self.delay = settings.delay_between_actions / 1000
        self._handlers: Dict[FieldType, Callable[[str, FieldSpec, Any, Any], None]] = {
            FieldType.TEXT: self._fill_text,
            FieldType.TEXTAREA: self._fill_text,
            FieldType.SELECT: self._fill_select,
            FieldType.DATE: self._fill_date,
            FieldType.CHECKBOX: self._fill_checkbox,
            FieldType.RADIO: self._fill_radio,
            FieldType.FILE: self._fill_file,
        }

    # ------------------------------------------------------------------
    def fill_all(self, fields: Mapping[str, FieldSpec], article: Article) -> List[str]:
        """Fill every declared field the article carries, in declared order."""
        logger.info(f"Filling article: {article.title}")
        warnings: List[str] = []
        for name, spec in fields.items():
            value = article.value_for(name)
            if value is None:
                continue
            warning = self.fill(name, spec, value)
            if warning:
                warnings.append(warning)
            time.sleep(self.delay)
        return warnings

    def fill(self, name: str, spec: FieldSpec, value: Any) -> Optional[str]:
        """
        Fill one field.  Returns a warning message for recoverable problems,
        ``None`` on success; raises for the two fatal cases.
        """
        if value is None:
            return None

        element = resolve_first(self.session, spec.locators)
        if element is None:
            if spec.required:
                raise FieldResolutionError(name)
            message = f"Optional field '{name}' not found, skipping"
            logger.warning(message)
            return message

        handler = self._handlers.get(spec.field_type, self._fill_text)
        try:
            handler(name, spec, element, value)
        except InvalidSessionIdException:
            raise
        except (WebDriverException, ValueError) as exc:
            message = f"Failed to fill field '{name}': {exc}"
            logger.warning(message)
            return message

        logger.debug(f"Field '{name}' filled with value: {str(value)[:80]}")
        return None

    # ------------------------------------------------------------------
    # Per-type handlers
    # ------------------------------------------------------------------
    def _fill_text(self, name: str, spec: FieldSpec, element: Any, value: Any) -> None:
        if spec.clear_before:
            element.clear()
        element.send_keys(str(value))

    def _fill_select(self, name: str, spec: FieldSpec, element: Any, value: Any) -> None:
        target = str(spec.value_mapping.get(str(value), value))
        for option in element.find_elements(By.TAG_NAME, "option"):
            if option.get_attribute("value") == target or (option.text or "").strip() == target:
                option.click()
                return
        raise OptionNotFoundError(name, target)

    def _fill_date(self, name: str, spec: FieldSpec, element: Any, value: Any) -> None:
        text = format_date(value, spec.date_format) if spec.date_format else str(value)
        if spec.clear_before:
            element.clear()
        element.send_keys(text)

    def _fill_checkbox(self, name: str, spec: FieldSpec, element: Any, value: Any) -> None:
        wanted = as_bool(value)
        if element.is_selected() != wanted:
            element.click()

    def _fill_radio(self, name: str, spec: FieldSpec, element: Any, value: Any) -> None:
        if as_bool(value):
            element.click()

    def _fill_file(self, name: str, spec: FieldSpec, element: Any, value: Any) -> None:
        element.send_keys(str(value))

from .locators import resolve_first, to_by
from .session import BrowserSession, SeleniumSession, create_session

__all__ = ["BrowserSession", "SeleniumSession", "create_session", "resolve_first", "to_by"]

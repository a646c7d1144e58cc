# services/submitter/hooks.py
"""
Extension points around a submission.

There are exactly three: after authentication, before the form is filled
and after each action completes.  A hook is any callable taking the
session; failures are logged and never fail the article or the site.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from loguru import logger

from models.site_config import CustomScripts
from services.browser.session import BrowserSession

Hook = Callable[[BrowserSession], None]


def script_hook(script: str) -> Hook:
    """Hook that runs a JavaScript snippet in the page."""

    def _run(session: BrowserSession) -> None:
        session.execute_script(script)

    return _run


@dataclass(frozen=True)
class Hooks:
    after_auth: Optional[Hook] = None
    before_submit: Optional[Hook] = None
    after_action: Optional[Hook] = None

    @classmethod
    def from_scripts(cls, scripts: CustomScripts) -> "Hooks":
        return cls(
            after_auth=script_hook(scripts.after_login) if scripts.after_login else None,
            before_submit=script_hook(scripts.before_submit) if scripts.before_submit else None,
            after_action=script_hook(scripts.after_submit) if scripts.after_submit else None,
        )


def run_hook(name: str, hook: Optional[Hook], session: BrowserSession) -> bool:
    """Run ``hook`` best effort.  Returns ``False`` only when it raised."""
    if hook is None:
        return True
    try:
        hook(session)
        logger.info(f"Custom hook '{name}' executed")
        return True
    except Exception as exc:  # pylint: disable=broad-except
        logger.warning(f"Custom hook '{name}' failed: {exc}")
        return False

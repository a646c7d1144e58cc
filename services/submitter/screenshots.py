# services/submitter/screenshots.py
import re
from datetime import datetime
from pathlib import Path
from typing import Optional

from services.browser.session import BrowserSession


def sanitize_filename(name: str) -> str:
    return re.sub(r"[^a-z0-9]", "_", name, flags=re.I).lower()


def capture_error_screenshot(
    session: BrowserSession, directory: Optional[Path], label: str
) -> Optional[Path]:
    """Save ``error_<label>_<timestamp>.png`` under ``directory`` (no-op without one)."""
    if directory is None:
        return None
    stamp = datetime.now().strftime("%Y%m%dT%H%M%S%f")
    return session.screenshot(directory / f"error_{sanitize_filename(label)}_{stamp}.png")

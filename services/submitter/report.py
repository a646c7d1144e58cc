# services/submitter/report.py
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

from models.manifest import GlobalSettings
from models.results import RunResult, utcnow


def build_report(run: RunResult, global_settings: Optional[GlobalSettings] = None) -> Dict[str, Any]:
    """JSON-ready report document for one run."""
    data = run.to_dict()
    return {
        "generatedAt": utcnow().isoformat(),
        "durationSeconds": run.summary.duration_seconds,
        "globalSettings": (global_settings or GlobalSettings()).model_dump(mode="json", by_alias=True),
        "summary": data["summary"],
        "websites": data["websites"],
    }


def write_report(
    run: RunResult,
    directory: Path,
    global_settings: Optional[GlobalSettings] = None,
) -> Path:
    """Write ``submission-report-<timestamp>.json`` under ``directory``."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%dT%H%M%S")
    path = directory / f"submission-report-{stamp}.json"

    with path.open("w", encoding="utf-8") as fh:
        json.dump(build_report(run, global_settings), fh, indent=2, ensure_ascii=False)

    logger.info(f"Report saved: {path}")
    return path

# run_artifacts.py
import json
import logging
import uuid
from pathlib import Path
from typing import Any, Optional

import config

logger = logging.getLogger(__name__)


class RunArtifacts:
    """Flat files for one request under <RUNS_DIR>/<request_id>/ (audit/debug only)."""

    def __init__(self, request_id: Optional[str] = None, base_dir: Optional[str] = None,
                 enabled: Optional[bool] = None):
        self.request_id = request_id or str(uuid.uuid4())
        self.dir = Path(base_dir or config.RUNS_DIR) / self.request_id
        self.enabled = config.SAVE_RUN_ARTIFACTS if enabled is None else enabled

    def path(self, filename: str) -> str:
        return str(self.dir / filename)

    def write_text(self, filename: str, data: str) -> None:
        if not self.enabled:
            return
        try:
            self.dir.mkdir(parents=True, exist_ok=True)
            (self.dir / filename).write_text(data or "", encoding="utf-8")
        except OSError:
            logger.exception("[artifacts] failed to write %s", self.path(filename))

    def write_json(self, filename: str, data: Any) -> None:
        if hasattr(data, "model_dump"):
            data = data.model_dump()
        self.write_text(filename, json.dumps(data, ensure_ascii=False, indent=2, default=str))

"""
flowreader/config.py
Config with auto-detection. Read from flowreader_config.json.

Store path resolution order:
  --db flag  >  FLOWREADER_DB env var  >  config db_path  >  auto-detected
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from flowreader.store import DEFAULT_DB_PATH

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "flowreader_config.json"
DB_ENV_VAR      = "FLOWREADER_DB"

DEFAULT_CONFIG = {
    "db_path": None,
    "default_limit": 10,
    "group_by": "day",
    "export_format": "json",
}

# Candidate database locations, checked in order
AUTO_DETECT_PATHS = [
    DEFAULT_DB_PATH,
    Path("flow.sqlite"),          # copy in the working directory
]


def _config_path(project_root: Optional[Path] = None) -> Path:
    root = project_root or Path.cwd()
    return root / CONFIG_FILENAME


def load_config(project_root: Optional[Path] = None) -> Dict[str, Any]:
    """Load config from flowreader_config.json. Returns defaults if missing."""
    path = _config_path(project_root)
    if path.exists():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            if isinstance(data, dict):
                return {**DEFAULT_CONFIG, **data}
            logger.warning(f"Config ignored, not a JSON object: {path}")
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Config load failed: {e}")
    return dict(DEFAULT_CONFIG)


def auto_detect_db_path() -> Optional[Path]:
    """First known flow.sqlite location that exists, or None."""
    for p in AUTO_DETECT_PATHS:
        if p.is_file():
            return p
    return None


def ensure_config(project_root: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load config and fill in db_path from the environment or auto-detection.
    Falls back to the default Wispr Flow location, which may not exist;
    RecordStore reports that as StoreNotFound.
    """
    config = load_config(project_root)
    env_path = os.environ.get(DB_ENV_VAR)
    if env_path:
        config["db_path"] = env_path
    elif not config.get("db_path"):
        detected = auto_detect_db_path()
        config["db_path"] = str(detected or DEFAULT_DB_PATH)
        if detected:
            logger.info(f"Auto-detected database: {detected}")
    return config


def resolve_db_path(override: Optional[str], config: Dict[str, Any]) -> Path:
    return Path(override or config["db_path"]).expanduser()

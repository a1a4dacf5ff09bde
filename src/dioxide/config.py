"""
Client configuration: service endpoint and debug toggle.

Read from ~/.dioxide/config.json, then overridden by DIOXIDE_SERVICE_URL /
DIOXIDE_DEBUG.
"""

import json
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ValidationError

CONFIG_FILE = Path.home() / ".dioxide" / "config.json"
ENV_SERVICE_URL = "DIOXIDE_SERVICE_URL"
ENV_DEBUG = "DIOXIDE_DEBUG"

TRUE_VALUES = {"1", "true", "yes", "on"}


class DioxideConfig(BaseModel):
    service_url: Optional[str] = None
    debug: bool = False


def _read_file(path: Path) -> dict:
    try:
        data = json.loads(path.read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def load_config(path: Optional[Path] = None) -> DioxideConfig:
    data = _read_file(path or CONFIG_FILE)
    if os.environ.get(ENV_SERVICE_URL):
        data["service_url"] = os.environ[ENV_SERVICE_URL]
    if os.environ.get(ENV_DEBUG):
        data["debug"] = os.environ[ENV_DEBUG].strip().lower() in TRUE_VALUES
    try:
        return DioxideConfig.model_validate(data)
    except ValidationError:
        return DioxideConfig()


def save_config(config: DioxideConfig, path: Optional[Path] = None) -> None:
    path = path or CONFIG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config.model_dump(), indent=2))

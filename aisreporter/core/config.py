import json
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from aisreporter.core.errors import ConfigError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ── Reporter options (endpoints, intervals) ───────────────
    OPTIONS_FILE: str = "reporter.json"

    # ── Signal K vessel data stream ───────────────────────────
    SIGNALK_WS_URL: str = "ws://localhost:3000/signalk/v1/stream?subscribe=all"

    # ── Scheduler ─────────────────────────────────────────────
    HEARTBEAT_INTERVAL_SEC: float = 60.0

    # ── API ───────────────────────────────────────────────────
    API_PREFIX: str = "/api/v1"
    LOG_LEVEL: str = "INFO"


settings = Settings()


def load_options(path: Optional[str] = None) -> Dict[str, Any]:
    """Read the JSON reporter options file; ConfigError if absent or malformed."""
    options_path = Path(path or settings.OPTIONS_FILE)
    try:
        raw = options_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read options file '{options_path}' ({exc})") from exc
    try:
        options = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"options file '{options_path}' is not valid JSON ({exc})") from exc
    if not isinstance(options, dict):
        raise ConfigError(f"options file '{options_path}' must contain a JSON object")
    return options

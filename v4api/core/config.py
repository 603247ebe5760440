"""Configuration from environment variables (.env)."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in _TRUTHY


@dataclass
class Config:
    log_level: str
    event_log: Path | None  # JSON-lines event file; None disables it
    forbid_unknown_keys: bool  # codec default when decoding wire input
    json_indent: int

    @classmethod
    def load(cls) -> "Config":
        event_log = os.getenv("V4API_EVENT_LOG", "").strip()
        return cls(
            log_level=os.getenv("V4API_LOG_LEVEL", "INFO").strip().upper(),
            event_log=Path(event_log) if event_log else None,
            forbid_unknown_keys=_env_flag("V4API_FORBID_UNKNOWN_KEYS"),
            json_indent=int(os.getenv("V4API_JSON_INDENT", "2")),
        )

    def validate(self) -> list[str]:
        errors = []
        if self.log_level not in logging.getLevelNamesMapping():
            errors.append(f"Unknown log level: {self.log_level}")
        if self.json_indent < 0:
            errors.append(f"JSON indent must not be negative: {self.json_indent}")
        if self.event_log is not None and self.event_log.is_dir():
            errors.append(f"Event log path is a directory: {self.event_log}")
        return errors


config = Config.load()

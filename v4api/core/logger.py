"""Contract logging: console output plus an optional JSON-lines event log."""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from v4api.core.config import config

if TYPE_CHECKING:
    from v4api.contracts.search_v4 import SearchResponse

_ALLOWED_KWARGS = {"exc_info", "stack_info", "stacklevel", "extra"}


@dataclass
class LogEvent:
    event_type: str
    timestamp: str
    data: dict[str, Any]

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)


class ContractLogger:
    def __init__(self, level: str | None = None, event_log: Path | None = None):
        self.event_log = event_log
        self._file_lock = threading.Lock()
        self._setup_console_logger(level or config.log_level)

    def _setup_console_logger(self, level: str):
        self.console = logging.getLogger("v4api")
        self.console.setLevel(logging.getLevelNamesMapping().get(level, logging.INFO))
        if not self.console.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(
                logging.Formatter("%(asctime)s │ %(message)s", datefmt="%H:%M:%S")
            )
            self.console.addHandler(handler)

    def _timestamp(self) -> str:
        return datetime.now().isoformat()

    def log_event(self, event: LogEvent) -> None:
        if self.event_log is None:
            return
        with self._file_lock:
            self.event_log.parent.mkdir(parents=True, exist_ok=True)
            with open(self.event_log, "a", encoding="utf-8") as f:
                f.write(event.to_json() + "\n")

    def wire_decoded(self, kind: str, key_count: int) -> None:
        event = LogEvent(
            event_type="WIRE_DECODED",
            timestamp=self._timestamp(),
            data={"kind": kind, "keys": key_count},
        )
        self.log_event(event)
        self.console.debug("Decoded %s (%s top-level keys)", kind, key_count)

    def wire_rejected(self, kind: str, errors: list[str]) -> None:
        event = LogEvent(
            event_type="WIRE_REJECTED",
            timestamp=self._timestamp(),
            data={"kind": kind, "errors": errors[:50]},
        )
        self.log_event(event)
        first = errors[0] if errors else "no detail"
        self.console.warning(
            "Rejected %s: %s error(s), first: %s", kind, len(errors), first
        )

    def pool_failures(self, response: SearchResponse) -> int:
        """Log one warning per failing pool result. Returns how many failed."""
        failed = response.failed_results()
        for result in failed:
            pool = result.pool_name or result.service_url or "?"
            event = LogEvent(
                event_type="POOL_FAILED",
                timestamp=self._timestamp(),
                data={
                    "pool": pool,
                    "status_code": result.status_code,
                    "status_msg": result.status_message[:500],
                },
            )
            self.log_event(event)
            self.console.warning(
                "Pool %s failed: %s %s", pool, result.status_code, result.status_message
            )
        return len(failed)

    def info(self, message: str, *args, **kwargs):
        log_kwargs = {k: v for k, v in kwargs.items() if k in _ALLOWED_KWARGS}
        self.console.info(message, *args, **log_kwargs)

    def warning(self, message: str, *args, **kwargs):
        event = LogEvent(
            event_type="WARNING",
            timestamp=self._timestamp(),
            data={"message": message[:500]},
        )
        self.log_event(event)
        log_kwargs = {k: v for k, v in kwargs.items() if k in _ALLOWED_KWARGS}
        self.console.warning(message, *args, **log_kwargs)

    def error(self, message: str, *args, exception: Exception | None = None, **kwargs):
        event = LogEvent(
            event_type="ERROR",
            timestamp=self._timestamp(),
            data={
                "message": message % args if args else message,
                "exception": str(exception) if exception else None,
            },
        )
        self.log_event(event)
        log_kwargs = {k: v for k, v in kwargs.items() if k in _ALLOWED_KWARGS}
        if exception and "exc_info" not in log_kwargs:
            log_kwargs["exc_info"] = exception
        self.console.error(message, *args, **log_kwargs)


logger = ContractLogger(event_log=config.event_log)

"""Event logger forwarding to logging"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from .base import EventLogger


class LoggingEventLogger(EventLogger):
    """Logs task events and keeps them for later inspection"""

    def __init__(self, event_id: str = "", logger: Optional[logging.Logger] = None):
        self.event_id = event_id
        self.logger = logger or logging.getLogger(__name__)
        self.events: List[Tuple[str, str, Dict[str, Any]]] = []

    def _emit(self, level: int, message: str, fields: Optional[Dict[str, Any]]) -> None:
        fields = dict(fields or {})
        self.events.append((logging.getLevelName(level).lower(), message, fields))
        prefix = f"[{self.event_id}] " if self.event_id else ""
        suffix = f" {fields}" if fields else ""
        self.logger.log(level, f"{prefix}{message}{suffix}")

    def info(self, message: str, fields: Optional[Dict[str, Any]] = None) -> None:
        self._emit(logging.INFO, message, fields)

    def error(self, message: str, fields: Optional[Dict[str, Any]] = None) -> None:
        self._emit(logging.ERROR, message, fields)

"""
Helpers for consistent logging across the API, handler, and upstream provider.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

_LOGGING_CONFIGURED = False


def setup_logging(level: str | None = None) -> None:
    """
    Configure the root logger once.
    """

    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    env_level = level or os.getenv("LOG_LEVEL", "INFO")
    parsed_level = getattr(logging, env_level.upper(), None)
    if not isinstance(parsed_level, int):
        parsed_level = logging.INFO

    logging.basicConfig(
        level=parsed_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    _LOGGING_CONFIGURED = True


class LogEntry(BaseModel):
    """
    Structured copy of one log line emitted while serving a request.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: str
    level: str
    message: str
    metadata: Dict[str, Any] | None = None

    def as_text(self) -> str:
        parts = [f"{self.timestamp} [{self.level}] {self.message}"]
        if self.metadata:
            parts.append(str(self.metadata))
        return " | ".join(parts)


class RequestLogger:
    """
    Mirrors log lines to the stdlib logger with request context and keeps them for inspection.
    """

    def __init__(
        self,
        name: str,
        *,
        level: str | None = None,
        context: Dict[str, Any] | None = None,
    ) -> None:
        setup_logging(level)
        self._logger = logging.getLogger(name)
        self._context = dict(context or {})
        self._entries: List[LogEntry] = []

    @property
    def context(self) -> Dict[str, Any]:
        return dict(self._context)

    def info(self, message: str, **metadata: Any) -> None:
        self._log(logging.INFO, message, metadata)

    def warning(self, message: str, **metadata: Any) -> None:
        self._log(logging.WARNING, message, metadata)

    def error(self, message: str, **metadata: Any) -> None:
        self._log(logging.ERROR, message, metadata)

    def debug(self, message: str, **metadata: Any) -> None:
        self._log(logging.DEBUG, message, metadata)

    def exception(self, message: str, **metadata: Any) -> None:
        self._log(logging.ERROR, message, metadata, exc_info=True)

    def _log(self, level: int, message: str, metadata: Optional[Dict[str, Any]], exc_info: bool = False) -> None:
        merged_metadata = {**self._context, **(metadata or {})} or None
        entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            level=logging.getLevelName(level),
            message=message,
            metadata=merged_metadata,
        )

        if merged_metadata:
            self._logger.log(level, "%s | %s", message, merged_metadata, exc_info=exc_info)
        else:
            self._logger.log(level, "%s", message, exc_info=exc_info)
        self._entries.append(entry)

    def as_entries(self) -> List[LogEntry]:
        return list(self._entries)

    def as_text_lines(self) -> List[str]:
        return [entry.as_text() for entry in self._entries]


__all__ = ["LogEntry", "RequestLogger", "setup_logging"]

"""
Structured logging for the provider.

Messages carry keyword context that is appended as JSON so log lines stay
greppable while keeping the call sites short:

    logger.debug("Creating API key", name="ci-reader", role_count=2)
"""

import json
import logging
import os
import sys
from typing import Any, Optional

from .config import config

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ProviderLogger:
    """Thin wrapper around a stdlib logger that accepts structured context."""

    def __init__(self, name: str = "essecurity", log_dir: Optional[str] = None):
        self.logger = logging.getLogger(name)
        self._file_handler: Optional[logging.Handler] = None
        self._setup_logger(log_dir)

    def _setup_logger(self, log_dir: Optional[str]) -> None:
        level = getattr(logging, config.LOG_LEVEL, logging.INFO)
        self.logger.setLevel(level)

        # Loggers are process-wide; only the first instance attaches handlers
        if not self.logger.handlers:
            # stdout is reserved for the MCP stdio transport
            stream_handler = logging.StreamHandler(sys.stderr)
            stream_handler.setFormatter(logging.Formatter(_FORMAT))
            self.logger.addHandler(stream_handler)

        if log_dir:
            try:
                os.makedirs(log_dir, exist_ok=True)
                file_handler = logging.FileHandler(
                    os.path.join(log_dir, f"{self.logger.name}.log")
                )
            except OSError as e:
                self.logger.warning(f"File logging disabled for {log_dir}: {e}")
                return
            file_handler.setFormatter(logging.Formatter(_FORMAT))
            self.logger.addHandler(file_handler)
            self._file_handler = file_handler

    def _format(self, msg: str, context: dict) -> str:
        if not context:
            return msg
        return f"{msg} {json.dumps(context, default=str, sort_keys=True)}"

    def debug(self, msg: str, **kwargs: Any) -> None:
        self.logger.debug(self._format(msg, kwargs))

    def info(self, msg: str, **kwargs: Any) -> None:
        self.logger.info(self._format(msg, kwargs))

    def warning(self, msg: str, **kwargs: Any) -> None:
        self.logger.warning(self._format(msg, kwargs))

    def error(self, msg: str, **kwargs: Any) -> None:
        self.logger.error(self._format(msg, kwargs))

    def shutdown(self) -> None:
        """Detach and close the file handler, if one was opened."""
        if self._file_handler is not None:
            self.logger.removeHandler(self._file_handler)
            self._file_handler.close()
            self._file_handler = None

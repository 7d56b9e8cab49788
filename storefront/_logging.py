"""
Logging — one namespace for every storefront logger.

    from storefront._logging import get_logger

    log = get_logger(__name__)
"""

from __future__ import annotations

import json
import logging
import sys

LOG_NAME = "storefront"
PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# LogRecord attributes that are not user-supplied `extra` fields.
_RESERVED = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None)).keys()
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Flat JSON lines, `extra={...}` fields included."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "time": self.formatTime(record, datefmt="%Y-%m-%d %H:%M:%S"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key in _RESERVED or key.startswith("_") or key in payload:
                continue
            try:
                json.dumps(value)
                payload[key] = value
            except TypeError:
                payload[key] = str(value)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Child logger under the `storefront` namespace.

    Module names that already start with the namespace are used as is.
    """
    if not name or name == LOG_NAME:
        return logging.getLogger(LOG_NAME)
    if name.startswith(f"{LOG_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOG_NAME}.{name}")


def configure_logging(level: str = "INFO", *, json_mode: bool = False) -> logging.Logger:
    """
    Attach a single stdout handler to the storefront root logger.

    Safe to call repeatedly: the previous handler is replaced.
    """
    root = logging.getLogger(LOG_NAME)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in list(root.handlers):
        if getattr(handler, "_storefront", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter() if json_mode else logging.Formatter(PLAIN_FORMAT))
    handler._storefront = True  # type: ignore[attr-defined]
    root.addHandler(handler)

    root.debug("logging configured level=%s json=%s", level.upper(), json_mode)
    return root


__all__ = ("LOG_NAME", "JsonFormatter", "get_logger", "configure_logging")

"""Structured Logging — one JSON object per line, carrying wallet context.

Invariants:
    - Every line has timestamp, level, logger, service and message
    - Wallet context (user_id, operation, error_code, amount, item, recipient, path)
      is copied from the record only when the caller passed it via extra=
    - setup_logging is idempotent: calling it again replaces the handler it
      installed instead of stacking a second one

Design Decisions:
    - Context travels through stdlib logging's extra= rather than a context var:
      the engine already knows user and operation at every log call
    - sqlalchemy.engine capped at WARNING so statement echo never floods the wallet log
"""

import json
import logging
from datetime import datetime, timezone

SERVICE_NAME = "merch-store"

_WALLET_CONTEXT = (
    "user_id", "operation", "error_code", "amount", "item", "recipient", "path",
)

_handler: logging.Handler | None = None


class JSONFormatter(logging.Formatter):
    """Render a record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "service": SERVICE_NAME,
            "message": record.getMessage(),
        }
        entry.update(
            (key, record.__dict__[key])
            for key in _WALLET_CONTEXT
            if record.__dict__.get(key) is not None
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the wallet log handler on the root logger; returns it."""
    global _handler
    if _handler is not None:
        logging.root.removeHandler(_handler)

    _handler = logging.StreamHandler()
    _handler.setFormatter(
        JSONFormatter() if fmt == "json"
        else logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"),
    )
    logging.root.addHandler(_handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    return _handler

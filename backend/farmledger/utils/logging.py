import json
import logging
import logging.config
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Dict

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


def _plain(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


class JsonFormatter(logging.Formatter):
    """One JSON object per line; ``extra={...}`` keys become top-level fields.

    Quantities stay exact: Decimals are written as strings, never floats.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, _plain(value))
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(log_level: str = "INFO", log_format: str = "json") -> None:
    level = log_level.upper()
    formatter = "json" if log_format.lower() == "json" else "plain"
    ledger_level = "INFO" if level in {"WARNING", "ERROR", "CRITICAL"} else level

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "plain": {"format": "%(asctime)s %(levelname)s %(name)s %(message)s"},
                "json": {"()": "farmledger.utils.logging.JsonFormatter"},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": formatter,
                },
            },
            "loggers": {
                # Stock movements are the audit trail and always log at INFO or lower.
                "farmledger.services.ledger_service": {"level": ledger_level},
                "sqlalchemy.engine": {"level": "INFO" if level == "DEBUG" else "WARNING"},
                "uvicorn.access": {"level": "WARNING"},
            },
            "root": {"handlers": ["console"], "level": level},
        }
    )

"""Structured JSON logging for the lending club service"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from lending_club.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_mutation(operation: str, entity_id: str, ok: bool, error: str | None = None) -> None:
    """Log the outcome of a System mutation"""
    extra = {
        "step": operation,
        "entity_id": entity_id,
        "outcome": "ok" if ok else "rejected",
    }
    if ok:
        logging.debug("Mutation applied", extra=extra)
    else:
        logging.warning("Mutation rejected", extra={**extra, "error": error})


def log_settlement(
    day: int,
    items_visited: int,
    transfers: int,
    credits_moved: float,
    failures: int,
) -> None:
    """Log structured settlement outcome for a closed day"""
    logging.info(
        "Settlement completed",
        extra={
            "step": "settlement_complete",
            "settled_day": day,
            "items_visited": items_visited,
            "transfers": transfers,
            "credits_moved": credits_moved,
            "failures": failures,
        },
    )

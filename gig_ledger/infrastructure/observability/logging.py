"""Structured JSON logging"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from gig_ledger.config import settings


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

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_obligation_change(
    request_id: str,
    action: str,
    obligation_id: str,
    occurrence_date: Optional[str] = None,
) -> None:
    """Log a write to an obligation's definition or occurrence bookkeeping"""
    logging.info(
        "Obligation changed",
        extra={
            "request_id": request_id,
            "step": "obligation_change",
            "action": action,
            "obligation_id": obligation_id,
            "occurrence_date": occurrence_date,
        },
    )


def log_goal_evaluation(
    request_id: str,
    period_label: str,
    remaining_to_earn: str,
    remaining_work_days: int,
    cycle_ended: bool,
) -> None:
    """Log the outcome of a daily target computation"""
    logging.info(
        "Daily target computed",
        extra={
            "request_id": request_id,
            "step": "goal_evaluation",
            "period": period_label,
            "remaining_to_earn": remaining_to_earn,
            "remaining_work_days": remaining_work_days,
            "cycle_ended": cycle_ended,
        },
    )

"""Structured logging for persistence and narration events."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class StructuredEngineLogger:
    """Structured logger for engine side effects."""

    def log_persistence(
        self,
        op: str,
        key: str,
        outcome: str,
        entries: int | None = None,
        error_reason: str | None = None,
    ) -> None:
        """Log a persisted-state read or write with structured data."""
        log_data: dict[str, Any] = {
            "op": op,
            "key": key,
            "outcome": outcome,
        }
        if entries is not None:
            log_data["entries"] = entries
        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Persistence {op}: {key} - {outcome}"

        if outcome in ("success", "absent"):
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})

    def log_narration(
        self,
        channel: str,
        outcome: str,
        token: int | None = None,
        lang: str | None = None,
        error_reason: str | None = None,
    ) -> None:
        """Log a narration request, cancellation or completion."""
        log_data: dict[str, Any] = {
            "channel": channel,
            "outcome": outcome,
            "token": token,
            "lang": lang,
        }
        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Narration {channel}: {outcome}"

        if outcome == "unavailable":
            logger.warning(log_msg, extra={"structured": log_data})
        else:
            logger.info(log_msg, extra={"structured": log_data})

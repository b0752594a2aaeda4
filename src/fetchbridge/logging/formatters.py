"""Log formatters for JSON and console output."""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fetchbridge.logging.context import get_log_context
from fetchbridge.security import sanitize_url


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter with context injection.

    Produces one JSON object per line for easy parsing with jq/grep.
    Sanitizes URLs to remove sensitive tokens before logging.
    """

    # Fields to extract from LogRecord extras
    EXTRA_FIELDS = [
        "download_url",
        "final_url",
        "redirect_url",
        "destination",
        "http_status",
        "redirect_count",
        "max_redirects",
        "bytes_downloaded",
        "content_length",
        "content_type",
        "resolved_filename",
        "duration_ms",
        "error_category",
        "error_message",
    ]

    # Fields that contain URLs and should be sanitized
    URL_FIELDS = ["download_url", "final_url", "redirect_url"]

    def _sanitize_value(self, key: str, value: Any) -> Any:
        if key in self.URL_FIELDS and isinstance(value, str):
            return sanitize_url(value)
        return value

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON with sanitized URLs."""
        log_entry: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3]
            + "Z",
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        ctx = get_log_context()
        if ctx["operation"]:
            log_entry["operation"] = ctx["operation"]
        if ctx["request_id"]:
            log_entry["request_id"] = ctx["request_id"]

        # Source location for DEBUG/ERROR
        if record.levelno in (logging.DEBUG, logging.ERROR, logging.CRITICAL):
            log_entry["file"] = f"{record.filename}:{record.lineno}"

        for field in self.EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_entry[field] = self._sanitize_value(field, value)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Human-readable console formatter."""

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_log_context()

        parts = [
            datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            record.levelname,
        ]
        if ctx["operation"]:
            parts.append(f"[{ctx['operation']}]")

        prefix = " - ".join(parts)

        request_id = ctx["request_id"]
        if request_id:
            return f"{prefix} - [{request_id}] {record.getMessage()}"

        return f"{prefix} - {record.getMessage()}"

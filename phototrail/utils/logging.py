"""Structured logging utilities."""
import json
import logging
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from phototrail.utils.error_tracking import capture_exception


def setup_logging(level: str = "INFO"):
    """Setup structured JSON logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(message)s',
        handlers=[logging.StreamHandler()]
    )


def log_structured(level: str, message: str, **kwargs):
    """
    Log structured JSON message.

    Args:
        level: Log level (info, warning, error, etc.)
        message: Log message
        **kwargs: Additional structured fields
    """
    log_entry = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "level": level.upper(),
        "message": message,
        **kwargs
    }

    logger = logging.getLogger("phototrail")
    getattr(logger, level.lower(), logger.info)(json.dumps(log_entry, ensure_ascii=False, default=str))


def log_error(error: BaseException, context: Optional[Dict[str, Any]] = None):
    """
    Log an exception with context and forward it to error tracking.

    Args:
        error: Exception that was caught
        context: Where it happened (module, function, inputs)
    """
    context = context or {}
    log_structured(
        "error",
        str(error) or type(error).__name__,
        error_type=type(error).__name__,
        traceback="".join(traceback.format_exception(type(error), error, error.__traceback__)),
        **context
    )
    capture_exception(error, context)

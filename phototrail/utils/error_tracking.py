"""Error tracking and monitoring setup."""
import logging
import re
from typing import Optional
import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration
from phototrail.core.config import ENVIRONMENT, SENTRY_DSN

ACCESS_TOKEN_PATTERN = re.compile(r"(access_token=)[^&\s]+")


def _redact(value):
    if isinstance(value, str):
        return ACCESS_TOKEN_PATTERN.sub(r"\1***REDACTED***", value)
    return value


def filter_sensitive_data(event, hint):
    """Filter API tokens from Sentry events before sending."""
    request = event.get('request')
    if isinstance(request, dict):
        if 'url' in request:
            request['url'] = _redact(request['url'])
        if 'query_string' in request:
            request['query_string'] = _redact(request['query_string'])
        headers = request.get('headers')
        if isinstance(headers, dict):
            sensitive_headers = ['authorization', 'cookie', 'set-cookie', 'x-api-key']
            request['headers'] = {
                k: '***REDACTED***' if k.lower() in sensitive_headers else v
                for k, v in headers.items()
            }

    # Mapbox tokens travel in URLs, which end up in breadcrumbs and messages
    breadcrumbs = event.get('breadcrumbs')
    if isinstance(breadcrumbs, dict):
        for crumb in breadcrumbs.get('values', []):
            data = crumb.get('data')
            if isinstance(data, dict) and 'url' in data:
                data['url'] = _redact(data['url'])
            if 'message' in crumb:
                crumb['message'] = _redact(crumb['message'])

    logentry = event.get('logentry')
    if isinstance(logentry, dict) and 'message' in logentry:
        logentry['message'] = _redact(logentry['message'])

    return event


def setup_error_tracking(
    dsn: Optional[str] = None,
    environment: Optional[str] = None,
    release: Optional[str] = None,
    traces_sample_rate: float = 0.0
) -> bool:
    """
    Setup Sentry error tracking.

    Args:
        dsn: Sentry DSN (if None, will try SENTRY_DSN from config)
        environment: Environment name (development, staging, production)
        release: Release version
        traces_sample_rate: Percentage of transactions to trace (0.0 to 1.0)

    Returns:
        True if Sentry was initialized, False otherwise
    """
    dsn = dsn or SENTRY_DSN
    if not dsn:
        logging.getLogger("phototrail").info("Sentry DSN not provided. Error tracking disabled.")
        return False

    sentry_sdk.init(
        dsn=dsn,
        environment=environment or ENVIRONMENT,
        release=release,
        integrations=[LoggingIntegration(level=logging.INFO, event_level=logging.ERROR)],
        traces_sample_rate=traces_sample_rate,
        before_send=filter_sensitive_data,
        attach_stacktrace=True,
        send_default_pii=False,
    )
    return True


def capture_exception(error: BaseException, context: Optional[dict] = None) -> bool:
    """Send an exception to Sentry when a client is configured."""
    if not sentry_sdk.get_client().is_active():
        return False

    with sentry_sdk.new_scope() as scope:
        for key, value in (context or {}).items():
            scope.set_context(key, {"value": _redact(str(value))})
        sentry_sdk.capture_exception(error)
    return True


def capture_message(message: str, level: str = "error", context: Optional[dict] = None) -> bool:
    """Send a message to Sentry when a client is configured."""
    if not sentry_sdk.get_client().is_active():
        return False

    with sentry_sdk.new_scope() as scope:
        for key, value in (context or {}).items():
            scope.set_context(key, {"value": _redact(str(value))})
        sentry_sdk.capture_message(_redact(message), level=level)
    return True

import logging
import uuid
from typing import Any, Dict, Optional

LOGGER_NAME = "jiraanalyst"
SENSITIVE_MARKERS = ["token", "password", "secret", "api_key", "authorization"]


def redact_sensitive(options: Any) -> Any:
    """
    Redact sensitive fields in an options dict for logging/output.
    Args:
        options (Any): Options dictionary or object to redact.
    Returns:
        Any: Redacted options with sensitive fields replaced by '***REDACTED***'.
    """
    if not isinstance(options, dict):
        return options
    redacted = options.copy()
    for k in redacted:
        if any(s in str(k).lower() for s in SENSITIVE_MARKERS):
            redacted[k] = "***REDACTED***"
        elif isinstance(redacted[k], dict):
            redacted[k] = redact_sensitive(redacted[k])
    return redacted


def contextual_log(level: str, message: str, extra: Optional[Dict[str, Any]] = None, **kwargs) -> None:
    """
    Log a message with structured context fields for feature, operation, status, etc.
    Handles exc_info as a keyword argument, not in extra/context.
    Args:
        level (str): Logging level (e.g., 'info', 'error').
        message (str): Log message.
        extra (Optional[Dict[str, Any]]): Additional context fields.
        **kwargs: Additional context fields or exc_info.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if extra is None:
        extra = {}
    exc_info = kwargs.pop('exc_info', False)
    context = {**extra, **kwargs}
    if 'operation_id' not in context:
        context['operation_id'] = str(uuid.uuid4())
    log_func = getattr(logger, level, logger.info)
    log_func(message, extra=context, exc_info=exc_info)


def build_context(feature: str = None, source: str = None, request_id: str = None, **kwargs) -> Dict[str, Any]:
    """
    Build a structured context dictionary for logging.
    Args:
        feature (str, optional): Feature name (e.g. 'jira_report').
        source (str, optional): Input source kind ('file', 'paste', 'jira', 'api').
        request_id (str, optional): Identifier shared by every log line of one report request.
        **kwargs: Additional context fields.
    Returns:
        Dict[str, Any]: Context dictionary for logging.
    """
    context = {}
    if feature is not None:
        context['feature'] = feature
    if source is not None:
        context['source'] = source
    if request_id is not None:
        context['correlation_id'] = request_id
    context.update(kwargs)
    return context

"""
Decorators and logging helpers.
Handles function entry/exit logging and feature error handling.
"""
import logging
import functools
from jiraanalyst.errors import JiraAnalystError
from jiraanalyst.utils.logging import contextual_log, build_context, LOGGER_NAME
from jiraanalyst.utils.message_utils import info, error


def log_entry_exit(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = logging.getLogger(LOGGER_NAME)
        logger.debug(f"[ENTRY] {func.__name__}")
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            logger.debug(f"[EXCEPTION] {func.__name__}: {type(e).__name__}: {e}")
            raise
        logger.debug(f"[EXIT] {func.__name__}")
        return result
    return wrapper


def feature_error_handler(feature_name):
    """
    Wrap a CLI feature so that KeyboardInterrupt exits gracefully and every error is
    shown to the user and logged before being re-raised.
    Known errors (JiraAnalystError) are shown without a traceback.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            context = build_context(feature_name)
            try:
                return func(*args, **kwargs)
            except KeyboardInterrupt:
                contextual_log('warning', f"[{feature_name}] Graceful exit via KeyboardInterrupt.", operation="feature_end", status="interrupted", extra=context)
                info(f"Graceful exit from {feature_name} feature.", extra=context)
                return None
            except JiraAnalystError as e:
                contextual_log('error', f"[{feature_name}] {type(e).__name__}: {e}", operation="feature_end", error_type=type(e).__name__, status="error", extra=context)
                error(str(e), extra=context, feature=feature_name)
                raise
            except Exception as e:
                contextual_log('error', f"[{feature_name}] Exception: {e}", exc_info=True, operation="feature_end", error_type=type(e).__name__, status="error", extra=context)
                error(f"[{feature_name}] Unexpected error: {e}", extra=context, feature=feature_name)
                raise
        return wrapper
    return decorator

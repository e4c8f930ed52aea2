"""
Helpers for logging transport exceptions raised while relaying a backend response.
"""

import logging


def _safe_str(obj) -> str:
    """
    Safely convert an object to string, handling cases where __str__ or __repr__ might fail.
    """
    try:
        return str(obj)
    except Exception:
        try:
            return repr(obj)
        except Exception:
            return f"<{type(obj).__name__} object (string conversion failed)>"


def format_exception_message(exception: BaseException) -> str:
    """
    Format an exception as ``<Type>: <message>``, falling back to the type
    name alone when the exception has no message (e.g. a bare ReadTimeout).
    """
    if exception is None:
        return "None"
    message = _safe_str(exception)
    name = type(exception).__name__
    return f"{name}: {message}" if message else name


def log_exception_with_details(
    logger,
    prefix: str,
    exception: BaseException,
    level: int = logging.ERROR,
) -> None:
    """
    Log an exception together with the exception that caused it, if any.

    Args:
        logger: A logging.Logger or HandlerLogger
        prefix: Prefix for the log message (e.g., "[Imgproxy]")
        exception: The exception to log
        level: The logging level to use (default: ERROR)
    """
    message = f"{prefix} Exception: {format_exception_message(exception)}"
    cause = (exception.__cause__ or exception.__context__) if exception else None
    if cause is not None:
        message += f" (caused by {format_exception_message(cause)})"
    logger.log(level, message, exc_info=exception)

"""Helpers for calls that must degrade instead of raising."""
from typing import Any, Callable
from phototrail.utils.logging import log_error


def safe_execute(func: Callable, *args, default_return: Any = None, **kwargs) -> Any:
    """
    Safely execute a function and return default value on error.

    Args:
        func: Function to execute
        *args: Positional arguments
        default_return: Value to return on error
        **kwargs: Keyword arguments

    Returns:
        Function result or default_return on error
    """
    try:
        return func(*args, **kwargs)
    except Exception as e:
        log_error(e, {
            "module": getattr(func, "__module__", "unknown"),
            "function": getattr(func, "__qualname__", getattr(func, "__name__", "unknown")),
            "safe_execute": True,
        })
        return default_return

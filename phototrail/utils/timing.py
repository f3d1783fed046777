"""Timing of aggregation passes and boundary loads."""
import time
from functools import wraps
from typing import Any, Callable, Dict, Optional, Sized
from phototrail.utils.logging import log_structured


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 3)


def _input_size(args: tuple) -> Optional[int]:
    # Aggregation entry points take the observation sequence first
    if args and isinstance(args[0], Sized) and not isinstance(args[0], (str, bytes)):
        return len(args[0])
    return None


def time_function(func: Callable) -> Callable:
    """
    Decorator logging how long an aggregation pass took.

    The debug line carries the function name, the elapsed milliseconds and,
    when the first positional argument is a sized collection, its length
    as ``input_size``.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        result = func(*args, **kwargs)

        fields: Dict[str, Any] = {"function": func.__name__, "elapsed_ms": _elapsed_ms(start)}
        size = _input_size(args)
        if size is not None:
            fields["input_size"] = size
        log_structured("debug", f"Function {func.__name__} executed", **fields)

        return result
    return wrapper


class Timer:
    """Context manager timing a named operation such as a boundary load."""

    def __init__(self, operation: str, **fields: Any):
        """
        Initialize timer.

        Args:
            operation: Name of the operation being timed
            **fields: Extra structured fields logged on exit
        """
        self.operation = operation
        self.fields = fields
        self.start = None
        self.elapsed = None

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.elapsed = time.perf_counter() - self.start
        if exc_type is None:
            log_structured(
                "info",
                f"Operation {self.operation} completed",
                operation=self.operation,
                elapsed_ms=round(self.elapsed * 1000, 3),
                **self.fields
            )
        else:
            log_structured(
                "warning",
                f"Operation {self.operation} failed",
                operation=self.operation,
                elapsed_ms=round(self.elapsed * 1000, 3),
                error_type=exc_type.__name__,
                **self.fields
            )
        return False

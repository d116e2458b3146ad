"""
Core utility functions
"""
from enum import Enum
from typing import Callable, Optional, TypeVar

from .logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


# ============================================================
# Error Policy
# ============================================================

class ErrorPolicy(Enum):
    """How a failing step affects the caller"""
    FATAL = "fatal"
    BEST_EFFORT = "best_effort"


def run_guarded(
    policy: ErrorPolicy,
    label: str,
    func: Callable[[], T],
    on_error: Optional[Callable[[Exception], None]] = None,
) -> Optional[T]:
    """
    Run a step under an error policy.
    
    FATAL steps propagate their exception unchanged. BEST_EFFORT steps log
    a warning, report the exception to ``on_error`` and return None.
    
    Args:
        policy: Error policy for this call
        label: Human readable step name used in the warning
        func: Step to run
        on_error: Callback receiving the swallowed exception
    
    Returns:
        Result of func, or None if a best-effort step failed
    """
    if policy is ErrorPolicy.FATAL:
        return func()
    
    try:
        return func()
    except Exception as e:
        logger.warning(f"{label} failed (ignored): {e}")
        if on_error:
            on_error(e)
        return None

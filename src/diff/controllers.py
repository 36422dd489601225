"""
Comparison controllers decide whether a difference stops the whole
comparison process. A controller is a callable taking a Difference and
returning True to stop.
"""

from typing import Callable, Dict

from src.diff.comparison import ComparisonResult, Difference

ComparisonController = Callable[[Difference], bool]


def default(difference: Difference) -> bool:
    """Never stop, collect every difference."""
    return False


def stop_when_different(difference: Difference) -> bool:
    """Stop as soon as a DIFFERENT outcome is seen; SIMILAR keeps going."""
    return difference.result == ComparisonResult.DIFFERENT


def stop_when_similar(difference: Difference) -> bool:
    """Stop on the first non-EQUAL outcome."""
    return difference.result != ComparisonResult.EQUAL


CONTROLLERS: Dict[str, ComparisonController] = {
    "default": default,
    "stop_when_different": stop_when_different,
    "stop_when_similar": stop_when_similar,
}

"""
Comparison listener support.

Fans comparison events out to observers in three interest categories:
every comparison, matches only (EQUAL) and differences only (non-EQUAL).
Listeners are plain callables taking (comparison, outcome).
"""

from typing import Callable, List

from src.diff.comparison import Comparison, ComparisonResult
from src.utils.logger import get_logger

logger = get_logger(__name__)

ComparisonListener = Callable[[Comparison, ComparisonResult], None]


def _validate_listener(listener: ComparisonListener) -> None:
    if listener is None:
        raise ValueError("listener must not be null")
    if not callable(listener):
        raise TypeError(f"Comparison listener must be callable, got {type(listener)}")


class ComparisonListenerSupport:
    """Registration and synchronous, ordered dispatch of comparison events."""

    def __init__(self) -> None:
        self.comparison_listeners: List[ComparisonListener] = []
        self.match_listeners: List[ComparisonListener] = []
        self.difference_listeners: List[ComparisonListener] = []

    def add_comparison_listener(self, listener: ComparisonListener) -> None:
        """Register a listener notified about every comparison."""
        _validate_listener(listener)
        self.comparison_listeners.append(listener)
        logger.debug(
            "Registered comparison listener",
            operation="add_comparison_listener",
            context={"listeners": len(self.comparison_listeners)},
        )

    def add_match_listener(self, listener: ComparisonListener) -> None:
        """Register a listener notified about EQUAL comparisons only."""
        _validate_listener(listener)
        self.match_listeners.append(listener)
        logger.debug(
            "Registered match listener",
            operation="add_match_listener",
            context={"listeners": len(self.match_listeners)},
        )

    def add_difference_listener(self, listener: ComparisonListener) -> None:
        """Register a listener notified about non-EQUAL comparisons only."""
        _validate_listener(listener)
        self.difference_listeners.append(listener)
        logger.debug(
            "Registered difference listener",
            operation="add_difference_listener",
            context={"listeners": len(self.difference_listeners)},
        )

    def fire_comparison_performed(
        self, comparison: Comparison, outcome: ComparisonResult
    ) -> None:
        """
        Notify listeners about a finished classification.

        All "comparison" listeners run first, then either the match or the
        difference listeners, each group in registration order. Listener
        exceptions propagate to the caller.
        """
        for listener in self.comparison_listeners:
            listener(comparison, outcome)

        targeted = (
            self.match_listeners
            if outcome == ComparisonResult.EQUAL
            else self.difference_listeners
        )
        for listener in targeted:
            listener(comparison, outcome)

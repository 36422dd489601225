"""
Comparison state algebra.

A ComparisonState is either ONGOING (more comparisons may follow) or
FINISHED (the controller asked to stop). States are chained with
and_then / and_if_true_then; once FINISHED, no further step is evaluated,
so no further classifications and no further notifications happen.

Usage:
    state = (
        engine.ongoing()
        .and_then(tag_name_comparison)
        .and_if_true_then(same_attr_count, attribute_comparison)
        .and_then(lambda: compare_children(control, test))
    )
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Union

from src.diff.comparison import Comparison, ComparisonResult


class StateKind(Enum):
    ONGOING = "ongoing"
    FINISHED = "finished"


Classifier = Callable[[Comparison], "ComparisonState"]
DeferredComparison = Callable[[], "ComparisonState"]
ComparisonStep = Union[Comparison, DeferredComparison]


@dataclass(frozen=True)
class ComparisonState:
    """
    Result of one comparison or a chain of them.

    Attributes:
        kind: ONGOING or FINISHED
        result: Latest result, or the result that triggered termination
        classifier: Engine callable used when a bare Comparison is chained;
            not part of equality
    """

    kind: StateKind
    result: ComparisonResult = ComparisonResult.EQUAL
    classifier: Optional[Classifier] = field(default=None, compare=False, repr=False)

    @property
    def is_finished(self) -> bool:
        return self.kind is StateKind.FINISHED

    def and_then(self, step: ComparisonStep) -> "ComparisonState":
        """
        Evaluate step unless this state is finished.

        Args:
            step: A Comparison to classify, or a zero-argument callable
                producing the next state. Invoked at most once.

        Returns:
            self when finished, otherwise the state produced by step

        Raises:
            ValueError: If step is a Comparison and this state is not bound
                to an engine
        """
        if self.is_finished:
            return self
        return self._deferred(step)()

    def and_if_true_then(self, predicate: bool, step: ComparisonStep) -> "ComparisonState":
        """Like and_then, but step is skipped entirely when predicate is false."""
        return self.and_then(step) if predicate else self

    def _deferred(self, step: ComparisonStep) -> DeferredComparison:
        if isinstance(step, Comparison):
            if self.classifier is None:
                raise ValueError("state is not bound to an engine, cannot classify a Comparison")
            classifier = self.classifier
            return lambda: classifier(step)
        if not callable(step):
            raise TypeError(f"Comparison step must be a Comparison or callable, got {type(step)}")
        return step

    def __str__(self) -> str:
        return f"{self.kind.value}: current result is {self.result.name}"


def ongoing(
    result: ComparisonResult = ComparisonResult.EQUAL,
    classifier: Optional[Classifier] = None,
) -> ComparisonState:
    return ComparisonState(StateKind.ONGOING, result, classifier)


def finished(
    result: ComparisonResult, classifier: Optional[Classifier] = None
) -> ComparisonState:
    return ComparisonState(StateKind.FINISHED, result, classifier)

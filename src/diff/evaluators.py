"""
Difference Evaluators

A difference evaluator is a callable taking (comparison, outcome) and
returning the final ComparisonResult. It may promote, demote or keep the
raw classification computed by the engine.

Provided evaluators:
- default: keeps the outcome unchanged
- accept: treats every comparison as EQUAL
- downgrade_differences_to_similar / downgrade_differences_to_equal:
  soften DIFFERENT outcomes for selected comparison types
- upgrade_differences_to_different: harden SIMILAR outcomes
- chain / first: compose several evaluators

EVALUATORS maps configuration names to evaluators.
"""

from typing import Callable, Dict, Iterable

from src.diff.comparison import Comparison, ComparisonResult, ComparisonType

DifferenceEvaluator = Callable[[Comparison, ComparisonResult], ComparisonResult]


def default(comparison: Comparison, outcome: ComparisonResult) -> ComparisonResult:
    """Identity evaluator, the engine default."""
    return outcome


def accept(comparison: Comparison, outcome: ComparisonResult) -> ComparisonResult:
    """Evaluator that considers everything EQUAL."""
    return ComparisonResult.EQUAL


def _recode(
    types: Iterable[ComparisonType],
    source: ComparisonResult,
    target: ComparisonResult,
) -> DifferenceEvaluator:
    selected = frozenset(types)

    def evaluate(comparison: Comparison, outcome: ComparisonResult) -> ComparisonResult:
        if outcome == source and (not selected or comparison.type in selected):
            return target
        return outcome

    return evaluate


def downgrade_differences_to_similar(*types: ComparisonType) -> DifferenceEvaluator:
    """
    DIFFERENT becomes SIMILAR for the given comparison types.

    With no types given every comparison type is affected.
    """
    return _recode(types, ComparisonResult.DIFFERENT, ComparisonResult.SIMILAR)


def downgrade_differences_to_equal(*types: ComparisonType) -> DifferenceEvaluator:
    """DIFFERENT becomes EQUAL for the given comparison types (all if none)."""
    return _recode(types, ComparisonResult.DIFFERENT, ComparisonResult.EQUAL)


def upgrade_differences_to_different(*types: ComparisonType) -> DifferenceEvaluator:
    """SIMILAR becomes DIFFERENT for the given comparison types (all if none)."""
    return _recode(types, ComparisonResult.SIMILAR, ComparisonResult.DIFFERENT)


def chain(*evaluators: DifferenceEvaluator) -> DifferenceEvaluator:
    """
    Combine evaluators so each one sees the result of its predecessor.

    Raises:
        TypeError: If any evaluator is not callable
    """
    for evaluator in evaluators:
        if not callable(evaluator):
            raise TypeError(f"Difference evaluator must be callable, got {type(evaluator)}")

    def evaluate(comparison: Comparison, outcome: ComparisonResult) -> ComparisonResult:
        for evaluator in evaluators:
            outcome = evaluator(comparison, outcome)
        return outcome

    return evaluate


def first(*evaluators: DifferenceEvaluator) -> DifferenceEvaluator:
    """
    Combine evaluators so the first one that changes the outcome wins.

    Raises:
        TypeError: If any evaluator is not callable
    """
    for evaluator in evaluators:
        if not callable(evaluator):
            raise TypeError(f"Difference evaluator must be callable, got {type(evaluator)}")

    def evaluate(comparison: Comparison, outcome: ComparisonResult) -> ComparisonResult:
        for evaluator in evaluators:
            evaluated = evaluator(comparison, outcome)
            if evaluated != outcome:
                return evaluated
        return outcome

    return evaluate


EVALUATORS: Dict[str, DifferenceEvaluator] = {
    "default": default,
    "accept": accept,
    "downgrade_differences_to_similar": downgrade_differences_to_similar(),
    "downgrade_differences_to_equal": downgrade_differences_to_equal(),
    "upgrade_differences_to_different": upgrade_differences_to_different(),
}

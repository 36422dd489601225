"""Difference engine comparison core."""

from .comparison import ComparisonResult, ComparisonType, Detail, Comparison, Difference
from .engine import DifferenceEngine
from .listeners import ComparisonListenerSupport
from .matchers import DefaultNodeMatcher
from .policies import DiffPolicies
from .state import ComparisonState, StateKind, ongoing, finished
from .xpath import XPathContext, get_xpath

__all__ = [
    "ComparisonResult",
    "ComparisonType",
    "Detail",
    "Comparison",
    "Difference",
    "DifferenceEngine",
    "ComparisonListenerSupport",
    "DefaultNodeMatcher",
    "DiffPolicies",
    "ComparisonState",
    "StateKind",
    "ongoing",
    "finished",
    "XPathContext",
    "get_xpath",
]

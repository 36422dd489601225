"""
Node matching between control and test children.

The engine only stores the node matcher; tree walkers ask it which
control child should be compared with which test child.
"""

from typing import Iterable, List, Optional, Protocol, Tuple
from xml.etree.ElementTree import Element


class NodeMatcher(Protocol):
    def match(
        self, control_nodes: Iterable[Element], test_nodes: Iterable[Element]
    ) -> List[Tuple[Element, Element]]: ...


class DefaultNodeMatcher:
    """
    Pairs elements with the same tag name in document order.

    Every test node is used at most once. Control nodes without a partner
    are left out of the result.
    """

    def match(
        self, control_nodes: Iterable[Element], test_nodes: Iterable[Element]
    ) -> List[Tuple[Element, Element]]:
        candidates: List[Optional[Element]] = list(test_nodes)
        pairs: List[Tuple[Element, Element]] = []

        for control in control_nodes:
            for idx, test in enumerate(candidates):
                if test is not None and test.tag == control.tag:
                    pairs.append((control, test))
                    candidates[idx] = None
                    break

        return pairs

    def __repr__(self) -> str:
        return "DefaultNodeMatcher()"

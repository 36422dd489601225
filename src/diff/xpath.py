"""
XPath-like locations for reporting.

Locations never take part in equality; they only describe where a
comparison happened so that differences can be reported to humans.
"""

from typing import List, Optional, Protocol


class XPathSource(Protocol):
    """Anything that can render its current location as a path string."""

    def get_xpath(self) -> str: ...


class XPathContext:
    """
    Mutable path builder used while walking a document.

    Example:
        >>> ctx = XPathContext()
        >>> ctx.navigate_to_child("root")
        >>> ctx.navigate_to_child("item", 2)
        >>> ctx.navigate_to_attribute("id")
        >>> ctx.get_xpath()
        '/root[1]/item[2]/@id'
    """

    def __init__(self) -> None:
        self._steps: List[str] = []

    def navigate_to_child(self, name: str, index: int = 1) -> None:
        self._steps.append(f"{name}[{index}]")

    def navigate_to_text(self, index: int = 1) -> None:
        self._steps.append(f"text()[{index}]")

    def navigate_to_attribute(self, name: str) -> None:
        self._steps.append(f"@{name}")

    def navigate_to_parent(self) -> None:
        if not self._steps:
            raise ValueError("already at the document root")
        self._steps.pop()

    def get_xpath(self) -> str:
        return "/" + "/".join(self._steps)

    def __repr__(self) -> str:
        return f"XPathContext({self.get_xpath()!r})"


def get_xpath(ctx: Optional[XPathSource]) -> Optional[str]:
    """Return the textual path of ctx, or None when no context is given."""
    return None if ctx is None else ctx.get_xpath()

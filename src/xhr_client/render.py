"""
Rendering capability used by FluentRequest.load_into().

The library never detects its environment: code that can inject markup
into a document (a browser bridge, a templating layer, a test double)
implements Renderer and hands it to load_into().
"""

from abc import ABC, abstractmethod
from typing import Any

PRELOADER_HTML = '<div class="xhr_preloader"></div>'


class Renderer(ABC):
    """
    Target able to display HTML inside a node.

    ``node`` is opaque to the library: an element, a selector, a widget id.

    Example:
        >>> class DictRenderer(Renderer):
        ...     def __init__(self):
        ...         self.nodes = {}
        ...     def render_into(self, node, html):
        ...         self.nodes[node] = html
    """

    @abstractmethod
    def render_into(self, node: Any, html: str) -> None:
        """Replace the content of ``node`` with ``html``."""

    def show_preloader(self, node: Any) -> None:
        """Display a loading placeholder in ``node``. Override for custom markup."""
        self.render_into(node, PRELOADER_HTML)

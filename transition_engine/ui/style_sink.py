"""
Style sink interface.
A style sink is the toolkit-facing side of the transition engine: it receives resolved
attribute writes for visual nodes and reports when a node's visual lifetime ends.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Hashable, List, Optional

from ..css.color import Color, WHITE
from ..utils.logging import log_exception

logger = logging.getLogger(__name__)


class PaintRole(Enum):
    """The paint slots a node exposes."""
    FILL = 'fill'
    TEXT = 'text'
    BORDER = 'border'


class SizeAxis(Enum):
    """The size constraint axes a node exposes."""
    WIDTH = 'width'
    HEIGHT = 'height'


class Paint:
    """
    Paint object for one role of a node.

    Only ``color`` is written by transitions; the other attributes belong to whoever
    styled the node and survive color transitions as long as a paint already exists.
    """

    def __init__(self, color: Color = WHITE, corner_radius: float = 0.0, stroke_width: float = 0.0):
        """
        Initialize a paint.

        Args:
            color: Paint color
            corner_radius: Corner radius in pixels
            stroke_width: Stroke width in pixels
        """
        self.color = color
        self.corner_radius = corner_radius
        self.stroke_width = stroke_width

    def clone(self) -> 'Paint':
        """Return an independent copy of this paint."""
        return Paint(self.color, self.corner_radius, self.stroke_width)

    def __repr__(self):
        return f"Paint({self.color.to_css()}, radius={self.corner_radius}, stroke={self.stroke_width})"


NodeDestroyedCallback = Callable[[Hashable], None]


class StyleSink(ABC):
    """
    Abstract style sink.

    Nodes are opaque, hashable handles supplied by the host toolkit.
    """

    def __init__(self):
        """Initialize the sink."""
        self._destroy_listeners: List[NodeDestroyedCallback] = []

    @abstractmethod
    def is_alive(self, node: Hashable) -> bool:
        """Return True while the node's visual representation exists."""

    @abstractmethod
    def get_alpha(self, node: Hashable) -> Optional[float]:
        """Read the composite alpha of a node."""

    @abstractmethod
    def set_alpha(self, node: Hashable, alpha: float) -> None:
        """Write the composite alpha of a node."""

    @abstractmethod
    def get_paint(self, node: Hashable, role: PaintRole) -> Optional[Paint]:
        """Read the paint object for a role, or None if the node has none."""

    @abstractmethod
    def set_paint(self, node: Hashable, role: PaintRole, paint: Paint) -> None:
        """Replace the paint object for a role."""

    @abstractmethod
    def get_size(self, node: Hashable, axis: SizeAxis) -> Optional[float]:
        """Read a size constraint in pixels."""

    @abstractmethod
    def set_size(self, node: Hashable, axis: SizeAxis, value: int) -> None:
        """Write a size constraint in whole pixels."""

    @abstractmethod
    def get_attribute(self, node: Hashable, name: str) -> Any:
        """Read a generic attribute."""

    @abstractmethod
    def set_attribute(self, node: Hashable, name: str, value: Any) -> None:
        """Write a generic attribute."""

    def add_destroy_listener(self, callback: NodeDestroyedCallback) -> None:
        """
        Register a callback fired once when a node's visual lifetime ends.

        Args:
            callback: Called with the node handle
        """
        if callback not in self._destroy_listeners:
            self._destroy_listeners.append(callback)

    def remove_destroy_listener(self, callback: NodeDestroyedCallback) -> None:
        """Unregister a destroy callback."""
        if callback in self._destroy_listeners:
            self._destroy_listeners.remove(callback)

    def notify_destroyed(self, node: Hashable) -> None:
        """
        Fire the destroy listeners for a node.

        Toolkits call this from their node destruction path.
        """
        for callback in list(self._destroy_listeners):
            try:
                callback(node)
            except Exception as e:
                log_exception(logger, e, f"Error in destroy listener for {node!r}")

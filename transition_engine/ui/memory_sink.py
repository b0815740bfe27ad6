"""
Headless style sink.
Keeps node state in dictionaries and records every write, for off-screen hosts and tests.
"""

from typing import Any, Dict, Hashable, List, Optional, Tuple

from .style_sink import Paint, PaintRole, SizeAxis, StyleSink


class MemoryNode:
    """In-memory node state."""

    def __init__(self, name: str = 'node', alpha: float = 1.0):
        self.name = name
        self.alpha = alpha
        self.paints: Dict[PaintRole, Paint] = {}
        self.sizes: Dict[SizeAxis, int] = {}
        self.attributes: Dict[str, Any] = {}
        self.alive = True

    def __repr__(self):
        return f"MemoryNode({self.name!r})"


class MemorySink(StyleSink):
    """Style sink backed by MemoryNode objects."""

    def __init__(self):
        super().__init__()
        # (node, channel, value) for every write, in order
        self.writes: List[Tuple[Hashable, str, Any]] = []

    def create_node(self, name: str = 'node', **attributes) -> MemoryNode:
        """Create a live node, optionally seeding generic attributes."""
        node = MemoryNode(name)
        node.attributes.update(attributes)
        return node

    def destroy_node(self, node: MemoryNode) -> None:
        """Mark a node dead and fire the destroy listeners."""
        if not node.alive:
            return
        node.alive = False
        self.notify_destroyed(node)

    def writes_for(self, node: Hashable, channel: Optional[str] = None) -> List[Any]:
        """Values written to a node, optionally filtered by channel."""
        return [value for target, name, value in self.writes
                if target is node and (channel is None or name == channel)]

    def is_alive(self, node: Hashable) -> bool:
        return isinstance(node, MemoryNode) and node.alive

    def get_alpha(self, node: MemoryNode) -> Optional[float]:
        return node.alpha

    def set_alpha(self, node: MemoryNode, alpha: float) -> None:
        node.alpha = alpha
        self.writes.append((node, 'alpha', alpha))

    def get_paint(self, node: MemoryNode, role: PaintRole) -> Optional[Paint]:
        return node.paints.get(role)

    def set_paint(self, node: MemoryNode, role: PaintRole, paint: Paint) -> None:
        node.paints[role] = paint
        self.writes.append((node, f'paint:{role.value}', paint))

    def get_size(self, node: MemoryNode, axis: SizeAxis) -> Optional[float]:
        return node.sizes.get(axis)

    def set_size(self, node: MemoryNode, axis: SizeAxis, value: int) -> None:
        node.sizes[axis] = value
        self.writes.append((node, f'size:{axis.value}', value))

    def get_attribute(self, node: MemoryNode, name: str) -> Any:
        return node.attributes.get(name)

    def set_attribute(self, node: MemoryNode, name: str, value: Any) -> None:
        node.attributes[name] = value
        self.writes.append((node, name, value))

"""
Tkinter canvas style sink.
Each node is a rectangle plus a centered text label on a ``tkinter.Canvas``.
"""

import logging
import tkinter as tk
from typing import Any, Dict, Optional

from ..css.color import Color, WHITE
from .style_sink import Paint, PaintRole, SizeAxis, StyleSink

logger = logging.getLogger(__name__)

# Tk has no per-item alpha; approximate it with the built-in stipple bitmaps
STIPPLE_LEVELS = (
    (0.875, ''),
    (0.625, 'gray75'),
    (0.375, 'gray50'),
    (0.1875, 'gray25'),
    (0.0, 'gray12'),
)


def stipple_for_alpha(alpha: float) -> str:
    """
    Pick the stipple bitmap closest to an alpha value.

    Args:
        alpha: Composite alpha, 0-1 (0 itself is handled by hiding the item)

    Returns:
        Stipple bitmap name, empty string for solid
    """
    for threshold, pattern in STIPPLE_LEVELS:
        if alpha >= threshold:
            return pattern
    return 'gray12'


class TkNode:
    """Canvas items and cached style state for one node."""

    def __init__(self, canvas: tk.Canvas, x: int, y: int, width: int, height: int, text: str = ''):
        self.canvas = canvas
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.alpha = 1.0
        self.paints: Dict[PaintRole, Paint] = {}
        self.attributes: Dict[str, Any] = {'text': text}

        self.rect_id = canvas.create_rectangle(x, y, x + width, y + height, fill='', outline='')
        self.text_id = canvas.create_text(x + width / 2, y + height / 2, text=text)

    def __repr__(self):
        return f"TkNode(rect={self.rect_id}, text={self.text_id})"


class TkCanvasSink(StyleSink):
    """Style sink drawing nodes on a Tk canvas."""

    def __init__(self, canvas: tk.Canvas):
        """
        Initialize the sink.

        Args:
            canvas: The canvas nodes are drawn on
        """
        super().__init__()
        self.canvas = canvas

    def create_node(self, x: int, y: int, width: int, height: int, text: str = '',
                    fill: Optional[Color] = None, corner_radius: float = 0.0) -> TkNode:
        """
        Create a node on the canvas.

        Args:
            x, y: Top-left position
            width, height: Initial size
            text: Label text
            fill: Optional initial fill color; without it the node has no fill paint
            corner_radius: Corner radius of the fill paint

        Returns:
            The new node
        """
        node = TkNode(self.canvas, x, y, width, height, text)
        if fill is not None:
            self.set_paint(node, PaintRole.FILL, Paint(fill, corner_radius=corner_radius))
        return node

    def delete_node(self, node: TkNode) -> None:
        """Remove a node's items and fire the destroy listeners."""
        try:
            self.canvas.delete(node.rect_id)
            self.canvas.delete(node.text_id)
        except tk.TclError as e:
            logger.debug(f"Canvas already gone while deleting {node!r}: {e}")
        self.notify_destroyed(node)

    def is_alive(self, node) -> bool:
        if not isinstance(node, TkNode):
            return False
        try:
            return bool(self.canvas.winfo_exists()) and bool(self.canvas.find_withtag(node.rect_id))
        except tk.TclError:
            return False

    def get_alpha(self, node: TkNode) -> Optional[float]:
        return node.alpha

    def set_alpha(self, node: TkNode, alpha: float) -> None:
        node.alpha = alpha
        if alpha <= 0:
            self.canvas.itemconfigure(node.rect_id, state='hidden')
            self.canvas.itemconfigure(node.text_id, state='hidden')
            return

        pattern = stipple_for_alpha(alpha)
        self.canvas.itemconfigure(node.rect_id, state='normal', stipple=pattern, outlinestipple=pattern)
        self.canvas.itemconfigure(node.text_id, state='normal', stipple=pattern)

    def get_paint(self, node: TkNode, role: PaintRole) -> Optional[Paint]:
        return node.paints.get(role)

    def set_paint(self, node: TkNode, role: PaintRole, paint: Paint) -> None:
        node.paints[role] = paint
        # Fully transparent colors map to Tk's empty color
        color = paint.color.to_hex() if paint.color.alpha > 0 else ''

        if role is PaintRole.FILL:
            self.canvas.itemconfigure(node.rect_id, fill=color)
        elif role is PaintRole.BORDER:
            self.canvas.itemconfigure(node.rect_id, outline=color, width=paint.stroke_width)
        else:
            self.canvas.itemconfigure(node.text_id, fill=color or WHITE.to_hex())

    def get_size(self, node: TkNode, axis: SizeAxis) -> Optional[float]:
        return node.width if axis is SizeAxis.WIDTH else node.height

    def set_size(self, node: TkNode, axis: SizeAxis, value: int) -> None:
        if axis is SizeAxis.WIDTH:
            node.width = value
        else:
            node.height = value
        self._update_geometry(node)

    def get_attribute(self, node: TkNode, name: str) -> Any:
        if name in ('left', 'top'):
            return node.x if name == 'left' else node.y
        return node.attributes.get(name)

    def set_attribute(self, node: TkNode, name: str, value: Any) -> None:
        if name == 'text':
            node.attributes['text'] = value
            self.canvas.itemconfigure(node.text_id, text=str(value))
        elif name in ('left', 'top'):
            try:
                position = int(float(str(value).replace('px', '')))
            except ValueError:
                logger.debug(f"Ignoring non-numeric {name} value {value!r}")
                return
            if name == 'left':
                node.x = position
            else:
                node.y = position
            self._update_geometry(node)
        else:
            node.attributes[name] = value

    def _update_geometry(self, node: TkNode) -> None:
        """Move the node's items to match its cached position and size."""
        self.canvas.coords(node.rect_id, node.x, node.y, node.x + node.width, node.y + node.height)
        self.canvas.coords(node.text_id, node.x + node.width / 2, node.y + node.height / 2)

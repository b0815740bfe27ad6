"""
Per-property interpolation strategies.
Each animatable property maps to a small strategy object that knows how to parse style
values, compare them, interpolate between them, and read or write them on a node.
Properties without a registered strategy snap to their target value.
"""

import logging
import math
import re
from enum import Enum
from typing import Any, Dict, Hashable, Optional

from .color import Color, colors_close, lerp_color, parse_color
from ..ui.style_sink import Paint, PaintRole, SizeAxis, StyleSink

logger = logging.getLogger(__name__)

LENGTH_PATTERN = re.compile(r'^([-+]?[0-9]*\.?[0-9]+(?:e[-+]?[0-9]+)?)(px|em|rem)?$')

# Relative units resolve against a fixed 16px font size
FONT_SIZE_PX = 16


class InterpolationKind(Enum):
    """The interpolation families."""
    SCALAR = 'scalar'
    COLOR = 'color'
    SIZE = 'size'
    SNAP = 'snap'


def _to_float(value: Any) -> Optional[float]:
    """Coerce a number or numeric string to a finite float."""
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


class PropertyStrategy:
    """Base strategy: snap semantics with exact equality."""

    kind = InterpolationKind.SNAP

    def parse(self, value: Any) -> Any:
        """Resolve a style value, or return None if it is not usable."""
        return value

    def read(self, sink: StyleSink, node: Hashable) -> Any:
        """Read the node's current value when the prior style lacks one."""
        return None

    def equal(self, a: Any, b: Any) -> bool:
        return a == b

    def lerp(self, start: Any, end: Any, factor: float) -> Any:
        return end

    def write(self, sink: StyleSink, node: Hashable, value: Any) -> None:
        raise NotImplementedError("Subclasses must implement write")


class AlphaStrategy(PropertyStrategy):
    """Opacity: float lerp clamped to 0-1, written to the composite alpha."""

    kind = InterpolationKind.SCALAR

    def __init__(self, tolerance: float = 1e-4):
        self.tolerance = tolerance

    def parse(self, value: Any) -> Optional[float]:
        if isinstance(value, str) and value.strip().endswith('%'):
            number = _to_float(value.strip()[:-1])
            number = None if number is None else number / 100
        else:
            number = _to_float(value)
        if number is None:
            return None
        return max(0.0, min(1.0, number))

    def read(self, sink: StyleSink, node: Hashable) -> Optional[float]:
        return self.parse(sink.get_alpha(node))

    def equal(self, a: float, b: float) -> bool:
        return math.isclose(a, b, rel_tol=0.0, abs_tol=self.tolerance)

    def lerp(self, start: float, end: float, factor: float) -> float:
        return max(0.0, min(1.0, start + (end - start) * factor))

    def write(self, sink: StyleSink, node: Hashable, value: float) -> None:
        sink.set_alpha(node, value)


class ColorStrategy(PropertyStrategy):
    """
    Color-valued properties: component-wise RGBA lerp written to a paint role.

    Writes clone the node's existing paint so attributes such as corner radius survive.
    A node without a paint for the role gets a fresh default one, and anything styled
    outside the transition system for that role is lost.
    """

    kind = InterpolationKind.COLOR

    def __init__(self, role: PaintRole, tolerance: float = 0.5 / 255):
        self.role = role
        self.tolerance = tolerance

    def parse(self, value: Any) -> Optional[Color]:
        return parse_color(value)

    def read(self, sink: StyleSink, node: Hashable) -> Optional[Color]:
        paint = sink.get_paint(node, self.role)
        return paint.color if paint is not None else None

    def equal(self, a: Color, b: Color) -> bool:
        return colors_close(a, b, self.tolerance)

    def lerp(self, start: Color, end: Color, factor: float) -> Color:
        return lerp_color(start, end, factor)

    def write(self, sink: StyleSink, node: Hashable, value: Color) -> None:
        existing = sink.get_paint(node, self.role)
        paint = existing.clone() if existing is not None else Paint()
        paint.color = value
        sink.set_paint(node, self.role, paint)


class SizeStrategy(PropertyStrategy):
    """Width/height: float lerp, truncated to whole pixels when written."""

    kind = InterpolationKind.SIZE

    def __init__(self, axis: SizeAxis, tolerance: float = 1e-4):
        self.axis = axis
        self.tolerance = tolerance

    def parse(self, value: Any) -> Optional[float]:
        if not isinstance(value, str):
            return _to_float(value)

        match = LENGTH_PATTERN.match(value.strip().lower())
        if not match:
            return None
        number = float(match.group(1))
        if match.group(2) in ('em', 'rem'):
            number *= FONT_SIZE_PX
        return number

    def read(self, sink: StyleSink, node: Hashable) -> Optional[float]:
        return _to_float(sink.get_size(node, self.axis))

    def equal(self, a: float, b: float) -> bool:
        return math.isclose(a, b, rel_tol=0.0, abs_tol=self.tolerance)

    def lerp(self, start: float, end: float, factor: float) -> float:
        return start + (end - start) * factor

    def write(self, sink: StyleSink, node: Hashable, value: float) -> None:
        sink.set_size(node, self.axis, int(value))


class SnapStrategy(PropertyStrategy):
    """Unrecognized properties: the target is written as soon as the active phase starts."""

    def __init__(self, property_name: str):
        self.property_name = property_name

    def parse(self, value: Any) -> Any:
        return value

    def read(self, sink: StyleSink, node: Hashable) -> Any:
        return sink.get_attribute(node, self.property_name)

    def write(self, sink: StyleSink, node: Hashable, value: Any) -> None:
        sink.set_attribute(node, self.property_name, value)


class StrategyRegistry:
    """Maps property names to interpolation strategies."""

    def __init__(self):
        self._strategies: Dict[str, PropertyStrategy] = {}

    def __contains__(self, property_name: str) -> bool:
        return property_name in self._strategies

    def register(self, property_name: str, strategy: PropertyStrategy) -> None:
        """
        Register (or replace) the strategy for a property.

        Args:
            property_name: CSS property name
            strategy: Strategy used for that property
        """
        self._strategies[property_name] = strategy
        logger.debug(f"Registered {strategy.kind.value} strategy for {property_name}")

    def unregister(self, property_name: str) -> None:
        """Remove a property's strategy so it falls back to snapping."""
        self._strategies.pop(property_name, None)

    def get(self, property_name: str) -> PropertyStrategy:
        """Get the strategy for a property, a snap strategy if none is registered."""
        strategy = self._strategies.get(property_name)
        if strategy is None:
            return SnapStrategy(property_name)
        return strategy


def default_registry(float_tolerance: float = 1e-4,
                     color_tolerance: float = 0.5 / 255) -> StrategyRegistry:
    """
    Build the registry for the built-in animatable properties.

    Args:
        float_tolerance: Equality tolerance for scalar and size values
        color_tolerance: Per-channel equality tolerance for colors

    Returns:
        A populated StrategyRegistry
    """
    registry = StrategyRegistry()
    # ``alpha`` is the toolkit-level name for the same composite channel
    for property_name in ('opacity', 'alpha'):
        registry.register(property_name, AlphaStrategy(float_tolerance))

    for property_name, role in (('background-color', PaintRole.FILL),
                                ('background', PaintRole.FILL),
                                ('color', PaintRole.TEXT),
                                ('border-color', PaintRole.BORDER)):
        registry.register(property_name, ColorStrategy(role, color_tolerance))

    registry.register('width', SizeStrategy(SizeAxis.WIDTH, float_tolerance))
    registry.register('height', SizeStrategy(SizeAxis.HEIGHT, float_tolerance))
    return registry

"""
CSS color handling for transitions.
Colors are parsed with tinycss2 (CSS Color Level 3) and interpolated component-wise
in sRGB with straight alpha.
"""

from typing import Any, NamedTuple, Optional

from tinycss2 import color3


class Color(NamedTuple):
    """An RGBA color, every channel in the 0-1 range."""
    red: float
    green: float
    blue: float
    alpha: float = 1.0

    def to_hex(self) -> str:
        """Serialize as ``#rrggbb``; alpha is dropped."""
        r, g, b = (round(max(0.0, min(1.0, c)) * 255) for c in (self.red, self.green, self.blue))
        return f'#{r:02x}{g:02x}{b:02x}'

    def to_css(self) -> str:
        """Serialize as ``#rrggbb`` when opaque, ``rgba(...)`` otherwise."""
        if self.alpha >= 1:
            return self.to_hex()
        r, g, b = (round(max(0.0, min(1.0, c)) * 255) for c in (self.red, self.green, self.blue))
        return f'rgba({r}, {g}, {b}, {round(self.alpha, 3)})'


TRANSPARENT = Color(0.0, 0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0, 1.0)


def parse_color(value: Any) -> Optional[Color]:
    """
    Resolve a style value to a Color.

    Args:
        value: A Color, an RGB(A) tuple (0-1 floats or 0-255 ints), or CSS color text

    Returns:
        The color, or None if the value is not a color (``currentColor`` included)
    """
    if isinstance(value, Color):
        return value

    if isinstance(value, (tuple, list)):
        if len(value) not in (3, 4):
            return None
        try:
            channels = [float(c) for c in value]
        except (TypeError, ValueError):
            return None
        # Integer channels are 0-255, float channels 0-1; alpha is always 0-1
        integer_rgb = all(isinstance(c, int) and not isinstance(c, bool) for c in value[:3])
        if integer_rgb or any(c > 1 for c in channels[:3]):
            channels[:3] = [c / 255 for c in channels[:3]]
        return Color(*channels)

    if not isinstance(value, str):
        return None

    parsed = color3.parse_color(value.strip())
    if parsed is None or isinstance(parsed, str):
        return None
    return Color(parsed.red, parsed.green, parsed.blue, parsed.alpha)


def lerp_color(start: Color, end: Color, factor: float) -> Color:
    """
    Interpolate two colors component-wise.

    Args:
        start: Color at factor 0
        end: Color at factor 1
        factor: Interpolation factor

    Returns:
        Interpolated color
    """
    return Color(*(a + (b - a) * factor for a, b in zip(start, end)))


def colors_close(a: Color, b: Color, tolerance: float) -> bool:
    """True when every channel of ``a`` and ``b`` differs by at most ``tolerance``."""
    return all(abs(x - y) <= tolerance for x, y in zip(a, b))

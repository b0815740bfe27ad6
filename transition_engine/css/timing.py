"""
CSS timing functions.
This module maps the CSS easing keywords onto a (curve shape, ease direction) pair
and evaluates the resulting easing function.
"""

import math
from enum import Enum
from typing import Callable, Dict, Tuple


class CurveShape(Enum):
    """Shape of the easing curve."""
    LINEAR = 'linear'
    SINE = 'sine'
    QUAD = 'quad'
    CUBIC = 'cubic'


class EaseDirection(Enum):
    """Which end(s) of the curve the easing is applied to."""
    IN = 'in'
    OUT = 'out'
    IN_OUT = 'in-out'


# Ease-in form of each shape, f(0) == 0 and f(1) == 1
_EASE_IN: Dict[CurveShape, Callable[[float], float]] = {
    CurveShape.LINEAR: lambda t: t,
    CurveShape.SINE: lambda t: 1 - math.cos(t * math.pi / 2),
    CurveShape.QUAD: lambda t: t * t,
    CurveShape.CUBIC: lambda t: t * t * t,
}


def ease(shape: CurveShape, direction: EaseDirection, progress: float) -> float:
    """
    Apply an easing curve to a linear progress value.

    Args:
        shape: The curve shape
        direction: The ease direction
        progress: Linear progress; clamped to 0-1

    Returns:
        Eased progress, exactly 0 at the start and exactly 1 at the end
    """
    if progress <= 0:
        return 0.0
    if progress >= 1:
        return 1.0

    ease_in = _EASE_IN[shape]
    if direction is EaseDirection.IN:
        return ease_in(progress)
    if direction is EaseDirection.OUT:
        return 1 - ease_in(1 - progress)
    if progress < 0.5:
        return ease_in(progress * 2) / 2
    return 1 - ease_in(2 - progress * 2) / 2


class TimingCurve(Enum):
    """The CSS easing keywords the engine understands."""
    LINEAR = 'linear'
    EASE = 'ease'
    EASE_IN = 'ease-in'
    EASE_OUT = 'ease-out'
    EASE_IN_OUT = 'ease-in-out'

    @property
    def shape(self) -> CurveShape:
        return _CURVE_TABLE[self][0]

    @property
    def direction(self) -> EaseDirection:
        return _CURVE_TABLE[self][1]

    def ease(self, progress: float) -> float:
        """Reparametrize linear progress through this curve."""
        return ease(self.shape, self.direction, progress)


_CURVE_TABLE: Dict[TimingCurve, Tuple[CurveShape, EaseDirection]] = {
    TimingCurve.LINEAR: (CurveShape.LINEAR, EaseDirection.IN_OUT),
    TimingCurve.EASE: (CurveShape.SINE, EaseDirection.IN_OUT),
    TimingCurve.EASE_IN: (CurveShape.CUBIC, EaseDirection.IN),
    TimingCurve.EASE_OUT: (CurveShape.CUBIC, EaseDirection.OUT),
    TimingCurve.EASE_IN_OUT: (CurveShape.CUBIC, EaseDirection.IN_OUT),
}

TIMING_KEYWORDS = frozenset(curve.value for curve in TimingCurve)

DEFAULT_TIMING = TimingCurve.EASE
FALLBACK_TIMING = TimingCurve.EASE_IN_OUT

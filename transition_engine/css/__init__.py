"""
CSS transition support.
This package provides transition parsing, timing curves and color handling.
The runtime lives in ``transition_engine.css.animation``.
"""

from .timing import TimingCurve, CurveShape, EaseDirection
from .color import Color, parse_color
from .transition_parser import (
    TransitionDeclaration,
    parse_transition_shorthand,
    parse_duration,
    parse_timing_function,
    parse_transition_property,
    parse_transition_duration,
    parse_transition_timing_function,
    parse_transition_delay,
)
from .transition_style import parse_style_text, transitions_from_style

__all__ = [
    'TimingCurve', 'CurveShape', 'EaseDirection',
    'Color', 'parse_color',
    'TransitionDeclaration', 'parse_transition_shorthand', 'parse_duration',
    'parse_timing_function', 'parse_transition_property', 'parse_transition_duration',
    'parse_transition_timing_function', 'parse_transition_delay',
    'parse_style_text', 'transitions_from_style',
]

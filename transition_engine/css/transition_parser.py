"""
CSS transition parsing.
This module parses the ``transition`` shorthand and the four ``transition-*`` longhands
into normalized transition declarations. Parsing never raises: malformed input degrades
to defaults or is dropped.
"""

import logging
import math
from typing import List, NamedTuple

import tinycss2

from .timing import TimingCurve, TIMING_KEYWORDS, DEFAULT_TIMING, FALLBACK_TIMING

logger = logging.getLogger(__name__)

# Function tokens accepted in the timing-function slot. Their parameters are not modeled.
TIMING_FUNCTIONS = ('cubic-bezier', 'steps')

TIME_UNITS = ('s', 'ms')


class TransitionDeclaration(NamedTuple):
    """
    How a single style property animates.

    Attributes:
        property: The CSS property name (or ``all``)
        duration: Duration of the active phase in seconds
        timing: The easing curve
        delay: Idle time before the active phase in seconds
    """
    property: str
    duration: float = 0.0
    timing: TimingCurve = DEFAULT_TIMING
    delay: float = 0.0


def _split_top_level(text: str, keep_whitespace: bool = False) -> List[List[tinycss2.ast.Node]]:
    """
    Tokenize CSS text and split it on commas outside of any function or block.

    Args:
        text: Raw CSS value text
        keep_whitespace: Keep whitespace tokens inside each segment

    Returns:
        One token list per comma-separated segment, comments removed
    """
    segments: List[List[tinycss2.ast.Node]] = [[]]
    for token in tinycss2.parse_component_value_list(text, skip_comments=True):
        if token.type == 'literal' and token.value == ',':
            segments.append([])
        elif keep_whitespace or token.type != 'whitespace':
            segments[-1].append(token)
    return segments


def _split_segments(text: str) -> List[str]:
    """Split a longhand value on top-level commas, returning trimmed text segments."""
    if not text or not str(text).strip():
        return []
    return [tinycss2.serialize(tokens).strip()
            for tokens in _split_top_level(str(text), keep_whitespace=True)]


def parse_duration(text: str) -> float:
    """
    Parse a CSS time value.

    Args:
        text: Time value such as ``300ms`` or ``0.5s``; a bare number means seconds

    Returns:
        Duration in seconds, 0 for unparsable or negative input
    """
    value = str(text).strip().lower()
    try:
        if value.endswith('ms'):
            seconds = float(value[:-2]) / 1000
        elif value.endswith('s'):
            seconds = float(value[:-1])
        else:
            seconds = float(value)
    except ValueError:
        return 0.0

    if not math.isfinite(seconds) or seconds < 0:
        return 0.0
    return seconds


def parse_timing_function(text: str) -> TimingCurve:
    """
    Parse a CSS timing function.

    Args:
        text: The timing function text

    Returns:
        The matching curve; anything but an exact keyword (``cubic-bezier(...)``
        included) yields ``ease-in-out``
    """
    value = str(text).strip().lower()
    if value in TIMING_KEYWORDS:
        return TimingCurve(value)
    return FALLBACK_TIMING


def _parse_single_transition(tokens: List[tinycss2.ast.Node]):
    """
    Classify the tokens of one comma-separated shorthand segment.

    Returns:
        A TransitionDeclaration, or None when the segment names no property
    """
    property_name = None
    times: List[float] = []
    timing = DEFAULT_TIMING

    for token in tokens:
        if token.type == 'dimension' and token.lower_unit in TIME_UNITS:
            # First time is the duration, second the delay
            if len(times) < 2:
                times.append(parse_duration(token.serialize()))
        elif token.type == 'ident' and token.lower_value in TIMING_KEYWORDS:
            timing = TimingCurve(token.lower_value)
        elif token.type == 'function' and token.lower_name in TIMING_FUNCTIONS:
            timing = parse_timing_function(token.serialize())
        elif token.type == 'ident' and property_name is None:
            # Custom properties are case-sensitive
            property_name = token.value if token.value.startswith('--') else token.lower_value

    if property_name is None or property_name == 'none':
        return None

    duration = times[0] if times else 0.0
    delay = times[1] if len(times) > 1 else 0.0
    return TransitionDeclaration(property_name, duration, timing, delay)


def parse_transition_shorthand(text: str) -> List[TransitionDeclaration]:
    """
    Parse the ``transition`` shorthand.

    Args:
        text: Shorthand value, e.g. ``opacity 0.3s ease-in-out 0.1s, color 0.2s``

    Returns:
        List of declarations in source order; ``none`` or empty input yields ``[]``
    """
    if text is None:
        return []
    text = str(text).strip()
    if not text or text.lower() == 'none':
        return []

    declarations = []
    for tokens in _split_top_level(text):
        declaration = _parse_single_transition(tokens)
        if declaration is None:
            if tokens:
                logger.debug(f"Dropping transition without a property: {tinycss2.serialize(tokens)!r}")
            continue
        declarations.append(declaration)
    return declarations


def parse_transition_property(text: str) -> List[str]:
    """Parse ``transition-property`` into a list of property names."""
    segments = _split_segments(text)
    if len(segments) == 1 and segments[0].lower() == 'none':
        return []
    return [segment if segment.startswith('--') else segment.lower() for segment in segments]


def parse_transition_duration(text: str) -> List[float]:
    """Parse ``transition-duration`` into a list of durations in seconds."""
    return [parse_duration(segment) for segment in _split_segments(text)]


def parse_transition_timing_function(text: str) -> List[TimingCurve]:
    """Parse ``transition-timing-function`` into a list of curves."""
    return [parse_timing_function(segment) for segment in _split_segments(text)]


def parse_transition_delay(text: str) -> List[float]:
    """Parse ``transition-delay`` into a list of delays in seconds."""
    return [parse_duration(segment) for segment in _split_segments(text)]

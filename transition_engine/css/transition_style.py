"""
Style map helpers.
Turns declaration blocks into style maps and collects the transition declarations a
style map carries, combining the ``transition`` shorthand with its longhands.
"""

import logging
from typing import Any, Dict, List, Mapping

import tinycss2

from .timing import DEFAULT_TIMING
from .transition_parser import (
    TransitionDeclaration,
    parse_transition_shorthand,
    parse_transition_property,
    parse_transition_duration,
    parse_transition_timing_function,
    parse_transition_delay,
)

logger = logging.getLogger(__name__)

TRANSITION_LONGHANDS = (
    'transition-property',
    'transition-duration',
    'transition-timing-function',
    'transition-delay',
)


def parse_style_text(css_text: str) -> Dict[str, str]:
    """
    Parse a CSS declaration block into a style map.

    Args:
        css_text: Declarations such as ``opacity: 0; transition: opacity 1s``

    Returns:
        Dictionary of lower-cased property names to value text; later
        declarations win
    """
    if not css_text:
        return {}

    styles = {}
    for item in tinycss2.parse_declaration_list(css_text, skip_comments=True, skip_whitespace=True):
        if item.type != 'declaration':
            if item.type == 'error':
                logger.debug(f"Skipping invalid declaration: {item.message}")
            continue
        name = item.name if item.name.startswith('--') else item.lower_name
        styles[name] = tinycss2.serialize(item.value).strip()
    return styles


def transitions_from_style(style: Mapping[str, Any]) -> List[TransitionDeclaration]:
    """
    Collect the transition declarations of a style map.

    The shorthand is parsed first; any longhand present replaces the matching field.
    Longhand lists shorter than the property list repeat, as in CSS.

    Args:
        style: Style map that may hold ``transition`` and ``transition-*`` entries

    Returns:
        One declaration per transitioned property
    """
    base = parse_transition_shorthand(style.get('transition', ''))
    if not any(name in style for name in TRANSITION_LONGHANDS):
        return base

    if 'transition-property' in style:
        properties = parse_transition_property(style['transition-property'])
    else:
        properties = [declaration.property for declaration in base]

    durations = (parse_transition_duration(style['transition-duration'])
                 if 'transition-duration' in style else [d.duration for d in base])
    timings = (parse_transition_timing_function(style['transition-timing-function'])
               if 'transition-timing-function' in style else [d.timing for d in base])
    delays = (parse_transition_delay(style['transition-delay'])
              if 'transition-delay' in style else [d.delay for d in base])

    durations = durations or [0.0]
    timings = timings or [DEFAULT_TIMING]
    delays = delays or [0.0]

    return [
        TransitionDeclaration(
            property_name,
            durations[index % len(durations)],
            timings[index % len(timings)],
            delays[index % len(delays)],
        )
        for index, property_name in enumerate(properties)
    ]

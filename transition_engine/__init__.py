"""
Wink Transitions - CSS transitions for visual node trees in Python.
"""

from transition_engine.utils.logging import setup_logging

# Set up basic logging
logger = setup_logging()

from transition_engine.css.animation import TransitionManager, AnimationHandle, AnimationState
from transition_engine.css.transition_parser import TransitionDeclaration, parse_transition_shorthand
from transition_engine.css.transition_style import transitions_from_style
from transition_engine.core.scheduler import FrameScheduler
from transition_engine.utils.config import Config

# Package information
__version__ = "1.0.0"
__author__ = "Wink Browser Team"
__description__ = "CSS transitions for visual node trees"

__all__ = [
    'TransitionManager',
    'AnimationHandle',
    'AnimationState',
    'TransitionDeclaration',
    'parse_transition_shorthand',
    'transitions_from_style',
    'FrameScheduler',
    'Config',
]

logger.debug(f"Wink Transitions v{__version__} initialized")

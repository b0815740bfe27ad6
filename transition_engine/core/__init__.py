"""
Core frame scheduling for the transition engine.
"""

from .scheduler import FrameScheduler, Sequence, SequenceState, TkFrameDriver

__all__ = ['FrameScheduler', 'Sequence', 'SequenceState', 'TkFrameDriver']

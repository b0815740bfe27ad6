"""
Style sinks: the toolkit-facing side of the transition engine.
The Tk canvas sink lives in ``transition_engine.ui.tk_sink`` and is imported on demand.
"""

from .style_sink import StyleSink, Paint, PaintRole, SizeAxis
from .memory_sink import MemorySink, MemoryNode

__all__ = ['StyleSink', 'Paint', 'PaintRole', 'SizeAxis', 'MemorySink', 'MemoryNode']

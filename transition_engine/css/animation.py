"""
CSS transition runtime.
This module starts, interrupts and completes per-property transitions on visual nodes.
At most one animation drives a given (node, property) pair; a new request for the pair
supersedes the running one and starts from its last interpolated value.
"""

import logging
from enum import Enum
from functools import partial
from typing import Any, Dict, Hashable, Iterable, List, Mapping, Optional

from .interpolation import InterpolationKind, PropertyStrategy, StrategyRegistry, default_registry
from .timing import TimingCurve
from .transition_parser import TransitionDeclaration
from ..core.scheduler import FrameScheduler, Sequence
from ..ui.style_sink import StyleSink
from ..utils.config import Config
from ..utils.logging import log_exception

logger = logging.getLogger(__name__)


class AnimationState(Enum):
    """Lifecycle of an animation handle."""
    RUNNING = 'running'
    FINISHED = 'finished'
    KILLED = 'killed'


class AnimationHandle:
    """
    One in-flight interpolation for a single (node, property) pair.
    """

    def __init__(self, node: Hashable, property_name: str, strategy: PropertyStrategy,
                 start: Any, target: Any, timing: TimingCurve, sequence: Sequence):
        """
        Initialize an animation handle.

        Args:
            node: The node handle
            property_name: The animated CSS property
            strategy: Interpolation strategy for the property
            start: Value at progress 0
            target: Value at progress 1
            timing: Easing curve applied to progress
            sequence: The sequence driving this animation
        """
        self.node = node
        self.property_name = property_name
        self.strategy = strategy
        self.start = start
        self.target = target
        self.timing = timing
        self.sequence = sequence
        self.state = AnimationState.RUNNING

    @property
    def is_running(self) -> bool:
        return self.state is AnimationState.RUNNING

    def finish(self) -> None:
        """Mark natural completion."""
        if self.is_running:
            self.state = AnimationState.FINISHED

    def kill(self) -> None:
        """Stop the animation where it is; no completion is reported."""
        if self.is_running:
            self.sequence.cancel()
            self.state = AnimationState.KILLED

    def __repr__(self):
        return f"AnimationHandle({self.node!r}, {self.property_name!r}, {self.state.value})"


class TransitionManager:
    """
    Manages transitions for the nodes of one style sink.

    The manager owns the table of running handles and the table of live
    (last interpolated) values, both keyed by node handle and property name.
    """

    def __init__(self, sink: StyleSink, scheduler: Optional[FrameScheduler] = None,
                 config: Optional[Config] = None, registry: Optional[StrategyRegistry] = None):
        """
        Initialize the transition manager.

        Args:
            sink: The style sink receiving attribute writes
            scheduler: Frame scheduler driving the animations
            config: Configuration; in-memory defaults if omitted
            registry: Interpolation strategies; built-in defaults if omitted
        """
        self.config = config if config is not None else Config()
        self.sink = sink
        self.scheduler = scheduler if scheduler is not None else FrameScheduler()
        self.registry = registry if registry is not None else default_registry(
            float_tolerance=self.config.get('transitions.float_tolerance', 1e-4),
            color_tolerance=self.config.get('transitions.color_tolerance', 0.5 / 255),
        )

        self._handles: Dict[Hashable, Dict[str, AnimationHandle]] = {}
        self._live_values: Dict[Hashable, Dict[str, Any]] = {}

        # The toolkit tells us when a node goes away
        self.sink.add_destroy_listener(self.cleanup)

        logger.debug("Transition manager initialized")

    def apply_transition(self, node: Hashable, from_style: Optional[Mapping[str, Any]],
                         to_style: Optional[Mapping[str, Any]],
                         declarations: Iterable[TransitionDeclaration]) -> None:
        """
        Transition a node from one computed style to another.

        Never raises: unusable input degrades to a skipped declaration or an
        immediate write.

        Args:
            node: The node handle
            from_style: The node's previous computed style
            to_style: The node's new computed style
            declarations: The node's transition declarations
        """
        try:
            alive = self.sink.is_alive(node)
        except Exception as e:
            log_exception(logger, e, f"Error checking whether {node!r} is alive")
            return
        if not alive:
            logger.debug(f"Ignoring transition on dead node {node!r}")
            return

        from_style = from_style or {}
        to_style = to_style or {}
        enabled = bool(self.config.get('transitions.enabled', True))

        try:
            resolved = self._resolve_declarations(declarations or [], to_style)
        except Exception as e:
            log_exception(logger, e, "Error resolving transition declarations")
            return

        for declaration in resolved:
            try:
                self._apply_declaration(node, from_style, to_style, declaration, enabled)
            except Exception as e:
                log_exception(logger, e, f"Error transitioning {declaration.property} on {node!r}")

    def cleanup(self, node: Hashable) -> None:
        """
        Kill every animation of a node and forget its live values.

        Args:
            node: The node handle
        """
        handles = self._handles.pop(node, {})
        for handle in handles.values():
            handle.kill()
            self.scheduler.cancel(handle.sequence)
        self._live_values.pop(node, None)

        if handles:
            logger.debug(f"Cleaned up {len(handles)} animation(s) for {node!r}")

    def shutdown(self) -> None:
        """Clean up every node and detach from the sink."""
        for node in list(self._handles):
            self.cleanup(node)
        self._live_values.clear()
        self.sink.remove_destroy_listener(self.cleanup)

    def is_animating(self, node: Hashable, property_name: Optional[str] = None) -> bool:
        """True if the node (or one property of it) has a running animation."""
        handles = self._handles.get(node, {})
        if property_name is None:
            return bool(handles)
        return property_name in handles

    def handle_for(self, node: Hashable, property_name: str) -> Optional[AnimationHandle]:
        """The running handle for a pair, if any."""
        return self._handles.get(node, {}).get(property_name)

    def live_value(self, node: Hashable, property_name: str, default: Any = None) -> Any:
        """The last interpolated value for a pair, if it is animating."""
        return self._live_values.get(node, {}).get(property_name, default)

    def active_properties(self, node: Hashable) -> List[str]:
        """Names of the properties currently animating on a node."""
        return list(self._handles.get(node, {}))

    def tracked_nodes(self) -> List[Hashable]:
        """Nodes that own at least one running animation."""
        return list(self._handles)

    def _resolve_declarations(self, declarations: Iterable[TransitionDeclaration],
                              to_style: Mapping[str, Any]) -> List[TransitionDeclaration]:
        """
        Expand ``all`` and drop repeated properties, the last declaration winning.
        """
        resolved: Dict[str, TransitionDeclaration] = {}
        for declaration in declarations:
            if declaration.property == 'all':
                for property_name in to_style:
                    if not property_name.startswith('transition'):
                        resolved[property_name] = declaration._replace(property=property_name)
            else:
                resolved[declaration.property] = declaration
        return list(resolved.values())

    def _apply_declaration(self, node: Hashable, from_style: Mapping[str, Any],
                           to_style: Mapping[str, Any], declaration: TransitionDeclaration,
                           enabled: bool) -> None:
        property_name = declaration.property
        if property_name not in to_style:
            return

        strategy = self.registry.get(property_name)
        target = strategy.parse(to_style[property_name])
        if target is None:
            logger.debug(f"Unusable {property_name} value {to_style[property_name]!r} for {node!r}")
            return

        duration = declaration.duration if enabled else 0.0
        handle = self.handle_for(node, property_name)
        if handle is not None and duration > 0 and strategy.equal(handle.target, target):
            # Already heading there
            return

        start = self._resolve_start(node, property_name, strategy, from_style)
        if start is not None and strategy.equal(start, target):
            if handle is not None:
                self._kill(node, property_name)
                strategy.write(self.sink, node, target)
            return

        if duration <= 0 or (start is None and strategy.kind is not InterpolationKind.SNAP):
            self._kill(node, property_name)
            strategy.write(self.sink, node, target)
            logger.debug(f"Applied {property_name} immediately on {node!r}")
            return

        if handle is not None:
            logger.debug(f"Interrupting {property_name} on {node!r} at {self.live_value(node, property_name)!r}")
        self._kill(node, property_name)
        self._start(node, property_name, strategy, start, target, declaration)

    def _resolve_start(self, node: Hashable, property_name: str, strategy: PropertyStrategy,
                       from_style: Mapping[str, Any]) -> Any:
        """Live value first, then the previous style, then the node itself."""
        live = self._live_values.get(node, {})
        if property_name in live:
            return live[property_name]

        if property_name in from_style:
            start = strategy.parse(from_style[property_name])
            if start is not None:
                return start

        return strategy.read(self.sink, node)

    def _start(self, node: Hashable, property_name: str, strategy: PropertyStrategy,
               start: Any, target: Any, declaration: TransitionDeclaration) -> AnimationHandle:
        sequence = Sequence(declaration.duration, declaration.delay)
        handle = AnimationHandle(node, property_name, strategy, start, target,
                                 declaration.timing, sequence)
        sequence.on_progress = partial(self._on_progress, handle)
        sequence.on_finished = partial(self._on_finished, handle)

        self._handles.setdefault(node, {})[property_name] = handle
        self._live_values.setdefault(node, {})[property_name] = start
        self.scheduler.add(sequence)

        logger.debug(f"Started {property_name} on {node!r}: {start!r} -> {target!r} "
                     f"over {declaration.duration}s after {declaration.delay}s "
                     f"({declaration.timing.value})")
        return handle

    def _kill(self, node: Hashable, property_name: str) -> None:
        handle = self.handle_for(node, property_name)
        if handle is None:
            return
        handle.kill()
        self.scheduler.cancel(handle.sequence)
        self._forget(handle)

    def _forget(self, handle: AnimationHandle) -> None:
        """Drop a handle and its live value from the tables."""
        handles = self._handles.get(handle.node)
        if handles is not None and handles.get(handle.property_name) is handle:
            del handles[handle.property_name]
            if not handles:
                del self._handles[handle.node]

            live = self._live_values.get(handle.node)
            if live is not None:
                live.pop(handle.property_name, None)
                if not live:
                    del self._live_values[handle.node]

    def _on_progress(self, handle: AnimationHandle, progress: float) -> None:
        if not handle.is_running:
            return

        if progress >= 1.0:
            value = handle.target
        else:
            value = handle.strategy.lerp(handle.start, handle.target, handle.timing.ease(progress))

        try:
            handle.strategy.write(self.sink, handle.node, value)
        except Exception as e:
            log_exception(logger, e, f"Error writing {handle.property_name} on {handle.node!r}")
            self._kill(handle.node, handle.property_name)
            return

        self._live_values[handle.node][handle.property_name] = value

    def _on_finished(self, handle: AnimationHandle) -> None:
        handle.finish()
        self._forget(handle)
        logger.debug(f"Finished {handle.property_name} on {handle.node!r}")

import logging

import pytest

from transition_engine.core.scheduler import FrameScheduler
from transition_engine.css.animation import AnimationState, TransitionManager
from transition_engine.css.color import Color
from transition_engine.css.timing import TimingCurve
from transition_engine.css.transition_parser import TransitionDeclaration, parse_transition_shorthand
from transition_engine.ui.memory_sink import MemorySink
from transition_engine.ui.style_sink import Paint, PaintRole, SizeAxis


def fade(duration=1.0, timing=TimingCurve.LINEAR, delay=0.0):
    return [TransitionDeclaration('opacity', duration, timing, delay)]


def test_zero_duration_applies_synchronously(manager, scheduler, node):
    manager.apply_transition(node, {'opacity': 1.0}, {'opacity': 0.25}, fade(duration=0.0))

    assert node.alpha == 0.25
    assert not manager.is_animating(node)
    assert manager.live_value(node, 'opacity') is None
    assert len(scheduler) == 0


def test_transition_none_behaves_like_plain_assignment(manager, node):
    manager.apply_transition(node, {}, {'opacity': 0.5}, parse_transition_shorthand('none'))
    # No declaration for opacity, so nothing is animated or written
    assert node.alpha == 1.0
    assert not manager.is_animating(node)


def test_linear_fade_runs_to_completion(manager, node, drive):
    manager.apply_transition(node, {'opacity': 1.0}, {'opacity': 0.0}, fade())
    handle = manager.handle_for(node, 'opacity')
    assert handle.state is AnimationState.RUNNING

    drive(1)
    assert node.alpha == 0.75
    assert manager.live_value(node, 'opacity') == 0.75

    drive(3)
    assert node.alpha == 0.0
    assert handle.state is AnimationState.FINISHED
    assert not manager.is_animating(node)
    assert manager.live_value(node, 'opacity') is None
    assert manager.tracked_nodes() == []


def test_timing_curve_reparametrizes_progress(manager, node, drive):
    node.alpha = 0.0
    manager.apply_transition(node, {'opacity': 0.0}, {'opacity': 1.0}, fade(timing=TimingCurve.EASE_IN))
    drive(2)
    assert node.alpha == pytest.approx(0.125)


def test_delay_postpones_the_active_phase(manager, sink, node, drive):
    manager.apply_transition(node, {'opacity': 1.0}, {'opacity': 0.0}, fade(delay=0.5))

    drive(1)
    assert sink.writes_for(node, 'alpha') == []
    assert manager.live_value(node, 'opacity') == 1.0

    drive(2)
    assert node.alpha == 0.75


def test_interruption_starts_from_the_interpolated_value(manager, scheduler, node, drive):
    manager.apply_transition(node, {'opacity': 1.0}, {'opacity': 0.0}, fade())
    first = manager.handle_for(node, 'opacity')
    drive(2)
    assert node.alpha == 0.5

    # The cascade still believes the old value is 0.0
    manager.apply_transition(node, {'opacity': 0.0}, {'opacity': 1.0}, fade())
    second = manager.handle_for(node, 'opacity')

    assert second is not first
    assert first.state is AnimationState.KILLED
    assert second.start == pytest.approx(0.5)
    assert len(scheduler) == 1
    assert manager.active_properties(node) == ['opacity']

    drive(2)
    assert node.alpha == pytest.approx(0.75)


def test_killed_animation_leaves_last_written_value(manager, node, drive):
    manager.apply_transition(node, {'opacity': 1.0}, {'opacity': 0.0}, fade())
    drive(1)
    manager.cleanup(node)
    drive(4)
    assert node.alpha == 0.75


def test_same_target_twice_is_a_no_op(manager, sink, scheduler, node, drive):
    manager.apply_transition(node, {'opacity': 1.0}, {'opacity': 0.0}, fade())
    handle = manager.handle_for(node, 'opacity')
    drive(1)

    manager.apply_transition(node, {'opacity': 1.0}, {'opacity': 0.0}, fade())
    assert manager.handle_for(node, 'opacity') is handle
    assert len(scheduler) == 1

    drive(3)
    writes = len(sink.writes)
    manager.apply_transition(node, {'opacity': 0.0}, {'opacity': 0.0}, fade())
    assert len(sink.writes) == writes
    assert not manager.is_animating(node)


def test_equal_start_and_target_spawn_nothing(manager, sink, node):
    manager.apply_transition(node, {'opacity': 0.5}, {'opacity': '0.50001'}, fade())
    assert not manager.is_animating(node)
    assert sink.writes == []


def test_retarget_to_current_value_stops_the_animation(manager, node, drive):
    manager.apply_transition(node, {'opacity': 1.0}, {'opacity': 0.0}, fade())
    drive(2)

    manager.apply_transition(node, {'opacity': 0.0}, {'opacity': 0.5}, fade())

    assert not manager.is_animating(node)
    assert node.alpha == 0.5


def test_start_value_falls_back_to_node_state(manager, node):
    node.alpha = 0.8
    manager.apply_transition(node, {}, {'opacity': 0.0}, fade())
    assert manager.handle_for(node, 'opacity').start == pytest.approx(0.8)


def test_missing_property_in_target_style_is_skipped(manager, sink, node):
    manager.apply_transition(node, {'opacity': 1.0}, {'width': '10px'}, fade())
    assert sink.writes == []
    assert not manager.is_animating(node)


def test_unusable_target_value_is_ignored(manager, sink, node):
    manager.apply_transition(node, {'opacity': 1.0}, {'opacity': 'bogus'}, fade())
    assert sink.writes == []


def test_color_transition_preserves_paint_attributes(manager, sink, node, drive):
    red = Paint(Color(1.0, 0.0, 0.0), corner_radius=6.0)
    sink.set_paint(node, PaintRole.FILL, red)
    declarations = [TransitionDeclaration('background-color', 1.0, TimingCurve.LINEAR)]

    manager.apply_transition(node, {'background-color': '#ff0000'}, {'background-color': '#0000ff'},
                             declarations)
    drive(2)

    paint = node.paints[PaintRole.FILL]
    assert paint.color.red == pytest.approx(0.5)
    assert paint.color.blue == pytest.approx(0.5)
    assert paint.corner_radius == 6.0
    assert red.color == Color(1.0, 0.0, 0.0)

    drive(2)
    assert node.paints[PaintRole.FILL].color == Color(0.0, 0.0, 1.0)
    assert node.paints[PaintRole.FILL].corner_radius == 6.0


def test_color_transition_without_paint_synthesizes_one(manager, node, drive):
    declarations = [TransitionDeclaration('color', 1.0, TimingCurve.LINEAR)]
    manager.apply_transition(node, {'color': 'black'}, {'color': 'white'}, declarations)
    drive(4)

    paint = node.paints[PaintRole.TEXT]
    assert paint.color == Color(1.0, 1.0, 1.0)
    assert paint.corner_radius == 0.0


def test_color_without_any_start_value_is_applied_immediately(manager, node):
    declarations = [TransitionDeclaration('border-color', 1.0)]
    manager.apply_transition(node, {}, {'border-color': 'red'}, declarations)

    assert node.paints[PaintRole.BORDER].color == Color(1.0, 0.0, 0.0)
    assert not manager.is_animating(node)


def test_size_transition_truncates_writes(manager, node, drive):
    declarations = [TransitionDeclaration('width', 1.0, TimingCurve.LINEAR)]
    manager.apply_transition(node, {'width': '100px'}, {'width': '101px'}, declarations)
    drive(2)
    assert node.sizes[SizeAxis.WIDTH] == 100
    drive(2)
    assert node.sizes[SizeAxis.WIDTH] == 101


def test_unknown_property_snaps_at_phase_start(manager, sink, drive):
    node = sink.create_node('panel', display='none')
    declarations = [TransitionDeclaration('display', 1.0, TimingCurve.LINEAR, 0.5)]
    manager.apply_transition(node, {'display': 'none'}, {'display': 'block'}, declarations)

    drive(1)
    assert node.attributes['display'] == 'none'
    drive(2)
    assert node.attributes['display'] == 'block'
    assert manager.is_animating(node, 'display')
    drive(4)
    assert not manager.is_animating(node)


def test_cubic_bezier_declaration_falls_back_and_runs(manager, node, drive):
    declarations = parse_transition_shorthand('opacity 1s cubic-bezier(.17,.67,.83,.67)')
    manager.apply_transition(node, {'opacity': 1.0}, {'opacity': 0.0}, declarations)
    assert manager.handle_for(node, 'opacity').timing is TimingCurve.EASE_IN_OUT
    drive(4)
    assert node.alpha == 0.0


def test_all_covers_every_target_property(manager, node):
    declarations = parse_transition_shorthand('all 1s linear')
    manager.apply_transition(
        node,
        {'opacity': 1.0, 'width': '100px'},
        {'opacity': 0.5, 'width': '50px', 'transition': 'all 1s linear'},
        declarations,
    )
    assert sorted(manager.active_properties(node)) == ['opacity', 'width']


def test_last_declaration_for_a_property_wins(manager, node):
    declarations = parse_transition_shorthand('opacity 1s, opacity 0s')
    manager.apply_transition(node, {'opacity': 1.0}, {'opacity': 0.0}, declarations)
    assert node.alpha == 0.0
    assert not manager.is_animating(node)


def test_disabled_transitions_apply_immediately(manager, config, node):
    config.set('transitions.enabled', False)
    manager.apply_transition(node, {'opacity': 1.0}, {'opacity': 0.0}, fade())
    assert node.alpha == 0.0
    assert not manager.is_animating(node)


def test_cleanup_removes_every_record(manager, scheduler, sink, node, drive):
    declarations = parse_transition_shorthand('opacity 1s linear, width 1s linear')
    manager.apply_transition(node, {'opacity': 1.0, 'width': 10}, {'opacity': 0.0, 'width': 20},
                             declarations)
    handles = [manager.handle_for(node, name) for name in ('opacity', 'width')]
    drive(1)

    manager.cleanup(node)

    assert all(handle.state is AnimationState.KILLED for handle in handles)
    assert manager.active_properties(node) == []
    assert manager.live_value(node, 'opacity') is None
    assert manager.tracked_nodes() == []
    assert len(scheduler) == 0

    writes = len(sink.writes)
    drive(4)
    assert len(sink.writes) == writes


def test_reused_node_starts_with_a_clean_slate(manager, node, drive):
    manager.apply_transition(node, {'opacity': 1.0}, {'opacity': 0.0}, fade())
    drive(2)
    manager.cleanup(node)

    manager.apply_transition(node, {'opacity': 0.2}, {'opacity': 1.0}, fade())
    assert manager.handle_for(node, 'opacity').start == pytest.approx(0.2)


def test_destroy_hook_triggers_cleanup(manager, sink, scheduler, node, drive):
    manager.apply_transition(node, {'opacity': 1.0}, {'opacity': 0.0}, fade())
    sink.destroy_node(node)

    assert not manager.is_animating(node)
    assert len(scheduler) == 0


def test_dead_node_is_a_no_op(manager, sink, scheduler, node):
    sink.destroy_node(node)
    manager.apply_transition(node, {'opacity': 1.0}, {'opacity': 0.0}, fade(duration=0.0))
    manager.apply_transition(node, {'opacity': 1.0}, {'opacity': 0.0}, fade())

    assert node.alpha == 1.0
    assert len(scheduler) == 0


class FlakySink(MemorySink):
    def __init__(self, failures_after):
        super().__init__()
        self.failures_after = failures_after

    def set_alpha(self, node, alpha):
        if len(self.writes) >= self.failures_after:
            raise RuntimeError("node went away")
        super().set_alpha(node, alpha)


def test_sink_failure_kills_only_that_animation(scheduler, config):
    sink = FlakySink(failures_after=1)
    manager = TransitionManager(sink, scheduler, config)
    node = sink.create_node()

    manager.apply_transition(node, {'opacity': 1.0}, {'opacity': 0.0}, fade())
    scheduler.tick(0.25)
    scheduler.tick(0.25)

    assert node.alpha == 0.75
    assert not manager.is_animating(node)
    assert len(scheduler) == 0


def test_sink_failure_on_immediate_write_does_not_raise(scheduler, config):
    sink = FlakySink(failures_after=0)
    manager = TransitionManager(sink, scheduler, config)
    node = sink.create_node()

    manager.apply_transition(node, {'opacity': 1.0}, {'opacity': 0.0}, fade(duration=0.0))
    assert node.alpha == 1.0


def test_shutdown_detaches_from_sink(manager, sink, node):
    manager.apply_transition(node, {'opacity': 1.0}, {'opacity': 0.0}, fade())
    manager.shutdown()
    assert manager.tracked_nodes() == []
    assert manager.cleanup not in sink._destroy_listeners


def test_manager_drives_the_scheduler_it_was_given(sink):
    scheduler = FrameScheduler()
    manager = TransitionManager(sink, scheduler)
    node = sink.create_node('box')

    manager.apply_transition(node, {'opacity': 1.0}, {'opacity': 0.0}, fade())

    assert manager.scheduler is scheduler
    assert len(scheduler) == 1
    scheduler.tick(0.5)
    assert node.alpha == 0.5


def test_zero_duration_to_the_running_target_finishes_now(manager, scheduler, node, drive):
    manager.apply_transition(node, {'opacity': 1.0}, {'opacity': 0.0}, fade())
    drive(1)

    manager.apply_transition(node, {'opacity': 1.0}, {'opacity': 0.0}, fade(duration=0.0))

    assert node.alpha == 0.0
    assert not manager.is_animating(node)
    assert len(scheduler) == 0


def test_disabling_transitions_finishes_a_running_fade(manager, config, node, drive):
    manager.apply_transition(node, {'opacity': 1.0}, {'opacity': 0.0}, fade())
    drive(1)

    config.set('transitions.enabled', False)
    manager.apply_transition(node, {'opacity': 1.0}, {'opacity': 0.0}, fade())

    assert node.alpha == 0.0
    assert not manager.is_animating(node)


def test_failing_destroy_listener_is_logged_with_traceback(sink, node, caplog):
    def broken(_node):
        raise RuntimeError("listener failed")

    sink.add_destroy_listener(broken)
    with caplog.at_level(logging.ERROR, logger='transition_engine'):
        sink.destroy_node(node)

    record = caplog.records[-1]
    assert "listener failed" in record.getMessage()
    assert record.exc_info[0] is RuntimeError

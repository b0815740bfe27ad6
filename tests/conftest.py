import pytest

from transition_engine.core.scheduler import FrameScheduler
from transition_engine.css.animation import TransitionManager
from transition_engine.ui.memory_sink import MemorySink
from transition_engine.utils.config import Config


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def sink():
    return MemorySink()


@pytest.fixture
def scheduler():
    return FrameScheduler()


@pytest.fixture
def manager(sink, scheduler, config):
    return TransitionManager(sink, scheduler, config)


@pytest.fixture
def node(sink):
    return sink.create_node('box')


@pytest.fixture
def drive(scheduler):
    """Tick the scheduler ``ticks`` times with a fixed frame time."""
    def _drive(ticks, dt=0.25):
        for _ in range(ticks):
            scheduler.tick(dt)
    return _drive

"""
Utility modules for the transition engine.
"""

from transition_engine.utils.config import Config, get_default_config_path
from transition_engine.utils.logging import (
    setup_logging, setup_logging_from_config, get_default_log_file, log_exception
)

__all__ = [
    'Config',
    'get_default_config_path',
    'setup_logging',
    'setup_logging_from_config',
    'get_default_log_file',
    'log_exception',
]

"""General utilities for distilqa."""

from .config import Config, load_yaml
from .io import load_state, read_state_dict, save_state
from .logging import configure_logging, get_logger
from .random import set_seed

__all__ = [
    "Config",
    "load_yaml",
    "save_state",
    "load_state",
    "read_state_dict",
    "configure_logging",
    "get_logger",
    "set_seed",
]

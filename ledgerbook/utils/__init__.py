# Utils Package
# Utility Functions and Helpers

from .logger import logger, setup_logger
from .helpers import *
from .constants import *
from .decorators import timed

__all__ = [
    "logger",
    "setup_logger",
    "timed"
]

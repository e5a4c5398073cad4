"""
Configuration, logging, timing and plotting helpers.

``utils.config`` builds on the draw and simulation packages and is imported
from there directly.
"""

from .logging_utils import setup_logging
from .timers import Timer

__all__ = [
    'setup_logging',
    'Timer'
]

"""
Configuration module for MathSnap.
"""
from .constants import *
from .logging_config import setup_logger, get_logger, logger

__all__ = [
    # Logging
    'setup_logger',
    'get_logger',
    'logger',
    # Constants (all exported via *)
]

"""Configuration, logging and upload helpers."""
from .config import Config
from .logging_config import setup_logging
from .numbers import round_half_up
from .uploads import sanitize_filename, sanitize_text, validate_file

__all__ = [
    'Config',
    'setup_logging',
    'round_half_up',
    'sanitize_filename',
    'sanitize_text',
    'validate_file',
]

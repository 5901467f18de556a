"""
Configuration for terrain generation and search.
"""

from .config import Settings, get_settings
from ..core.terrain import DEFAULT_BANDS, default_classifier

__all__ = ['Settings', 'get_settings', 'DEFAULT_BANDS', 'default_classifier']

"""
Price source configuration: which feed backs each (source, asset) pair.
"""

from .models import SourceConfig, asset_key
from .registry import SourceRegistry

__all__ = [
    "SourceConfig",
    "SourceRegistry",
    "asset_key",
]

"""
Storage Infrastructure Module

Provides the file provider layer and the in-memory upload pipe.
"""

from .streaming import AsyncPipe
from . import object_storage

__all__ = [
    'AsyncPipe',
    'object_storage',
]

"""
Data access helpers shared by the domain services.
"""

from .repository import BaseRepository

__all__ = ["BaseRepository"]

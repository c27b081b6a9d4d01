"""Source adapters, one per site."""

from .base import SourceAdapter
from .mangapark import MangaPark

__all__ = ["SourceAdapter", "MangaPark"]

"""Domain rules independent of persistence and transport."""

from . import derived

__all__ = ["derived"]

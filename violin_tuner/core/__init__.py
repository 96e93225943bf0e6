"""Core components for the violin tuner."""

# Import interfaces for easier access
from .interfaces import IAudioSource

__all__ = ["IAudioSource"]

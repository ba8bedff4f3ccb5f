"""Utility modules for microfx."""

from .identity import WeakIdentityMap

__all__ = ["WeakIdentityMap"]

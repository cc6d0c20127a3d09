"""Tier Rating Engine.

Assign qualitative levels to content, keep per-content aggregate scores,
and maintain manually ordered tier lists.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]

"""
Command line interface for StyleKit.
"""

from .commands import main

__all__ = ["main"]

"""
Command-line interface for setup-bindiff.
"""

from .parser import CLI, main

__all__ = ["CLI", "main"]

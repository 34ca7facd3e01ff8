"""
qtsetup CLI module.

This module provides the command-line interface for qtsetup.
"""

from .parser import CLI, main

__all__ = ["CLI", "main"]

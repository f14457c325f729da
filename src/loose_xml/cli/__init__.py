"""Command-line interface module for Loose XML Parser.

This module provides CLI tools to re-serialize, inspect and check markup
files.
"""

from .main import main

__all__ = ["main"]

"""
CLI module for datatransfer - contains command-line interface components.
"""

from datatransfer.cli.main import main

__all__ = ["main"]

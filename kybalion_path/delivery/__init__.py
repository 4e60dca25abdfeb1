"""
Kybalion Path terminal delivery.

Components:
- path_cli: Typer app with the practice, lesson, daily, status and reset commands
"""

from .path_cli import app, main

__all__ = [
    "app",
    "main",
]

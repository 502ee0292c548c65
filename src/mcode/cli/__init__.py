"""CLI module for mcode."""

from .main import McodeCLI, main

__all__ = [
    "McodeCLI",
    "main",
]

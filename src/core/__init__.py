"""
Core functionality for the placement optimizer service.

This package contains application settings shared by the API and the
command-line entry point.
"""

from src.core.config import settings

__all__ = [
    "settings",
]

"""
Energy-Aware Placement Optimizer - Source Package

This package contains the genetic algorithm that places virtual machines on
physical hosts, its configuration, and the HTTP API exposing it.
"""

__version__ = "1.0.0"

# Package-level imports for convenience
from src.core.config import settings

__all__ = [
    "settings",
    "__version__"
]

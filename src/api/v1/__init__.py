"""
Version 1 API routers.
"""

from src.api.v1 import placement

__all__ = ["placement"]

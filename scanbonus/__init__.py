# Backend package
"""
Report Card Scan & Bonus - Backend Module
"""

from .config import settings

__all__ = [
    "settings",
]

"""
User settings service
Per-user key/value settings over GraphQL, with audit notifications
"""

__version__ = "0.1.0"

from .config import settings

__all__ = ["settings", "__version__"]

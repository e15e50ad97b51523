"""
Core module for cross-cutting concerns.

This module provides:
- Structured logging configuration
- Request tracing middleware
- Authentication utilities
"""

from core.logging import configure_logging, get_logger
from core.auth import require_auth, ensure_same_actor, Actor

__all__ = [
    "configure_logging",
    "get_logger",
    "require_auth",
    "ensure_same_actor",
    "Actor",
]

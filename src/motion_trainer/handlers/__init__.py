"""Handler layer for HTTP endpoints.

This layer contains the HTTP request/response handlers.
Handlers depend on services (business logic), not directly on repositories.

Architecture:
    Handler -> Service -> Cache / Registry
    (HTTP)  -> (Business) -> (State)
"""

from .motion_handler import MotionHandler

__all__ = [
    "MotionHandler",
]

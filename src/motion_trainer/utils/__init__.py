"""Utility modules for motion trainer."""

from .clock import Clock, SystemClock
from .fingerprint import hash_config, make_instance_key, make_request_key

__all__ = [
    "Clock",
    "SystemClock",
    "hash_config",
    "make_instance_key",
    "make_request_key",
]

"""
Data Generation Module
"""
from .generators import EventLogGenerator

__all__ = [
    "EventLogGenerator",
]

"""Database access layer for tallybot."""

from . import common
from . import message_counts
from . import voice_presence
from . import voice_time

__all__ = [
    "common",
    "message_counts",
    "voice_presence",
    "voice_time",
]

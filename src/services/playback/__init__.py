"""
Playback module - resource stores, handles, and the per-flow slot.
"""

from .base import AudioPlayer
from .handle import PlaybackHandle, PlaybackSlot
from .store import MemoryResourceStore, ResourceStore, TempFileResourceStore

__all__ = [
    "AudioPlayer",
    "MemoryResourceStore",
    "PlaybackHandle",
    "PlaybackSlot",
    "ResourceStore",
    "TempFileResourceStore",
]

"""
Audio module - capture sources and the recorder controller.
"""

from .base import CaptureSource
from .clip import RecordedClipSource
from .recorder import RecorderController

__all__ = ["CaptureSource", "RecordedClipSource", "RecorderController"]

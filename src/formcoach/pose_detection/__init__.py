"""
Landmark producers. The MediaPipe adapter needs the optional 'camera' extra.
"""

from .base_detector import BasePoseDetector

__all__ = ['BasePoseDetector']

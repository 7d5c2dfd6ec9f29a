"""
Temporal smoothing, repetition detection and per-session rep statistics.
"""

from .rep_state_machine import RepCounter, RepState
from .session_stats import RepData, SessionStats
from .smoothing import WeightedAngleSmoother

__all__ = [
    'RepCounter',
    'RepData',
    'RepState',
    'SessionStats',
    'WeightedAngleSmoother',
]

"""
Real-time exercise form analysis and repetition counting from pose landmarks.
"""

from .exercise_analysis import (
    BiomechanicalAnalysis,
    EngineConfig,
    ExerciseKind,
    Landmark,
    MovementPhase,
    analyze_exercise,
    landmarks_from_array,
)
from .rep_counting import RepCounter, RepData, RepState, SessionStats, WeightedAngleSmoother
from .trainer import FormCoachSession, FrameGate, FrameResult

__version__ = "0.1.0"

__all__ = [
    'BiomechanicalAnalysis',
    'EngineConfig',
    'ExerciseKind',
    'FormCoachSession',
    'FrameGate',
    'FrameResult',
    'Landmark',
    'MovementPhase',
    'RepCounter',
    'RepData',
    'RepState',
    'SessionStats',
    'WeightedAngleSmoother',
    'analyze_exercise',
    'landmarks_from_array',
]

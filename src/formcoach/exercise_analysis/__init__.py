"""
Exercise analysis package for form validation and movement analysis.
"""

from .base_analyzer import (
    ANALYZER_REGISTRY,
    BaseExerciseAnalyzer,
    BiomechanicalAnalysis,
    ExerciseKind,
    MovementPhase,
)
from .config_utils import EngineConfig, RepThresholds, get_rep_thresholds
from .dispatch import analyze_exercise, get_analyzer
from .pose_utils import Landmark, LandmarkIdx, landmarks_from_array
from .pushup_analyzer import PushupAnalyzer
from .row_analyzer import RowAnalyzer
from .squat_analyzer import SquatAnalyzer

__all__ = [
    'ANALYZER_REGISTRY',
    'BaseExerciseAnalyzer',
    'BiomechanicalAnalysis',
    'EngineConfig',
    'ExerciseKind',
    'Landmark',
    'LandmarkIdx',
    'MovementPhase',
    'PushupAnalyzer',
    'RepThresholds',
    'RowAnalyzer',
    'SquatAnalyzer',
    'analyze_exercise',
    'get_analyzer',
    'get_rep_thresholds',
    'landmarks_from_array',
]

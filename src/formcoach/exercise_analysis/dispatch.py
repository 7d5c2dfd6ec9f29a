"""
Analyzer selection by exercise kind.

Sessions resolve the kind once and keep the analyzer; `analyze_exercise`
keeps the one-shot, name-based entry point.
"""
from typing import Any, Optional, Sequence

from .base_analyzer import (
    ANALYZER_REGISTRY,
    UNRECOGNIZED_EXERCISE_MESSAGE,
    BaseExerciseAnalyzer,
    BiomechanicalAnalysis,
    ExerciseKind,
)
# Imported for their registration side effect
from . import pushup_analyzer, row_analyzer, squat_analyzer  # noqa: F401


def get_analyzer(kind: ExerciseKind, visibility_threshold: float = 0.5) -> BaseExerciseAnalyzer:
    try:
        analyzer_cls = ANALYZER_REGISTRY[kind]
    except KeyError:
        raise ValueError(f"No analyzer registered for {kind!r}") from None
    return analyzer_cls(visibility_threshold=visibility_threshold)


def analyze_exercise(exercise: str, landmarks: Optional[Sequence[Any]]) -> BiomechanicalAnalysis:
    """Analyze one frame for a free-form exercise name."""
    kind = ExerciseKind.from_name(exercise)
    if kind is None:
        return BiomechanicalAnalysis.invalid(UNRECOGNIZED_EXERCISE_MESSAGE)
    return get_analyzer(kind).analyze_frame(landmarks)

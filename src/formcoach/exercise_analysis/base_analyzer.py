from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .config_utils import PhaseThresholds, get_phase_thresholds
from .pose_utils import average_confidence, check_landmark_visibility, clamp


class MovementPhase(Enum):
    """Qualitative portion of a movement cycle."""
    ECCENTRIC = "eccentric"
    CONCENTRIC = "concentric"
    ISOMETRIC = "isometric"
    REST = "rest"


class ExerciseKind(Enum):
    """Exercises with a dedicated form analyzer."""
    ROW = "row"
    SQUAT = "squat"
    PUSH_UP = "push_up"

    @classmethod
    def from_name(cls, name: Optional[str]) -> Optional["ExerciseKind"]:
        """
        Match a free-form exercise name (case-insensitive substring) to a kind.

        Returns None when no keyword matches.
        """
        if not name:
            return None
        lowered = name.lower()
        for kind, keywords in _EXERCISE_KEYWORDS:
            if any(keyword in lowered for keyword in keywords):
                return kind
        return None


# Checked in order; the first kind with a matching keyword wins
_EXERCISE_KEYWORDS: Tuple[Tuple[ExerciseKind, Tuple[str, ...]], ...] = (
    (ExerciseKind.ROW, ("row", "remada")),
    (ExerciseKind.SQUAT, ("squat", "agachamento")),
    (ExerciseKind.PUSH_UP, ("push", "flexão", "flexao")),
)

UNRECOGNIZED_EXERCISE_MESSAGE = "Exercise not recognized"


@dataclass
class BiomechanicalAnalysis:
    """Form assessment of a single frame."""
    feedback: List[str]
    metrics: Dict[str, float]
    phase: MovementPhase
    is_valid: bool
    quality: float  # 0-100, only meaningful when is_valid
    confidence: float  # Mean visibility of the required landmarks

    @classmethod
    def invalid(cls, message: str) -> "BiomechanicalAnalysis":
        return cls(
            feedback=[message],
            metrics={},
            phase=MovementPhase.REST,
            is_valid=False,
            quality=0.0,
            confidence=0.0,
        )


@dataclass
class FormCheck:
    """Accumulates feedback and penalties while the form rules run."""
    feedback: List[str] = field(default_factory=list)
    metrics: Dict[str, float] = field(default_factory=dict)
    penalty: float = 0.0

    def note(self, message: str) -> None:
        self.feedback.append(message)

    def violation(self, message: str, penalty: float) -> None:
        self.feedback.append(message)
        self.penalty += penalty


# --- Analyzer Registry ---
ANALYZER_REGISTRY: Dict[ExerciseKind, type] = {}


def register_analyzer(kind: ExerciseKind):
    def decorator(cls):
        ANALYZER_REGISTRY[kind] = cls
        return cls
    return decorator


class BaseExerciseAnalyzer(ABC):
    """Base class for exercise analysis implementations."""

    kind: ExerciseKind
    positioning_message: str
    primary_metric: str
    primary_confidence_metric: str

    def __init__(self, visibility_threshold: float = 0.5):
        """
        Args:
            visibility_threshold: Minimum visibility for every required landmark
        """
        self.visibility_threshold = visibility_threshold
        self.phase_thresholds: PhaseThresholds = get_phase_thresholds(self.kind)

    @abstractmethod
    def get_required_landmarks(self) -> List[int]:
        """Landmark indices that must be visible for the frame to be evaluable."""

    @abstractmethod
    def _evaluate_form(self, landmarks: Sequence[Any], check: FormCheck) -> None:
        """Compute metrics and apply the exercise's form rules to `check`."""

    def analyze_frame(self, landmarks: Optional[Sequence[Any]]) -> BiomechanicalAnalysis:
        """
        Analyze a single landmark frame.

        Args:
            landmarks: Indexed landmarks (33-point skeleton). Short frames are
                tolerated; missing points make the frame invalid.

        Returns:
            BiomechanicalAnalysis for this frame
        """
        required = self.get_required_landmarks()
        if not check_landmark_visibility(landmarks, required, self.visibility_threshold):
            return BiomechanicalAnalysis.invalid(self.positioning_message)

        check = FormCheck()
        self._evaluate_form(landmarks, check)
        primary_angle = check.metrics[self.primary_metric]
        return BiomechanicalAnalysis(
            feedback=check.feedback,
            metrics=check.metrics,
            phase=self.classify_phase(primary_angle),
            is_valid=True,
            quality=clamp(100.0 - check.penalty, 0.0, 100.0),
            confidence=average_confidence(landmarks, required),
        )

    def classify_phase(self, primary_angle: float) -> MovementPhase:
        thresholds = self.phase_thresholds
        if primary_angle > thresholds.high:
            return MovementPhase(thresholds.extended_phase)
        if primary_angle < thresholds.low:
            return MovementPhase.CONCENTRIC
        return MovementPhase.ISOMETRIC

    def get_primary_angle(self, analysis: BiomechanicalAnalysis) -> Tuple[float, float]:
        """
        The repetition-governing angle of an analysis and the trust in it.

        A missing angle reads as full extension (180 degrees).
        """
        angle = analysis.metrics.get(self.primary_metric, 180.0)
        confidence = analysis.metrics.get(self.primary_confidence_metric, analysis.confidence)
        return angle, confidence

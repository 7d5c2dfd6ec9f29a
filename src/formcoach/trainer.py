import logging
import time
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple

from .exercise_analysis.base_analyzer import (
    UNRECOGNIZED_EXERCISE_MESSAGE,
    BaseExerciseAnalyzer,
    BiomechanicalAnalysis,
    ExerciseKind,
    MovementPhase,
)
from .exercise_analysis.config_utils import EngineConfig, get_rep_thresholds
from .exercise_analysis.dispatch import get_analyzer
from .feedback.rep_feedback import FeedbackLog
from .rep_counting.rep_state_machine import RepCounter
from .rep_counting.session_stats import RepData, SessionStats
from .rep_counting.smoothing import WeightedAngleSmoother

logger = logging.getLogger("FormCoachSession")
if not logger.hasHandlers():
    handler = logging.StreamHandler()
    formatter = logging.Formatter('%(asctime)s %(levelname)s %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)
logger.setLevel(logging.INFO)


class FrameGate:
    """Drops frames that arrive sooner than `min_interval` seconds after the last accepted one."""

    def __init__(self, min_interval: float):
        if min_interval <= 0:
            raise ValueError(f"min_interval must be positive, got {min_interval}")
        self.min_interval = min_interval
        self._last_time: Optional[float] = None

    def allow(self, now: float) -> bool:
        if self._last_time is not None and now - self._last_time < self.min_interval:
            return False
        self._last_time = now
        return True

    def reset(self) -> None:
        self._last_time = None


@dataclass
class FrameResult:
    """Everything the caller needs to render after one processed frame."""
    analysis: BiomechanicalAnalysis
    rep_completed: bool
    rep: Optional[RepData]
    rep_count: int
    avg_quality: int
    avg_confidence: float
    last_rep_duration: float
    current_phase: MovementPhase
    feedback: List[str] = field(default_factory=list)


class FormCoachSession:
    """
    Analysis pipeline for one person doing one exercise.

    Each call to process_frame runs analyzer -> smoother -> rep counter ->
    stats synchronously. A session is not thread-safe; run one per user.
    """

    def __init__(self, exercise: str, config: Optional[EngineConfig] = None):
        """
        Args:
            exercise: Free-form exercise name, e.g. "Squat" or "push-up"
            config: Engine settings; defaults apply when omitted
        """
        self.config = config or EngineConfig()
        self._smoother = WeightedAngleSmoother(self.config.buffer_capacity, self.config.decay)
        self._stats = SessionStats()
        self._feedback = FeedbackLog(self.config.feedback_history)
        self._gate = FrameGate(self.config.min_frame_interval)
        self.set_exercise(exercise)

    def set_exercise(self, exercise: str) -> None:
        """Select a new exercise. All counters, buffers and feedback are cleared."""
        self.exercise = exercise
        self.kind: Optional[ExerciseKind] = ExerciseKind.from_name(exercise)
        self.analyzer: Optional[BaseExerciseAnalyzer] = None
        if self.kind is None:
            logger.warning(f"Exercise not recognized: {exercise!r}")
        else:
            self.analyzer = get_analyzer(self.kind, self.config.visibility_threshold)
        self._rep_counter = RepCounter(get_rep_thresholds(self.kind), self.config)
        self.reset()
        logger.info(f"Session configured for {exercise!r} ({self.kind.name if self.kind else 'unrecognized'})")

    def reset(self) -> None:
        self._smoother.reset()
        self._rep_counter.reset()
        self._stats.reset()
        self._feedback.clear()
        self._gate.reset()
        self._current_phase = MovementPhase.REST

    def process_frame(self, landmarks: Optional[Sequence[Any]], timestamp: Optional[float] = None) -> Optional[FrameResult]:
        """
        Run the pipeline on one landmark frame.

        Args:
            landmarks: Indexed landmark frame from the pose detector
            timestamp: Frame time in seconds; defaults to time.monotonic()

        Returns:
            FrameResult, or None if the frame arrived too soon and was dropped
        """
        now = time.monotonic() if timestamp is None else timestamp
        if not self._gate.allow(now):
            return None

        if self.analyzer is None:
            analysis = BiomechanicalAnalysis.invalid(UNRECOGNIZED_EXERCISE_MESSAGE)
        else:
            analysis = self.analyzer.analyze_frame(landmarks)

        rep = None
        if analysis.is_valid:
            self._current_phase = analysis.phase
            rep = self._detect_rep(analysis, now)
            if rep is not None:
                self._stats.record(rep)
                self._feedback.push_rep(rep.quality)
        if analysis.feedback:
            self._feedback.push(analysis.feedback[0], short=not analysis.is_valid)

        return FrameResult(
            analysis=analysis,
            rep_completed=rep is not None,
            rep=rep,
            rep_count=self.rep_count,
            avg_quality=self.avg_quality,
            avg_confidence=self.avg_confidence,
            last_rep_duration=self.last_rep_duration,
            current_phase=self._current_phase,
            feedback=self.feedback,
        )

    def _detect_rep(self, analysis: BiomechanicalAnalysis, now: float) -> Optional[RepData]:
        if analysis.confidence < self.config.min_confidence:
            logger.debug(f"Low-confidence frame ({analysis.confidence:.2f}) skipped for rep counting")
            return None
        angle, angle_confidence = self.analyzer.get_primary_angle(analysis)
        smoothed = self._smoother.push(angle, angle_confidence)
        return self._rep_counter.update(smoothed, analysis.confidence, analysis.quality, now)

    @property
    def rep_count(self) -> int:
        return self._stats.rep_count

    @property
    def avg_quality(self) -> int:
        return self._stats.avg_quality

    @property
    def avg_confidence(self) -> float:
        return self._stats.avg_confidence

    @property
    def last_rep_duration(self) -> float:
        return self._stats.last_rep_duration

    @property
    def current_phase(self) -> MovementPhase:
        return self._current_phase

    @property
    def rep_history(self) -> Tuple[RepData, ...]:
        return self._stats.history

    @property
    def feedback(self) -> List[str]:
        return self._feedback.messages

import logging
from enum import Enum
from typing import Optional

from ..exercise_analysis.config_utils import EngineConfig, RepThresholds
from .session_stats import RepData

# --- Logger Setup ---
logger = logging.getLogger("RepCounter")
if not logger.hasHandlers():
    handler = logging.StreamHandler()
    formatter = logging.Formatter('%(asctime)s %(levelname)s %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)
logger.setLevel(logging.INFO)


class RepState(Enum):
    UP = "up"
    DOWN = "down"
    TRANSITIONING = "transitioning"


class RepCounter:
    """
    Hysteresis state machine over the smoothed primary joint angle.

    UP -> TRANSITIONING when the angle drops below down - hysteresis,
    TRANSITIONING -> DOWN below down - 2 * hysteresis, and back to UP once
    the angle reaches up + hysteresis. Only a TRANSITIONING -> UP crossing
    can produce a repetition; DOWN -> UP is an abandoned rep.
    """

    def __init__(self, thresholds: RepThresholds, config: Optional[EngineConfig] = None):
        self.thresholds = thresholds
        self.config = config or EngineConfig()
        self.reset()

    def reset(self) -> None:
        self.state = RepState.UP
        self.rep_start_time: Optional[float] = None
        self.last_rep_time: Optional[float] = None
        self.rep_count = 0

    def update(self, angle: float, confidence: float, quality: float, timestamp: float) -> Optional[RepData]:
        """
        Advance the machine with one smoothed angle sample.

        Args:
            angle: Smoothed primary angle in degrees
            confidence: Confidence of the analysis that produced the sample
            quality: Form quality of that analysis (0-100)
            timestamp: Sample time in seconds

        Returns:
            RepData if this sample completed a valid repetition, else None
        """
        if confidence < self.config.min_confidence:
            logger.debug(f"Skipping sample with confidence {confidence:.2f}")
            return None

        up = self.thresholds.up + self.thresholds.hysteresis
        down = self.thresholds.down - self.thresholds.hysteresis
        bottom = self.thresholds.down - 2 * self.thresholds.hysteresis

        if self.state == RepState.UP and angle < down:
            self._transition(RepState.TRANSITIONING)
            self.rep_start_time = timestamp
        elif self.state == RepState.TRANSITIONING and angle >= up:
            self._transition(RepState.UP)
            return self._complete_rep(confidence, quality, timestamp)
        elif self.state == RepState.DOWN and angle >= up:
            # Returned to the top from the bottom band: not counted
            self._transition(RepState.UP)
        elif self.state == RepState.TRANSITIONING and angle < bottom:
            self._transition(RepState.DOWN)
        return None

    def _transition(self, new_state: RepState) -> None:
        logger.debug(f"[REP] {self.state.name} -> {new_state.name}")
        self.state = new_state

    def _complete_rep(self, confidence: float, quality: float, timestamp: float) -> Optional[RepData]:
        if self.last_rep_time is not None and timestamp - self.last_rep_time < self.config.debounce_seconds:
            logger.debug(f"Rep dropped by debounce ({timestamp - self.last_rep_time:.3f}s since last rep)")
            return None

        duration = timestamp - self.rep_start_time
        if not self.config.min_rep_duration <= duration <= self.config.max_rep_duration:
            logger.debug(f"Rep discarded: implausible duration {duration:.2f}s")
            return None

        self.rep_count += 1
        self.last_rep_time = timestamp
        rep = RepData(
            count=self.rep_count,
            duration=duration,
            quality=quality,
            confidence=confidence,
            timestamp=timestamp,
        )
        logger.info(f"Rep {rep.count} completed in {duration:.2f}s (quality={quality:.0f}, confidence={confidence:.2f})")
        return rep

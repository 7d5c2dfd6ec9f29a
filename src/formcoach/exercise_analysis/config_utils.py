import json
import math
import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional


def load_exercise_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load per-exercise thresholds and engine defaults from a JSON file."""
    if config_path is None:
        config_path = os.path.join(os.path.dirname(__file__), "exercise_config.json")
    with open(config_path, "r", encoding="utf-8") as f:
        config = json.load(f)
    for section in ("engine", "rep_thresholds", "phase_thresholds"):
        if section not in config:
            raise ValueError(f"Exercise config {config_path} is missing the '{section}' section")
    if "default" not in config["rep_thresholds"]:
        raise ValueError(f"Exercise config {config_path} has no default rep thresholds")
    return config


_EXERCISE_CONFIG = load_exercise_config()


@dataclass(frozen=True)
class RepThresholds:
    """Joint-angle thresholds (degrees) for the repetition state machine."""
    up: float
    down: float
    hysteresis: float


@dataclass(frozen=True)
class PhaseThresholds:
    """Primary-angle thresholds that classify the movement phase."""
    high: float
    low: float
    extended_phase: str


@dataclass
class EngineConfig:
    """Session-wide settings, fixed when the session starts."""
    min_confidence: float = 0.5  # Frames below this analysis confidence never reach the rep counter
    visibility_threshold: float = 0.5  # Required landmarks must be at least this visible
    buffer_capacity: int = 5
    decay: float = 0.8  # Recency decay of the smoother
    debounce_seconds: float = 0.5  # Minimum time between accepted reps
    min_rep_duration: float = 0.3
    max_rep_duration: float = 10.0
    max_fps: float = 30.0
    feedback_history: int = 4

    def __post_init__(self):
        if not 0.0 <= self.min_confidence <= 1.0:
            raise ValueError(f"min_confidence must be in [0, 1], got {self.min_confidence}")
        if not 0.0 <= self.visibility_threshold <= 1.0:
            raise ValueError(f"visibility_threshold must be in [0, 1], got {self.visibility_threshold}")
        if self.buffer_capacity < 1:
            raise ValueError(f"buffer_capacity must be at least 1, got {self.buffer_capacity}")
        if not 0.0 < self.decay <= 1.0:
            raise ValueError(f"decay must be in (0, 1], got {self.decay}")
        if self.debounce_seconds < 0:
            raise ValueError(f"debounce_seconds must not be negative, got {self.debounce_seconds}")
        if not 0.0 <= self.min_rep_duration <= self.max_rep_duration:
            raise ValueError(
                f"Invalid rep duration band [{self.min_rep_duration}, {self.max_rep_duration}]"
            )
        if self.max_fps <= 0:
            raise ValueError(f"max_fps must be positive, got {self.max_fps}")
        if self.feedback_history < 1:
            raise ValueError(f"feedback_history must be at least 1, got {self.feedback_history}")

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "EngineConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ValueError(f"Unknown engine settings: {', '.join(sorted(unknown))}")
        return cls(**values)

    @classmethod
    def from_file(cls, config_path: Optional[str] = None) -> "EngineConfig":
        """
        Read engine settings. A user file only needs an 'engine' section;
        keys it omits keep the packaged defaults.
        """
        values = dict(_EXERCISE_CONFIG["engine"])
        if config_path is not None:
            with open(config_path, "r", encoding="utf-8") as f:
                overrides = json.load(f)
            if "engine" not in overrides:
                raise ValueError(f"Config file {config_path} has no 'engine' section")
            values.update(overrides["engine"])
        return cls.from_dict(values)

    @property
    def min_frame_interval(self) -> float:
        """Gate interval in seconds, floored to whole milliseconds (33 ms at 30 fps)."""
        return max(math.floor(1000.0 / self.max_fps), 1) / 1000.0


def _config_key(exercise: Any) -> str:
    # Accepts an ExerciseKind or its plain string value
    return str(getattr(exercise, "value", exercise)).lower()


def get_rep_thresholds(exercise: Any = None) -> RepThresholds:
    table = _EXERCISE_CONFIG["rep_thresholds"]
    entry = table.get(_config_key(exercise), table["default"]) if exercise is not None else table["default"]
    return RepThresholds(float(entry["up"]), float(entry["down"]), float(entry["hysteresis"]))


def get_phase_thresholds(exercise: Any) -> PhaseThresholds:
    entry = _EXERCISE_CONFIG["phase_thresholds"][_config_key(exercise)]
    return PhaseThresholds(float(entry["high"]), float(entry["low"]), entry["extended_phase"])

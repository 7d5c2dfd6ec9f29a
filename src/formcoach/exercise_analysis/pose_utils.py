"""
pose_utils.py - Shared geometry utilities for landmark frames.

All functions here are pure: no state, no side effects, safe to call
from any number of sessions at once.
"""
import math
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

_EPS = 1e-9


@dataclass(frozen=True)
class Landmark:
    """A single detected body keypoint in normalized frame coordinates."""
    x: float
    y: float
    z: Optional[float] = None
    visibility: Optional[float] = None


class LandmarkIdx:
    """MediaPipe Pose landmark indices used by the analyzers."""
    NOSE = 0
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16
    LEFT_HIP = 23
    RIGHT_HIP = 24
    LEFT_KNEE = 25
    RIGHT_KNEE = 26
    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28


NUM_LANDMARKS = 33


def landmarks_from_array(points: Any) -> List[Landmark]:
    """
    Build a landmark frame from an (N, 2), (N, 3) or (N, 4) array-like.

    Columns are x, y, z, visibility; missing columns stay unset.
    """
    arr = np.asarray(points, dtype=float)
    if arr.ndim != 2 or arr.shape[1] < 2 or arr.shape[1] > 4:
        raise ValueError(f"Expected an (N, 2..4) array of landmarks, got shape {arr.shape}")
    frame = []
    for row in arr:
        z = float(row[2]) if arr.shape[1] > 2 else None
        visibility = float(row[3]) if arr.shape[1] > 3 else None
        frame.append(Landmark(float(row[0]), float(row[1]), z, visibility))
    return frame


def get_landmark(frame: Optional[Sequence[Any]], idx: int) -> Optional[Any]:
    """Return frame[idx], or None if the frame is too short or the slot is empty."""
    if not frame or idx < 0 or idx >= len(frame):
        return None
    return frame[idx]


def visibility_of(point: Any) -> float:
    """Visibility of a landmark; an unscored landmark counts as fully visible."""
    visibility = getattr(point, "visibility", None)
    return 1.0 if visibility is None else float(visibility)


def _xyz(point: Any) -> np.ndarray:
    z = getattr(point, "z", None)
    return np.array([point.x, point.y, 0.0 if z is None else z], dtype=float)


def _xy(point: Any) -> np.ndarray:
    return np.array([point.x, point.y], dtype=float)


# --- Math & Geometry Utilities ---
def angle_3d(a: Any, b: Any, c: Any) -> float:
    """
    Angle at vertex b between vectors b->a and b->c, in degrees [0, 180].

    Uses full 3D coordinates; a missing z is treated as 0. If either
    vector has zero length the angle is undefined and 0.0 is returned.
    """
    ba = _xyz(a) - _xyz(b)
    bc = _xyz(c) - _xyz(b)
    norm_ba = np.linalg.norm(ba)
    norm_bc = np.linalg.norm(bc)
    if norm_ba < _EPS or norm_bc < _EPS:
        return 0.0
    cosine_angle = np.clip(np.dot(ba, bc) / (norm_ba * norm_bc), -1.0, 1.0)
    return float(np.degrees(np.arccos(cosine_angle)))


def angle_2d(a: Any, b: Any, c: Any) -> float:
    """
    Angle at vertex b projected onto the x-y plane, in degrees [0, 180].

    Used for side-view exercises where the depth estimate is unreliable.
    """
    ba = _xy(a) - _xy(b)
    bc = _xy(c) - _xy(b)
    if np.linalg.norm(ba) < _EPS or np.linalg.norm(bc) < _EPS:
        return 0.0
    radians = math.atan2(bc[1], bc[0]) - math.atan2(ba[1], ba[0])
    angle = abs(math.degrees(radians))
    if angle > 180.0:
        angle = 360.0 - angle
    return angle


def distance_3d(a: Any, b: Any) -> float:
    """Euclidean distance including the z term."""
    return float(np.linalg.norm(_xyz(a) - _xyz(b)))


def distance_2d(a: Any, b: Any) -> float:
    """Euclidean distance in the image plane."""
    return float(np.linalg.norm(_xy(a) - _xy(b)))


def point_to_line_distance(p: Any, a: Any, b: Any) -> float:
    """
    Perpendicular distance from p to the infinite line through a and b.

    Falls back to the distance from p to a when a and b coincide.
    """
    baseline = _xyz(b) - _xyz(a)
    length = np.linalg.norm(baseline)
    if length < _EPS:
        return distance_3d(p, a)
    cross = np.cross(_xyz(p) - _xyz(a), baseline)
    return float(np.linalg.norm(cross) / length)


def average_confidence(frame: Optional[Sequence[Any]], indices: Sequence[int]) -> float:
    """Mean visibility over the landmarks at `indices` that are present; 0.0 if none are."""
    visibilities = [visibility_of(p) for p in (get_landmark(frame, i) for i in indices) if p is not None]
    if not visibilities:
        return 0.0
    return float(np.mean(visibilities))


def weighted_angle(a: Any, b: Any, c: Any, use_depth: bool = True) -> Tuple[float, float]:
    """
    Angle at b plus the trust in that angle.

    Trust is the lowest visibility of the three points: one poorly
    tracked point is enough to spoil the angle.
    """
    angle = angle_3d(a, b, c) if use_depth else angle_2d(a, b, c)
    return angle, min(visibility_of(a), visibility_of(b), visibility_of(c))


def check_landmark_visibility(frame: Optional[Sequence[Any]], indices: Sequence[int], min_visibility: float = 0.5) -> bool:
    """Check that every index is present and at least `min_visibility` visible."""
    for idx in indices:
        point = get_landmark(frame, idx)
        if point is None or visibility_of(point) < min_visibility:
            return False
    return True


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t

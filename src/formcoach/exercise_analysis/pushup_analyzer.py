from typing import Any, List, Sequence

from .base_analyzer import BaseExerciseAnalyzer, ExerciseKind, FormCheck, register_analyzer
from .pose_utils import LandmarkIdx, angle_2d, distance_2d, point_to_line_distance, weighted_angle

ELBOW_TOP = 160.0
ELBOW_FULL_DEPTH = 90.0
ELBOW_GOOD_DEPTH = 120.0
MIN_BODY_ANGLE = 160.0  # Shoulder-hip-ankle; below this the body line is broken
MAX_ELBOW_FLARE = 0.15


def _hip_below_body_line(shoulder: Any, hip: Any, ankle: Any) -> bool:
    """True if the hip sits below the shoulder-ankle line (image y grows downward)."""
    dx = ankle.x - shoulder.x
    if abs(dx) < 1e-9:
        return hip.y > (shoulder.y + ankle.y) / 2.0
    t = (hip.x - shoulder.x) / dx
    return hip.y > shoulder.y + t * (ankle.y - shoulder.y)


@register_analyzer(ExerciseKind.PUSH_UP)
class PushupAnalyzer(BaseExerciseAnalyzer):
    """Push-up analysis from a side view."""

    kind = ExerciseKind.PUSH_UP
    positioning_message = "Position yourself sideways to the camera"
    primary_metric = "elbow_angle"
    primary_confidence_metric = "elbow_confidence"

    def get_required_landmarks(self) -> List[int]:
        return [
            LandmarkIdx.LEFT_SHOULDER,
            LandmarkIdx.LEFT_ELBOW,
            LandmarkIdx.LEFT_WRIST,
            LandmarkIdx.LEFT_HIP,
            LandmarkIdx.LEFT_KNEE,
            LandmarkIdx.LEFT_ANKLE,
        ]

    def _evaluate_form(self, landmarks: Sequence[Any], check: FormCheck) -> None:
        shoulder = landmarks[LandmarkIdx.LEFT_SHOULDER]
        elbow = landmarks[LandmarkIdx.LEFT_ELBOW]
        wrist = landmarks[LandmarkIdx.LEFT_WRIST]
        hip = landmarks[LandmarkIdx.LEFT_HIP]
        knee = landmarks[LandmarkIdx.LEFT_KNEE]
        ankle = landmarks[LandmarkIdx.LEFT_ANKLE]

        elbow_angle, elbow_confidence = weighted_angle(shoulder, elbow, wrist, use_depth=False)
        body_angle = angle_2d(shoulder, hip, ankle)
        body_length = distance_2d(shoulder, ankle)
        deviation = point_to_line_distance(hip, shoulder, ankle)
        elbow_flare = abs(elbow.x - shoulder.x)
        check.metrics.update(
            elbow_angle=elbow_angle,
            elbow_confidence=elbow_confidence,
            body_alignment=body_angle,
            body_line_deviation=deviation / body_length if body_length > 0 else 0.0,
            leg_angle=angle_2d(hip, knee, ankle),
            elbow_flare=elbow_flare,
        )

        # Depth
        if elbow_angle > ELBOW_TOP:
            check.note("Starting position - lower yourself under control")
        elif elbow_angle < ELBOW_FULL_DEPTH:
            check.note("Full depth! Great execution")
        elif elbow_angle < ELBOW_GOOD_DEPTH:
            check.note("Good depth - keep going")
        else:
            check.violation("Go lower to use the full range of motion", 15)

        # Straight line shoulder-hip-ankle
        if body_angle < MIN_BODY_ANGLE:
            if _hip_below_body_line(shoulder, hip, ankle):
                check.violation("Hips sagging - engage your core", 20)
            else:
                check.violation("Hips too high - keep your body straight", 20)
        else:
            check.note("Body alignment is perfect")

        if elbow_flare > MAX_ELBOW_FLARE:
            check.violation("Elbows flared too wide - bring them closer to your body", 10)

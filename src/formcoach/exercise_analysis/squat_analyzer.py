from typing import Any, List, Sequence

from .base_analyzer import BaseExerciseAnalyzer, ExerciseKind, FormCheck, register_analyzer
from .pose_utils import LandmarkIdx, angle_3d, distance_2d, weighted_angle

# Knee angle bands used for depth feedback
KNEE_STANDING = 160.0
KNEE_FULL_DEPTH = 90.0
KNEE_PARALLEL = 120.0
KNEE_SHALLOW = 140.0
MIN_TORSO_ANGLE = 140.0
MAX_KNEE_FORWARD = 0.1
MAX_KNEE_ASYMMETRY = 15.0
MAX_HIP_SHIFT = 0.05


@register_analyzer(ExerciseKind.SQUAT)
class SquatAnalyzer(BaseExerciseAnalyzer):
    """Squat analysis from a front (or back) view, using depth-aware angles."""

    kind = ExerciseKind.SQUAT
    positioning_message = "Position yourself facing the camera (front or back)"
    primary_metric = "knee_angle"
    primary_confidence_metric = "knee_confidence"

    def get_required_landmarks(self) -> List[int]:
        return [
            LandmarkIdx.LEFT_SHOULDER,
            LandmarkIdx.LEFT_HIP,
            LandmarkIdx.RIGHT_HIP,
            LandmarkIdx.LEFT_KNEE,
            LandmarkIdx.RIGHT_KNEE,
            LandmarkIdx.LEFT_ANKLE,
            LandmarkIdx.RIGHT_ANKLE,
        ]

    def _evaluate_form(self, landmarks: Sequence[Any], check: FormCheck) -> None:
        shoulder = landmarks[LandmarkIdx.LEFT_SHOULDER]
        hip_l = landmarks[LandmarkIdx.LEFT_HIP]
        hip_r = landmarks[LandmarkIdx.RIGHT_HIP]
        knee_l = landmarks[LandmarkIdx.LEFT_KNEE]
        knee_r = landmarks[LandmarkIdx.RIGHT_KNEE]
        ankle_l = landmarks[LandmarkIdx.LEFT_ANKLE]
        ankle_r = landmarks[LandmarkIdx.RIGHT_ANKLE]

        knee_angle, knee_confidence = weighted_angle(hip_l, knee_l, ankle_l)
        knee_angle_r = angle_3d(hip_r, knee_r, ankle_r)
        torso_angle = angle_3d(shoulder, hip_l, knee_l)
        knee_forward = abs(knee_l.x - ankle_l.x)
        shin = distance_2d(knee_l, ankle_l)
        asymmetry = abs(knee_angle - knee_angle_r)
        hip_shift = abs((hip_l.x + hip_r.x) / 2.0 - (ankle_l.x + ankle_r.x) / 2.0)
        check.metrics.update(
            knee_angle=knee_angle,
            knee_confidence=knee_confidence,
            knee_angle_right=knee_angle_r,
            torso_angle=torso_angle,
            knee_forward=knee_forward,
            knee_forward_ratio=knee_forward / shin if shin > 0 else 0.0,
            knee_asymmetry=asymmetry,
            lateral_hip_shift=hip_shift,
        )

        # Depth
        if knee_angle > KNEE_STANDING:
            check.note("Starting position - descend under control")
        elif knee_angle < KNEE_FULL_DEPTH:
            check.note("Full depth! Excellent")
        elif knee_angle < KNEE_PARALLEL:
            check.note("Good depth - parallel reached")
        elif knee_angle < KNEE_SHALLOW:
            check.violation("Go a little lower for ideal depth", 10)

        if torso_angle < MIN_TORSO_ANGLE:
            check.violation("Keep your chest up - back leaning too far", 15)

        # Knee should not travel past the toes
        if knee_forward > MAX_KNEE_FORWARD:
            check.violation("Knee is going past your toes", 15)

        if asymmetry > MAX_KNEE_ASYMMETRY:
            check.violation("Distribute your weight evenly between both legs", 10)

        if hip_shift > MAX_HIP_SHIFT:
            check.violation("Keep your hips centered over your feet", 10)

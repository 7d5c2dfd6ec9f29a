"""
Bent-over row analysis from a side view.

The elbow angle governs repetitions; the torso hinge, shoulder rotation
and elbow path are scored as form.
"""
from typing import Any, List, Sequence

from .base_analyzer import BaseExerciseAnalyzer, ExerciseKind, FormCheck, register_analyzer
from .pose_utils import LandmarkIdx, angle_2d, weighted_angle

# Torso angle (shoulder-hip-ankle) band for a proper hip hinge
TORSO_TOO_UPRIGHT = 160.0
TORSO_TOO_BENT = 100.0
TORSO_IDEAL = (120.0, 150.0)
MAX_SHOULDER_TILT = 0.05
ELBOW_EXTENDED = 160.0
ELBOW_OVER_FLEXED = 60.0
MAX_ELBOW_PROXIMITY = 0.15


@register_analyzer(ExerciseKind.ROW)
class RowAnalyzer(BaseExerciseAnalyzer):
    kind = ExerciseKind.ROW
    positioning_message = "Position yourself sideways to the camera"
    primary_metric = "elbow_angle"
    primary_confidence_metric = "elbow_confidence"

    def get_required_landmarks(self) -> List[int]:
        return [
            LandmarkIdx.LEFT_SHOULDER,
            LandmarkIdx.LEFT_ELBOW,
            LandmarkIdx.LEFT_WRIST,
            LandmarkIdx.LEFT_HIP,
            LandmarkIdx.LEFT_ANKLE,
            LandmarkIdx.RIGHT_SHOULDER,
        ]

    def _evaluate_form(self, landmarks: Sequence[Any], check: FormCheck) -> None:
        shoulder = landmarks[LandmarkIdx.LEFT_SHOULDER]
        elbow = landmarks[LandmarkIdx.LEFT_ELBOW]
        wrist = landmarks[LandmarkIdx.LEFT_WRIST]
        hip = landmarks[LandmarkIdx.LEFT_HIP]
        ankle = landmarks[LandmarkIdx.LEFT_ANKLE]
        shoulder_r = landmarks[LandmarkIdx.RIGHT_SHOULDER]

        elbow_angle, elbow_confidence = weighted_angle(shoulder, elbow, wrist, use_depth=False)
        torso_angle = angle_2d(shoulder, hip, ankle)
        shoulder_tilt = abs(shoulder.y - shoulder_r.y)
        elbow_proximity = abs(elbow.x - hip.x)
        check.metrics.update(
            elbow_angle=elbow_angle,
            elbow_confidence=elbow_confidence,
            torso_angle=torso_angle,
            shoulder_alignment=shoulder_tilt,
            elbow_proximity=elbow_proximity,
        )

        if torso_angle > TORSO_TOO_UPRIGHT:
            check.violation("Lean your torso forward (~45°)", 15)
        elif torso_angle < TORSO_TOO_BENT:
            check.violation("Don't lean too far - protect your lower back", 20)
        elif TORSO_IDEAL[0] <= torso_angle <= TORSO_IDEAL[1]:
            check.note("Torso lean is perfect")

        if shoulder_tilt > MAX_SHOULDER_TILT:
            check.violation("Keep your shoulders level - no rotation", 15)

        if elbow_angle > ELBOW_EXTENDED:
            check.note("Arm extended - start the pull")
        elif elbow_angle < ELBOW_OVER_FLEXED:
            check.violation("Pull too short - extend your arm more", 10)

        if elbow_proximity > MAX_ELBOW_PROXIMITY:
            check.violation("Keep your elbow close to your body", 10)

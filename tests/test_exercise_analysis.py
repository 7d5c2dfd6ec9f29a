"""Tests for the per-exercise analyzers and the exercise dispatcher."""

import math

import numpy as np
import pytest

from formcoach.exercise_analysis import (
    BiomechanicalAnalysis,
    ExerciseKind,
    Landmark,
    MovementPhase,
    PushupAnalyzer,
    RowAnalyzer,
    SquatAnalyzer,
    analyze_exercise,
    get_analyzer,
)
from formcoach.exercise_analysis.base_analyzer import ANALYZER_REGISTRY, BaseExerciseAnalyzer, FormCheck
from formcoach.exercise_analysis.pose_utils import LandmarkIdx as Idx


# ============================================================================
# Frame builders
# ============================================================================

def _blank_frame(n: int = 33):
    return [Landmark(0.5, 0.5, 0.0, 1.0) for _ in range(n)]


def _squat_frame(knee_angle: float):
    """Front-view squat with both knee angles equal to `knee_angle`."""
    frame = _blank_frame()
    theta = math.radians(knee_angle)
    frame[Idx.LEFT_SHOULDER] = Landmark(0.4, 0.2, 0.0, 1.0)
    frame[Idx.RIGHT_SHOULDER] = Landmark(0.6, 0.2, 0.0, 1.0)
    frame[Idx.LEFT_KNEE] = Landmark(0.4, 0.6, 0.0, 1.0)
    frame[Idx.RIGHT_KNEE] = Landmark(0.6, 0.6, 0.0, 1.0)
    frame[Idx.LEFT_ANKLE] = Landmark(0.4, 0.8, 0.0, 1.0)
    frame[Idx.RIGHT_ANKLE] = Landmark(0.6, 0.8, 0.0, 1.0)
    frame[Idx.LEFT_HIP] = Landmark(0.4 + 0.2 * math.sin(theta), 0.6 + 0.2 * math.cos(theta), 0.0, 1.0)
    frame[Idx.RIGHT_HIP] = Landmark(0.6 - 0.2 * math.sin(theta), 0.6 + 0.2 * math.cos(theta), 0.0, 1.0)
    return frame


def _pushup_frame(hip_y: float = 0.5):
    """Side-view push-up at the top, arms straight under the shoulder."""
    frame = _blank_frame()
    frame[Idx.LEFT_SHOULDER] = Landmark(0.3, 0.5, 0.0, 1.0)
    frame[Idx.LEFT_ELBOW] = Landmark(0.3, 0.6, 0.0, 1.0)
    frame[Idx.LEFT_WRIST] = Landmark(0.3, 0.7, 0.0, 1.0)
    frame[Idx.LEFT_HIP] = Landmark(0.5, hip_y, 0.0, 1.0)
    frame[Idx.LEFT_KNEE] = Landmark(0.6, 0.5, 0.0, 1.0)
    frame[Idx.LEFT_ANKLE] = Landmark(0.7, 0.5, 0.0, 1.0)
    return frame


def _row_frame(torso_angle: float = 135.0, shoulder_tilt: float = 0.0):
    """Side-view row with the arm hanging straight down from the shoulder."""
    frame = _blank_frame()
    theta = math.radians(torso_angle)
    hip = Landmark(0.5, 0.6, 0.0, 1.0)
    shoulder = Landmark(0.5 + 0.2 * math.sin(theta), 0.6 + 0.2 * math.cos(theta), 0.0, 1.0)
    frame[Idx.LEFT_HIP] = hip
    frame[Idx.LEFT_ANKLE] = Landmark(0.5, 0.9, 0.0, 1.0)
    frame[Idx.LEFT_SHOULDER] = shoulder
    frame[Idx.RIGHT_SHOULDER] = Landmark(shoulder.x, shoulder.y + shoulder_tilt, 0.0, 1.0)
    frame[Idx.LEFT_ELBOW] = Landmark(shoulder.x, shoulder.y + 0.15, 0.0, 1.0)
    frame[Idx.LEFT_WRIST] = Landmark(shoulder.x, shoulder.y + 0.3, 0.0, 1.0)
    return frame


# ============================================================================
# Test: Dispatch
# ============================================================================

class TestExerciseKind:

    @pytest.mark.parametrize("name, kind", [
        ("Barbell Row", ExerciseKind.ROW),
        ("Remada curvada", ExerciseKind.ROW),
        ("SQUAT", ExerciseKind.SQUAT),
        ("Agachamento livre", ExerciseKind.SQUAT),
        ("push-ups", ExerciseKind.PUSH_UP),
        ("Flexão de braço", ExerciseKind.PUSH_UP),
    ])
    def test_keyword_match(self, name, kind):
        assert ExerciseKind.from_name(name) is kind

    @pytest.mark.parametrize("name", ["deadlift", "yoga", "", None])
    def test_unrecognized(self, name):
        assert ExerciseKind.from_name(name) is None

    def test_unrecognized_exercise_record(self):
        analysis = analyze_exercise("jumping jacks", _squat_frame(170))
        assert isinstance(analysis, BiomechanicalAnalysis)
        assert not analysis.is_valid
        assert analysis.feedback == ["Exercise not recognized"]
        assert analysis.quality == 0
        assert analysis.phase is MovementPhase.REST

    def test_analyze_exercise_dispatches(self):
        analysis = analyze_exercise("Squat", _squat_frame(70))
        assert analysis.is_valid
        assert "knee_angle" in analysis.metrics

    def test_get_analyzer(self):
        assert isinstance(get_analyzer(ExerciseKind.ROW), RowAnalyzer)
        assert isinstance(get_analyzer(ExerciseKind.SQUAT), SquatAnalyzer)
        assert isinstance(get_analyzer(ExerciseKind.PUSH_UP), PushupAnalyzer)


# ============================================================================
# Test: Squat
# ============================================================================

class TestSquatAnalyzer:

    def test_deep_squat(self):
        analysis = SquatAnalyzer().analyze_frame(_squat_frame(70))
        assert analysis.is_valid
        np.testing.assert_allclose(analysis.metrics["knee_angle"], 70.0, atol=1e-6)
        assert analysis.phase is MovementPhase.CONCENTRIC
        assert 0 <= analysis.quality <= 100
        assert analysis.confidence == 1.0
        assert "Full depth! Excellent" in analysis.feedback

    def test_standing_is_rest_with_full_quality(self):
        analysis = SquatAnalyzer().analyze_frame(_squat_frame(180))
        assert analysis.phase is MovementPhase.REST
        assert analysis.quality == 100
        assert analysis.feedback == ["Starting position - descend under control"]

    def test_middle_band_is_isometric(self):
        analysis = SquatAnalyzer().analyze_frame(_squat_frame(130))
        assert analysis.phase is MovementPhase.ISOMETRIC
        assert "Go a little lower for ideal depth" in analysis.feedback

    def test_missing_landmark_is_invalid(self):
        frame = _squat_frame(70)
        frame[Idx.LEFT_KNEE] = Landmark(0.4, 0.6, 0.0, 0.2)
        analysis = SquatAnalyzer().analyze_frame(frame)
        assert not analysis.is_valid
        assert analysis.quality == 0
        assert analysis.confidence == 0
        assert analysis.metrics == {}
        assert analysis.feedback == [SquatAnalyzer.positioning_message]

    def test_short_frame_is_invalid(self):
        analysis = SquatAnalyzer().analyze_frame(_squat_frame(70)[:25])
        assert not analysis.is_valid
        assert analysis.feedback == [SquatAnalyzer.positioning_message]

    def test_asymmetry_penalized(self):
        frame = _squat_frame(180)
        frame[Idx.RIGHT_HIP] = Landmark(0.6 - 0.2 * math.sin(math.radians(150)),
                                        0.6 + 0.2 * math.cos(math.radians(150)), 0.0, 1.0)
        analysis = SquatAnalyzer().analyze_frame(frame)
        assert analysis.metrics["knee_asymmetry"] == pytest.approx(30.0, abs=1e-3)
        assert "Distribute your weight evenly between both legs" in analysis.feedback
        assert analysis.quality < 100

    def test_quality_never_negative(self):
        frame = _squat_frame(130)
        # Lean the torso, push the knee forward and shift the hips at once
        frame[Idx.LEFT_SHOULDER] = Landmark(0.9, 0.7, 0.0, 1.0)
        frame[Idx.LEFT_KNEE] = Landmark(0.1, 0.6, 0.0, 1.0)
        frame[Idx.RIGHT_HIP] = Landmark(0.95, 0.9, 0.0, 1.0)
        analysis = SquatAnalyzer().analyze_frame(frame)
        assert analysis.is_valid
        assert 0 <= analysis.quality <= 100


class _OverPenalizedAnalyzer(BaseExerciseAnalyzer):
    """Every rule fails: penalties add up past 100."""

    kind = ExerciseKind.SQUAT
    positioning_message = "Stand in frame"
    primary_metric = "knee_angle"
    primary_confidence_metric = "knee_confidence"

    def get_required_landmarks(self):
        return [Idx.LEFT_HIP, Idx.LEFT_KNEE, Idx.LEFT_ANKLE]

    def _evaluate_form(self, landmarks, check: FormCheck):
        check.metrics.update(knee_angle=85.0, knee_confidence=1.0)
        for i in range(6):
            check.violation(f"Fault {i}", 25)


class TestBaseAnalyzer:

    def test_quality_clamped_at_zero(self):
        analysis = _OverPenalizedAnalyzer().analyze_frame(_blank_frame())
        assert analysis.is_valid
        assert analysis.quality == 0
        assert len(analysis.feedback) == 6
        assert analysis.phase is MovementPhase.CONCENTRIC

    def test_subclass_without_decorator_is_not_registered(self):
        assert ANALYZER_REGISTRY[ExerciseKind.SQUAT] is SquatAnalyzer


# ============================================================================
# Test: Push-up
# ============================================================================

class TestPushupAnalyzer:

    def test_straight_plank(self):
        analysis = PushupAnalyzer().analyze_frame(_pushup_frame())
        assert analysis.is_valid
        assert analysis.quality == 100
        assert analysis.phase is MovementPhase.REST
        assert analysis.feedback == [
            "Starting position - lower yourself under control",
            "Body alignment is perfect",
        ]
        np.testing.assert_allclose(analysis.metrics["body_line_deviation"], 0.0, atol=1e-9)

    def test_sagging_hips(self):
        analysis = PushupAnalyzer().analyze_frame(_pushup_frame(hip_y=0.6))
        assert "Hips sagging - engage your core" in analysis.feedback
        assert analysis.quality == 80
        assert analysis.metrics["body_line_deviation"] > 0

    def test_piked_hips(self):
        analysis = PushupAnalyzer().analyze_frame(_pushup_frame(hip_y=0.4))
        assert "Hips too high - keep your body straight" in analysis.feedback
        assert analysis.quality == 80

    def test_elbow_flare(self):
        frame = _pushup_frame()
        frame[Idx.LEFT_ELBOW] = Landmark(0.1, 0.6, 0.0, 1.0)
        analysis = PushupAnalyzer().analyze_frame(frame)
        assert analysis.metrics["elbow_flare"] == pytest.approx(0.2)
        assert "Elbows flared too wide - bring them closer to your body" in analysis.feedback

    def test_requires_side_view(self):
        frame = _pushup_frame()
        frame[Idx.LEFT_WRIST] = Landmark(0.3, 0.7, 0.0, 0.1)
        analysis = PushupAnalyzer().analyze_frame(frame)
        assert not analysis.is_valid
        assert analysis.feedback == ["Position yourself sideways to the camera"]


# ============================================================================
# Test: Row
# ============================================================================

class TestRowAnalyzer:

    def test_good_hinge(self):
        analysis = RowAnalyzer().analyze_frame(_row_frame())
        assert analysis.is_valid
        np.testing.assert_allclose(analysis.metrics["torso_angle"], 135.0, atol=1e-6)
        assert analysis.quality == 100
        assert analysis.phase is MovementPhase.ECCENTRIC
        assert analysis.feedback == ["Torso lean is perfect", "Arm extended - start the pull"]

    def test_upright_and_rotated(self):
        analysis = RowAnalyzer().analyze_frame(_row_frame(torso_angle=180.0, shoulder_tilt=0.1))
        assert analysis.quality == 70
        assert analysis.feedback == [
            "Lean your torso forward (~45°)",
            "Keep your shoulders level - no rotation",
            "Arm extended - start the pull",
        ]

    def test_pulled_elbow_is_concentric(self):
        frame = _row_frame()
        elbow = frame[Idx.LEFT_ELBOW]
        # Forearm folded back up toward the shoulder: 80 degrees at the elbow
        theta = math.radians(80)
        frame[Idx.LEFT_WRIST] = Landmark(elbow.x + 0.1 * math.sin(theta), elbow.y - 0.1 * math.cos(theta), 0.0, 1.0)
        analysis = RowAnalyzer().analyze_frame(frame)
        np.testing.assert_allclose(analysis.metrics["elbow_angle"], 80.0, atol=1e-6)
        assert analysis.phase is MovementPhase.CONCENTRIC
        assert analysis.metrics["elbow_confidence"] == 1.0

    def test_primary_angle(self):
        analyzer = RowAnalyzer()
        analysis = analyzer.analyze_frame(_row_frame())
        angle, confidence = analyzer.get_primary_angle(analysis)
        np.testing.assert_allclose(angle, 180.0, atol=1e-6)
        assert confidence == 1.0

    def test_primary_angle_defaults_to_extension(self):
        analyzer = RowAnalyzer()
        angle, confidence = analyzer.get_primary_angle(BiomechanicalAnalysis.invalid("x"))
        assert angle == 180.0
        assert confidence == 0.0

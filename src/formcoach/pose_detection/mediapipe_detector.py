from typing import List, Optional

import cv2
import numpy as np

from ..exercise_analysis.pose_utils import Landmark
from .base_detector import BasePoseDetector


class MediaPipePoseDetector(BasePoseDetector):
    """MediaPipe Pose Landmarker (tasks API) in video mode, single person."""

    def __init__(
        self,
        model_path: str,
        min_detection_confidence: float = 0.6,
        min_presence_confidence: float = 0.6,
        min_tracking_confidence: float = 0.6,
    ):
        """
        Args:
            model_path: Path to a pose_landmarker .task model file
            min_detection_confidence: Minimum confidence for pose detection
            min_presence_confidence: Minimum pose presence score
            min_tracking_confidence: Minimum confidence for pose tracking
        """
        from mediapipe.tasks.python.core.base_options import BaseOptions
        from mediapipe.tasks.python.vision import PoseLandmarker, PoseLandmarkerOptions
        from mediapipe.tasks.python.vision.core.vision_task_running_mode import VisionTaskRunningMode

        options = PoseLandmarkerOptions(
            base_options=BaseOptions(model_asset_path=model_path),
            running_mode=VisionTaskRunningMode.VIDEO,
            num_poses=1,
            min_pose_detection_confidence=min_detection_confidence,
            min_pose_presence_confidence=min_presence_confidence,
            min_tracking_confidence=min_tracking_confidence,
        )
        self._landmarker = PoseLandmarker.create_from_options(options)

    def detect(self, frame: np.ndarray, timestamp_ms: int) -> Optional[List[Landmark]]:
        from mediapipe.tasks.python.vision.core.image import Image, ImageFormat

        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        result = self._landmarker.detect_for_video(Image(image_format=ImageFormat.SRGB, data=rgb), timestamp_ms)
        if not result.pose_landmarks:
            return None
        return [
            Landmark(lm.x, lm.y, lm.z, lm.visibility)
            for lm in result.pose_landmarks[0]
        ]

    def close(self) -> None:
        self._landmarker.close()

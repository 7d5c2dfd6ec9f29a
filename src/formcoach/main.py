import argparse
import logging
import sys
import time
from typing import Optional

import cv2
import numpy as np

from .exercise_analysis.config_utils import EngineConfig
from .pose_detection.mediapipe_detector import MediaPipePoseDetector
from .trainer import FormCoachSession, FrameGate, FrameResult

logger = logging.getLogger("FormCoach")
if not logger.hasHandlers():
    handler = logging.StreamHandler()
    formatter = logging.Formatter('%(asctime)s %(levelname)s %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)
logger.setLevel(logging.INFO)

WINDOW_NAME = "Form Coach (q=quit, r=reset)"


def _display_results(frame: np.ndarray, result: Optional[FrameResult]) -> None:
    """Draw the latest session state on the frame."""
    if result is None:
        return
    lines = [
        f"Reps: {result.rep_count}",
        f"Phase: {result.current_phase.value}",
        f"Avg quality: {result.avg_quality}  Avg confidence: {result.avg_confidence:.2f}",
        f"Last rep: {result.last_rep_duration:.1f}s",
    ]
    for idx, text in enumerate(lines):
        cv2.putText(frame, text, (10, 30 + 30 * idx), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (0, 255, 0), 2)
    color = (0, 255, 0) if result.analysis.is_valid else (0, 0, 255)
    for idx, message in enumerate(result.feedback):
        cv2.putText(frame, message, (10, 160 + 30 * idx), cv2.FONT_HERSHEY_SIMPLEX, 0.6, color, 2)


def run(source, exercise: str, model_path: str, config: EngineConfig) -> int:
    """
    Capture loop: detector -> session -> overlay. Returns the final rep count.
    """
    cap = cv2.VideoCapture(source)
    if not cap.isOpened():
        raise RuntimeError(f"Failed to open video source {source!r}")
    detector = MediaPipePoseDetector(model_path)
    session = FormCoachSession(exercise, config)
    # Gate before detection so dropped frames never reach the landmarker
    gate = FrameGate(config.min_frame_interval)
    start = time.monotonic()
    last_result: Optional[FrameResult] = None
    try:
        while True:
            ret, frame = cap.read()
            if not ret:
                break
            now = time.monotonic() - start
            landmarks = detector.detect(frame, int(now * 1000)) if gate.allow(now) else None
            if landmarks is not None:
                result = session.process_frame(landmarks, now)
                if result is not None:
                    last_result = result
                    if result.rep_completed:
                        logger.info(f"Rep {result.rep_count}: {result.feedback[0]}")
            _display_results(frame, last_result)
            cv2.imshow(WINDOW_NAME, frame)
            key = cv2.waitKey(1) & 0xFF
            if key == ord('q'):
                break
            if key == ord('r'):
                session.reset()
                gate.reset()
                last_result = None
    finally:
        cap.release()
        detector.close()
        cv2.destroyAllWindows()
    logger.info(
        f"Session finished: {session.rep_count} reps, avg quality {session.avg_quality}, "
        f"avg confidence {session.avg_confidence:.2f}"
    )
    return session.rep_count


def main(argv=None) -> int:
    """Main entry point for the Form Coach CLI."""
    parser = argparse.ArgumentParser(description="Real-time exercise form analysis and rep counting")
    parser.add_argument("--exercise", type=str, required=True, help="Exercise name, e.g. squat, push-up, row")
    parser.add_argument("--model", type=str, required=True, help="Path to a MediaPipe pose_landmarker .task file")
    parser.add_argument("--camera", type=int, default=0, help="Camera device ID")
    parser.add_argument("--video", type=str, help="Analyze a video file instead of the camera")
    parser.add_argument("--config", type=str, help="JSON file with an 'engine' section overriding defaults")
    parser.add_argument("--max-fps", type=float, help="Maximum analysis rate (frames per second)")
    parser.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args(argv)

    for name in ("FormCoach", "RepCounter", "FormCoachSession"):
        logging.getLogger(name).setLevel(args.log_level)

    try:
        config = EngineConfig.from_file(args.config)
        if args.max_fps is not None:
            config = EngineConfig.from_dict({**vars(config), "max_fps": args.max_fps})
        source = args.video if args.video else args.camera
        run(source, args.exercise, args.model, config)
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting.")
    except (RuntimeError, ValueError, OSError) as e:
        logger.error(f"Error running form coach: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

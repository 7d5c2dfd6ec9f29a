from abc import ABC, abstractmethod
from typing import List, Optional

import numpy as np

from ..exercise_analysis.pose_utils import Landmark


class BasePoseDetector(ABC):
    """Base class for landmark producers feeding a FormCoachSession."""

    @abstractmethod
    def detect(self, frame: np.ndarray, timestamp_ms: int) -> Optional[List[Landmark]]:
        """
        Detect pose landmarks in the given frame.

        Args:
            frame: BGR image as numpy array
            timestamp_ms: Monotonically increasing frame time in milliseconds

        Returns:
            Landmark frame in normalized coordinates, or None if no pose was found
        """
        pass

    def close(self) -> None:
        """Release detector resources."""

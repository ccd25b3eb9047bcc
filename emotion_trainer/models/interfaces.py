"""Base interfaces for the estimator's external collaborators"""

from abc import ABC, abstractmethod
from typing import Any, Optional
from emotion_trainer.models.frames import VideoFrame


class CameraSource(ABC):
    """Interface for a camera capture capability"""

    @abstractmethod
    def start(self) -> None:
        """Acquire the camera feed

        Raises:
            CameraError: If the device cannot be opened
        """
        pass

    @abstractmethod
    def stop(self) -> None:
        """Release the camera hardware (idempotent)"""
        pass

    @abstractmethod
    def is_ready(self) -> bool:
        """Whether the source can be sampled yet"""
        pass

    @abstractmethod
    def read_frame(self) -> Optional[VideoFrame]:
        """Sample the current frame

        Returns:
            Current frame or None if no frame is available
        """
        pass


class FaceInferenceBackend(ABC):
    """Interface for a facial landmark/blendshape inference capability"""

    @abstractmethod
    def load(self) -> None:
        """Load the underlying model

        Raises:
            Exception: If the model cannot be loaded
        """
        pass

    @abstractmethod
    def detect(self, frame: VideoFrame, timestamp_ms: int) -> Any:
        """Run inference on a frame

        Args:
            frame: Frame to analyze
            timestamp_ms: Strictly increasing frame timestamp in milliseconds

        Returns:
            Raw result structure holding zero or more per-face blendshape
            lists and optional landmark lists. May raise transiently.
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Release model resources (idempotent)"""
        pass

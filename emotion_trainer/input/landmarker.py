"""Face landmark and blendshape inference on MediaPipe Tasks"""

import logging
import threading
from pathlib import Path
from typing import Any, Optional

import mediapipe as mp
from mediapipe.tasks.python import BaseOptions, vision

from emotion_trainer.models.frames import VideoFrame
from emotion_trainer.models.interfaces import FaceInferenceBackend


logger = logging.getLogger(__name__)


class LandmarkerError(Exception):
    """Exception raised when the face landmarker cannot be used"""
    pass


class FaceLandmarkerBackend(FaceInferenceBackend):
    """MediaPipe FaceLandmarker in VIDEO mode with blendshape output.

    ``detect`` and ``close`` are serialized on a lock so the model is never
    released while an inference call is using it.

    Attributes:
        model_path: Path to the ``face_landmarker.task`` bundle
        num_faces: Maximum faces tracked
        min_face_detection_confidence: Detection threshold [0, 1]
        min_tracking_confidence: Tracking threshold [0, 1]
    """

    def __init__(
        self,
        model_path,
        num_faces: int = 1,
        min_face_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5
    ):
        self.model_path = Path(model_path)
        self.num_faces = num_faces
        self.min_face_detection_confidence = min_face_detection_confidence
        self.min_tracking_confidence = min_tracking_confidence

        self.landmarker: Optional[vision.FaceLandmarker] = None
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, cfg) -> "FaceLandmarkerBackend":
        return cls(
            model_path=cfg.resolve_path('estimator.model_path', 'models/face_landmarker.task'),
            num_faces=cfg.get('estimator.num_faces', 1),
            min_face_detection_confidence=cfg.get('estimator.min_face_detection_confidence', 0.5),
            min_tracking_confidence=cfg.get('estimator.min_tracking_confidence', 0.5)
        )

    def load(self) -> None:
        """Create the FaceLandmarker from the local model bundle

        Raises:
            LandmarkerError: If the model file is missing
            Exception: If MediaPipe fails to build the task
        """
        if not self.model_path.exists():
            raise LandmarkerError(
                f"Model not found: {self.model_path}. Run scripts/download_models.py"
            )

        logger.info(f"Loading FaceLandmarker from {self.model_path}")
        options = vision.FaceLandmarkerOptions(
            base_options=BaseOptions(model_asset_path=str(self.model_path)),
            running_mode=vision.RunningMode.VIDEO,
            num_faces=self.num_faces,
            output_face_blendshapes=True,
            min_face_detection_confidence=self.min_face_detection_confidence,
            min_tracking_confidence=self.min_tracking_confidence,
        )

        try:
            landmarker = vision.FaceLandmarker.create_from_options(options)
        except Exception as e:
            logger.error(f"Failed to create FaceLandmarker: {e}", exc_info=True)
            raise

        with self._lock:
            self.landmarker = landmarker
        logger.info("FaceLandmarker ready")

    def detect(self, frame: VideoFrame, timestamp_ms: int) -> Any:
        """Run VIDEO-mode detection on an RGB frame

        Returns:
            FaceLandmarkerResult with ``face_blendshapes`` and ``face_landmarks``

        Raises:
            LandmarkerError: If the model is not loaded or already closed
        """
        with self._lock:
            if self.landmarker is None:
                raise LandmarkerError("FaceLandmarker is not loaded")
            image = mp.Image(image_format=mp.ImageFormat.SRGB, data=frame.image)
            return self.landmarker.detect_for_video(image, timestamp_ms)

    def close(self) -> None:
        """Release the model (idempotent)"""
        with self._lock:
            if self.landmarker is None:
                return
            self.landmarker.close()
            self.landmarker = None
        logger.info("FaceLandmarker closed")

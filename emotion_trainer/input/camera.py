"""Camera capture on OpenCV"""

import logging
import threading
import time
from typing import Optional

import cv2
import numpy as np

from emotion_trainer.models.frames import VideoFrame
from emotion_trainer.models.interfaces import CameraSource


logger = logging.getLogger(__name__)


class CameraError(Exception):
    """Exception raised when the camera cannot be opened"""
    pass


class CameraCapture(CameraSource):
    """Webcam capture through ``cv2.VideoCapture``.

    Frames are converted from OpenCV's BGR to RGB. The most recent frame is
    kept in ``latest_frame`` for preview rendering.

    Attributes:
        device: Camera index or stream URL
        width: Requested capture width (pixels)
        height: Requested capture height (pixels)
        latest_frame: Last frame read, if any
    """

    def __init__(self, device=0, width: int = 640, height: int = 360):
        self.device = device
        self.width = width
        self.height = height
        self.latest_frame: Optional[VideoFrame] = None

        self._capture: Optional[cv2.VideoCapture] = None
        self._frame_count = 0
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, cfg) -> "CameraCapture":
        return cls(
            device=cfg.get('camera.index', 0),
            width=cfg.get('camera.width', 640),
            height=cfg.get('camera.height', 360)
        )

    def start(self) -> None:
        """Open the camera device

        Raises:
            CameraError: If the device cannot be opened
        """
        with self._lock:
            if self._capture is not None:
                return

            capture = cv2.VideoCapture(self.device)
            if not capture.isOpened():
                capture.release()
                raise CameraError(f"Cannot open camera {self.device!r}")

            capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
            capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
            self._capture = capture
            self._frame_count = 0

        logger.info(f"Camera {self.device!r} opened at {self.width}x{self.height}")

    def stop(self) -> None:
        """Release the camera (idempotent)"""
        with self._lock:
            if self._capture is None:
                return
            self._capture.release()
            self._capture = None
        logger.info(f"Camera {self.device!r} released")

    def is_ready(self) -> bool:
        capture = self._capture
        return capture is not None and capture.isOpened()

    def read_frame(self) -> Optional[VideoFrame]:
        """Read the next frame as RGB

        Returns:
            VideoFrame or None if the camera is closed or the read failed
        """
        with self._lock:
            if self._capture is None:
                return None
            ok, bgr = self._capture.read()
            if not ok or bgr is None:
                return None

            rgb = np.ascontiguousarray(cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB))
            frame = VideoFrame(
                image=rgb,
                timestamp=time.monotonic(),
                frame_number=self._frame_count
            )
            self._frame_count += 1

        self.latest_frame = frame
        return frame

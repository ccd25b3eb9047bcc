"""Data model for captured video frames"""

from dataclasses import dataclass
import numpy as np


@dataclass
class VideoFrame:
    """A single frame sampled from the camera

    Attributes:
        image: RGB image as numpy array (H, W, 3)
        timestamp: Seconds on the monotonic clock when the frame was read
        frame_number: Sequential frame number since the camera started
    """
    image: np.ndarray    # RGB image (H, W, 3)
    timestamp: float
    frame_number: int

    def __post_init__(self):
        """Validate video frame data integrity.

        The inference backend expects a contiguous RGB image, so shape is
        checked at construction rather than inside the per-frame hot path.

        Raises:
            AssertionError: If any validation check fails
        """
        assert self.timestamp >= 0, "Timestamp must be non-negative"
        assert self.frame_number >= 0, "Frame number must be non-negative"
        assert isinstance(self.image, np.ndarray), "Image must be numpy array"
        assert len(self.image.shape) == 3, "Image must be 3D array (H, W, C)"
        assert self.image.shape[2] == 3, "Image must have 3 channels (RGB)"

    @property
    def resolution(self) -> tuple:
        """(width, height) of the frame"""
        return (self.image.shape[1], self.image.shape[0])

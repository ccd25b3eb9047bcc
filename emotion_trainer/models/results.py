"""Data models for estimation results"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional
import numpy as np


@dataclass(frozen=True)
class EstimationResult:
    """Output of one full scoring cycle

    Attributes:
        top_emotion: Category with the highest normalized score
        top_score: Normalized score of the top category [0, 1]
        scores: Read-only score distribution, one entry per category,
                summing to 1.0. e.g., {"happy": 0.8, "sad": 0.0, ..., "neutral": 0.2}
        timestamp: When this result was produced (seconds)
        face_detected: Whether the frame carried blendshapes for a face
        face_landmarks: (N, 2) array of normalized landmark points, if any
    """
    top_emotion: str
    top_score: float
    scores: Mapping[str, float]
    timestamp: float = 0.0
    face_detected: bool = False
    face_landmarks: Optional[np.ndarray] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        """Validate result data and freeze the distribution"""
        object.__setattr__(self, 'scores', MappingProxyType(dict(self.scores)))
        assert self.top_emotion in self.scores, "Top emotion must be in the distribution"
        assert 0.0 <= self.top_score <= 1.0, "Top score must be in [0, 1]"
        assert self.timestamp >= 0, "Timestamp must be non-negative"
        for emotion, score in self.scores.items():
            assert 0.0 <= score <= 1.0, f"Emotion score for {emotion} must be in [0, 1]"

    def to_dict(self) -> Dict[str, Any]:
        """Plain-dict snapshot for logging and decision records"""
        return {
            "top_emotion": self.top_emotion,
            "top_score": self.top_score,
            "scores": dict(self.scores),
            "timestamp": self.timestamp,
            "face_detected": self.face_detected,
        }

    def describe(self) -> str:
        """Short label such as 'happy (80.5%)'"""
        return f"{self.top_emotion} ({self.top_score * 100:.1f}%)"

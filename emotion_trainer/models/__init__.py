"""Data models and interfaces"""

from emotion_trainer.models.frames import VideoFrame
from emotion_trainer.models.results import EstimationResult
from emotion_trainer.models.enums import EmotionCategory, EstimatorState
from emotion_trainer.models.interfaces import CameraSource, FaceInferenceBackend
from emotion_trainer.models.lessons import (
    Choice,
    NarrationLesson,
    ChoiceLesson,
    TrainingModule,
    DecisionRecord
)

__all__ = [
    # Frames
    "VideoFrame",
    # Results
    "EstimationResult",
    # Enums
    "EmotionCategory",
    "EstimatorState",
    # Interfaces
    "CameraSource",
    "FaceInferenceBackend",
    # Lessons
    "Choice",
    "NarrationLesson",
    "ChoiceLesson",
    "TrainingModule",
    "DecisionRecord",
]

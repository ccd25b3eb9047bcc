"""Enumerations for emotion categories and estimator lifecycle"""

from enum import Enum


class EmotionCategory(str, Enum):
    """Closed set of emotion categories

    Declaration order is the canonical category order: distributions are
    emitted in this order and ties for the top category go to the earliest
    member.
    """
    HAPPY = "happy"
    SAD = "sad"
    ANGRY = "angry"
    SURPRISED = "surprised"
    DISGUSTED = "disgusted"
    FEARFUL = "fearful"
    NEUTRAL = "neutral"

    @classmethod
    def names(cls) -> list:
        """Category values in canonical order"""
        return [category.value for category in cls]


class EstimatorState(Enum):
    """Lifecycle of the continuous estimation loop"""
    IDLE = "idle"
    INITIALIZING = "initializing"
    RUNNING = "running"
    STOPPED = "stopped"

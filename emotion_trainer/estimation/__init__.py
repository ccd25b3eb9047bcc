"""Continuous estimation loop and its shared result slot"""

from emotion_trainer.estimation.result_slot import ResultSlot
from emotion_trainer.estimation.frame_clock import FrameClock
from emotion_trainer.estimation.estimator import EmotionEstimator, EstimatorInitializationError

__all__ = ['ResultSlot', 'FrameClock', 'EmotionEstimator', 'EstimatorInitializationError']

"""Emotion-aware training application with a real-time blendshape emotion estimator"""

__version__ = "0.1.0"

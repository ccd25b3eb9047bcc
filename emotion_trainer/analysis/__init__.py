"""Blendshape normalization and emotion scoring"""

from emotion_trainer.analysis.blendshapes import normalize_blendshapes, extract_landmarks
from emotion_trainer.analysis.weights import WeightTable, load_weight_table
from emotion_trainer.analysis.scoring import EmotionScorer, normalize_scores, renormalize, select_top

__all__ = [
    'normalize_blendshapes',
    'extract_landmarks',
    'WeightTable',
    'load_weight_table',
    'EmotionScorer',
    'normalize_scores',
    'renormalize',
    'select_top',
]

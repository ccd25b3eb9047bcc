"""Emotion Scorer and Score Normalizer

Turns a blendshape signal mapping into an emotion distribution:

1. Raw score per weighted category: the weighted sum of its blendshapes,
   floored at 0 (a category cannot have negative evidence).
2. Neutral is derived from total activation:
   ``max(0, 1 - min(1, total / max(eps, n)))`` with n the number of categories.
3. All scores are divided by their sum (0 is treated as 1).

The scorer holds no category names of its own; everything it knows about
emotions comes from the injected WeightTable.
"""

import logging
import time
from typing import Any, Dict, Mapping, Optional, Tuple

from emotion_trainer.analysis.blendshapes import normalize_blendshapes, extract_landmarks, has_face
from emotion_trainer.analysis.weights import WeightTable, load_weight_table
from emotion_trainer.models.enums import EmotionCategory
from emotion_trainer.models.results import EstimationResult


logger = logging.getLogger(__name__)

DEFAULT_NEUTRAL_EPSILON = 1e-4


def score_categories(signal: Mapping[str, float], weights: WeightTable) -> Dict[str, float]:
    """Compute raw, pre-normalization scores for every weighted category.

    Args:
        signal: Blendshape name -> intensity; absent names contribute 0
        weights: Weight table

    Returns:
        Category -> raw score >= 0, for every category with a non-empty row
    """
    raw = {}
    for category, category_weights in weights.items():
        if not category_weights:
            continue
        score = 0.0
        for name, weight in category_weights.items():
            score += weight * signal.get(name, 0.0)
        raw[category] = max(0.0, score)
    return raw


def estimate_neutral(raw_scores: Mapping[str, float], category_count: int,
                     epsilon: float = DEFAULT_NEUTRAL_EPSILON) -> float:
    """Neutral evidence as an inverse of total activation, saturating at 0"""
    total = sum(raw_scores.values())
    return max(0.0, 1.0 - min(1.0, total / max(epsilon, category_count)))


def renormalize(scores: Mapping[str, float]) -> Dict[str, float]:
    """Divide every score by the total so the distribution sums to 1"""
    total = sum(scores.values())
    if total == 0:
        total = 1.0
    return {category: score / total for category, score in scores.items()}


def normalize_scores(raw_scores: Mapping[str, float], category_count: int,
                     epsilon: float = DEFAULT_NEUTRAL_EPSILON) -> Dict[str, float]:
    """Build the complete distribution, neutral included, from raw scores.

    Args:
        raw_scores: Non-neutral category -> raw score (>= 0)
        category_count: Number of categories, neutral included
        epsilon: Floor on the divisor when category_count is degenerate

    Returns:
        Category -> probability, in canonical category order, summing to 1.0
    """
    neutral = estimate_neutral(raw_scores, category_count, epsilon)

    scores = {}
    for category in EmotionCategory.names():
        if category == EmotionCategory.NEUTRAL.value:
            scores[category] = neutral
        else:
            scores[category] = raw_scores.get(category, 0.0)

    return renormalize(scores)


def select_top(scores: Mapping[str, float]) -> Tuple[str, float]:
    """Highest-scoring category; ties go to the first in iteration order"""
    top_emotion, top_score = EmotionCategory.NEUTRAL.value, 0.0
    first = True
    for category, score in scores.items():
        if first or score > top_score:
            top_emotion, top_score = category, score
            first = False
    return top_emotion, top_score


class EmotionScorer:
    """Scores blendshape signals against an injected weight table.

    Attributes:
        weights: Immutable weight table
        epsilon: Divisor floor for the neutral estimate
        category_count: Number of categories the neutral estimate divides by
    """

    def __init__(self, weights: Optional[WeightTable] = None,
                 epsilon: float = DEFAULT_NEUTRAL_EPSILON):
        self.weights = weights if weights is not None else WeightTable.from_preset("tuned")
        self.epsilon = epsilon
        self.category_count = len(self.weights)

    @classmethod
    def from_config(cls, cfg) -> "EmotionScorer":
        """Build a scorer from the `emotion.*` config section"""
        weights = load_weight_table(
            preset=cfg.get('emotion.weight_preset', 'tuned'),
            weights_path=cfg.resolve_path('emotion.weights_path')
        )
        return cls(weights, epsilon=cfg.get('emotion.neutral_epsilon', DEFAULT_NEUTRAL_EPSILON))

    def raw_scores(self, signal: Mapping[str, float]) -> Dict[str, float]:
        return score_categories(signal, self.weights)

    def score(self, signal: Mapping[str, float]) -> Dict[str, float]:
        """Full normalized distribution for a signal mapping"""
        return normalize_scores(self.raw_scores(signal), self.category_count, self.epsilon)

    def estimate(self, inference_result: Any, timestamp: Optional[float] = None) -> EstimationResult:
        """Run normalize -> score -> renormalize on a raw landmarker result.

        Args:
            inference_result: Anything normalize_blendshapes accepts; None
                              means no face and yields a neutral-leaning result
            timestamp: Result timestamp in seconds (defaults to time.time())

        Returns:
            EstimationResult with the full distribution
        """
        signal = normalize_blendshapes(inference_result)
        scores = self.score(signal)
        top_emotion, top_score = select_top(scores)

        result = EstimationResult(
            top_emotion=top_emotion,
            top_score=top_score,
            scores=scores,
            timestamp=time.time() if timestamp is None else timestamp,
            face_detected=has_face(inference_result),
            face_landmarks=extract_landmarks(inference_result)
        )

        logger.debug(f"Estimate: {result.describe()}")
        return result

"""Unit tests for the emotion scorer and score normalizer"""

import pytest

from emotion_trainer.analysis.scoring import (
    EmotionScorer,
    estimate_neutral,
    normalize_scores,
    renormalize,
    score_categories,
    select_top
)
from emotion_trainer.analysis.weights import WeightTable
from emotion_trainer.models.enums import EmotionCategory
from emotion_trainer.models.results import EstimationResult
from conftest import SMILE, make_landmarker_result


@pytest.fixture
def scorer():
    return EmotionScorer()


def test_full_smile_scores_happy(scorer):
    """Test the reference case: both smile blendshapes at 1.0, everything else 0"""
    raw = scorer.raw_scores(SMILE)

    assert raw["happy"] == pytest.approx(2.6)
    # inhibited by the smile, floored at zero
    assert raw["angry"] == 0.0

    scores = scorer.score(SMILE)
    neutral = 1 - 2.6 / 7
    total = 2.6 + neutral
    assert scores["happy"] == pytest.approx(2.6 / total)
    assert scores["happy"] == pytest.approx(0.805, abs=1e-3)
    assert scores["neutral"] == pytest.approx(neutral / total)
    assert sum(scores.values()) == pytest.approx(1.0)
    assert select_top(scores)[0] == "happy"
    assert all(scores["happy"] > v for k, v in scores.items() if k != "happy")


def test_empty_signal_is_fully_neutral(scorer):
    scores = scorer.score({})

    assert scores["neutral"] == pytest.approx(1.0)
    for category in EmotionCategory.names()[:-1]:
        assert scores[category] == 0.0


def test_scores_in_canonical_order(scorer):
    assert list(scorer.score(SMILE)) == EmotionCategory.names()


def test_score_categories_skips_unweighted_and_floors():
    weights = WeightTable({"happy": {"a": 1.0}, "sad": {"a": -2.0}})
    raw = score_categories({"a": 0.5}, weights)

    assert set(raw) == {"happy", "sad"}
    assert raw["happy"] == pytest.approx(0.5)
    assert raw["sad"] == 0.0


def test_score_categories_follows_table_rows_only():
    """Test that only categories with weight rows are scored"""
    weights = WeightTable({"surprised": {"jawOpen": 1.0}})
    raw = score_categories({"jawOpen": 1.0, "mouthSmileLeft": 1.0}, weights)

    assert raw == {"surprised": pytest.approx(1.0)}
    assert normalize_scores(raw, 7)["happy"] == 0.0


def test_absent_blendshapes_contribute_zero():
    weights = WeightTable({"happy": {"mouthSmileLeft": 1.0, "notInSignal": 5.0}})

    assert score_categories({"mouthSmileLeft": 0.4}, weights)["happy"] == pytest.approx(0.4)


def test_estimate_neutral_saturates_at_zero():
    assert estimate_neutral({"happy": 10.0}, 7) == 0.0
    assert estimate_neutral({"happy": 3.5}, 7) == pytest.approx(0.5)
    assert estimate_neutral({}, 7) == 1.0


def test_estimate_neutral_guards_zero_count():
    """Test that a degenerate category count falls back to the epsilon divisor"""
    assert estimate_neutral({"happy": 0.0}, 0) == 1.0
    assert estimate_neutral({"happy": 1.0}, 0) == 0.0


def test_renormalize_zero_total():
    """Test that an all-zero distribution is left at zero rather than dividing by zero"""
    assert renormalize({"happy": 0.0, "sad": 0.0}) == {"happy": 0.0, "sad": 0.0}


def test_normalize_scores_fills_missing_categories():
    scores = normalize_scores({"sad": 1.0}, 7)

    assert set(scores) == set(EmotionCategory.names())
    assert scores["happy"] == 0.0
    assert sum(scores.values()) == pytest.approx(1.0)


def test_select_top_tie_goes_to_first():
    """Test that ties resolve to the earliest category"""
    scores = {"happy": 0.4, "sad": 0.4, "neutral": 0.2}

    assert select_top(scores) == ("happy", 0.4)


def test_select_top_all_zero_returns_first():
    scores = dict.fromkeys(EmotionCategory.names(), 0.0)

    assert select_top(scores) == ("happy", 0.0)


def test_estimate_from_landmarker_result(scorer):
    result = scorer.estimate(make_landmarker_result(SMILE, landmarks=[(0.5, 0.5)]), timestamp=12.5)

    assert isinstance(result, EstimationResult)
    assert result.top_emotion == "happy"
    assert result.top_score == pytest.approx(result.scores["happy"])
    assert result.timestamp == 12.5
    assert result.face_detected is True
    assert result.face_landmarks.shape == (1, 2)


def test_estimate_without_face_is_neutral(scorer):
    result = scorer.estimate(make_landmarker_result(None))

    assert result.top_emotion == "neutral"
    assert result.top_score == pytest.approx(1.0)
    assert result.face_detected is False
    assert result.face_landmarks is None
    assert result.timestamp > 0


def test_estimate_surprise():
    scorer = EmotionScorer()
    result = scorer.estimate({"eyeWideLeft": 1.0, "eyeWideRight": 1.0, "browInnerUp": 1.0, "jawOpen": 1.0})

    assert result.top_emotion == "surprised"


def test_scorer_uses_injected_table():
    """Test that scoring follows the injected table, not the default preset"""
    table = WeightTable({"sad": {"jawOpen": 1.0}})
    scorer = EmotionScorer(table)

    assert scorer.category_count == 7
    assert scorer.estimate({"jawOpen": 1.0}).top_emotion == "sad"


def test_scorer_from_config(tmp_path):
    from emotion_trainer.config.config_loader import Config

    path = tmp_path / "config.yaml"
    path.write_text("emotion:\n  weight_preset: basic\n  neutral_epsilon: 0.001\n")
    scorer = EmotionScorer.from_config(Config(str(path)))

    assert scorer.epsilon == pytest.approx(0.001)
    assert "mouthOpen" in scorer.weights["happy"]

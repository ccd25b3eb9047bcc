"""Unit tests for the blendshape normalizer

Covers the accepted result layouts, the fallback order between them, and
tolerance of malformed payloads.
"""

import math
from types import SimpleNamespace

import numpy as np
import pytest

from emotion_trainer.analysis.blendshapes import (
    MEDIAPIPE_BLENDSHAPE_NAMES,
    extract_landmarks,
    has_face,
    normalize_blendshapes
)
from conftest import make_landmarker_result


def test_blendshape_names_match_mediapipe_order():
    """Test that the canonical list has MediaPipe's 52 names, neutral first"""
    assert len(MEDIAPIPE_BLENDSHAPE_NAMES) == 52
    assert len(set(MEDIAPIPE_BLENDSHAPE_NAMES)) == 52
    assert MEDIAPIPE_BLENDSHAPE_NAMES[0] == "_neutral"
    assert MEDIAPIPE_BLENDSHAPE_NAMES[-1] == "noseSneerRight"


@pytest.mark.parametrize("result", [None, {}, [], SimpleNamespace(face_blendshapes=[])])
def test_missing_face_yields_all_zero_signal(result):
    """Test that an absent face reads as an all-zero signal, not an error"""
    signal = normalize_blendshapes(result)

    assert set(signal) == set(MEDIAPIPE_BLENDSHAPE_NAMES)
    assert all(value == 0.0 for value in signal.values())


def test_landmarker_result_objects():
    """Test reading MediaPipe Category-like objects from face_blendshapes[0]"""
    result = make_landmarker_result({"mouthSmileLeft": 0.8, "jawOpen": 0.25})
    signal = normalize_blendshapes(result)

    assert signal["mouthSmileLeft"] == pytest.approx(0.8)
    assert signal["jawOpen"] == pytest.approx(0.25)
    assert signal["browInnerUp"] == 0.0


def test_only_first_face_is_read():
    """Test that additional faces are ignored"""
    first = [SimpleNamespace(category_name="jawOpen", score=0.3)]
    second = [SimpleNamespace(category_name="jawOpen", score=0.9)]
    result = SimpleNamespace(face_blendshapes=[first, second])

    assert normalize_blendshapes(result)["jawOpen"] == pytest.approx(0.3)


def test_camel_case_dict_layout():
    """Test the JSON-style layout with faceBlendshapes/categoryName keys"""
    result = {
        "faceBlendshapes": [
            {"categories": [
                {"categoryName": "eyeWideLeft", "score": 0.6},
                {"categoryName": "eyeWideRight", "score": 0.4},
            ]}
        ]
    }
    signal = normalize_blendshapes(result)

    assert signal["eyeWideLeft"] == pytest.approx(0.6)
    assert signal["eyeWideRight"] == pytest.approx(0.4)


def test_nested_categories_object():
    """Test a per-face object carrying a nested categories sequence"""
    face = SimpleNamespace(categories=[SimpleNamespace(name="cheekPuff", value=0.5)])
    signal = normalize_blendshapes(SimpleNamespace(face_blendshapes=[face]))

    assert signal["cheekPuff"] == pytest.approx(0.5)


def test_flat_mapping_layout():
    """Test a flat name -> value mapping, including names outside the MediaPipe set"""
    signal = normalize_blendshapes({"noseSneerLeft": 0.7, "upperLipRaiseLeft": 0.2})

    assert signal["noseSneerLeft"] == pytest.approx(0.7)
    assert signal["upperLipRaiseLeft"] == pytest.approx(0.2)
    assert len(signal) == 53


def test_numeric_vector_is_read_positionally():
    """Test that a bare score vector maps onto the MediaPipe name order"""
    vector = np.zeros(52, dtype=np.float32)
    vector[MEDIAPIPE_BLENDSHAPE_NAMES.index("mouthSmileRight")] = 0.9
    signal = normalize_blendshapes(SimpleNamespace(face_blendshapes=[vector]))

    assert signal["mouthSmileRight"] == pytest.approx(0.9)
    assert signal["mouthSmileLeft"] == 0.0


def test_values_are_clamped_and_sanitized():
    """Test that out-of-range, NaN and non-numeric scores are coerced into [0, 1]"""
    signal = normalize_blendshapes({
        "jawOpen": 1.7,
        "mouthPucker": -0.4,
        "cheekPuff": float("nan"),
        "eyeBlinkLeft": "high",
        "eyeBlinkRight": True,
    })

    assert signal["jawOpen"] == 1.0
    assert signal["mouthPucker"] == 0.0
    assert signal["cheekPuff"] == 0.0
    assert signal["eyeBlinkLeft"] == 0.0
    assert signal["eyeBlinkRight"] == 0.0
    assert all(0.0 <= v <= 1.0 and not math.isnan(v) for v in signal.values())


def test_entries_without_names_are_skipped():
    """Test that malformed entries do not abort the rest of the face"""
    face = [
        SimpleNamespace(score=0.5),
        {"category_name": "", "score": 0.5},
        {"category_name": "jawOpen", "score": 0.4},
    ]
    signal = normalize_blendshapes({"face_blendshapes": [face]})

    assert signal["jawOpen"] == pytest.approx(0.4)
    assert "" not in signal


def test_unsupported_payload_never_raises():
    """Test that an arbitrary object reads as an empty signal"""
    signal = normalize_blendshapes(object())

    assert all(value == 0.0 for value in signal.values())


def test_has_face():
    """Test face detection from blendshape presence"""
    assert has_face(make_landmarker_result({"jawOpen": 0.1}))
    assert not has_face(make_landmarker_result(None))
    assert not has_face(None)
    assert not has_face(SimpleNamespace(face_blendshapes=[[]]))


def test_extract_landmarks():
    """Test landmark extraction into an (N, 2) array"""
    result = make_landmarker_result({"jawOpen": 0.1}, landmarks=[(0.1, 0.2), (0.5, 0.5), (0.9, 0.8)])
    points = extract_landmarks(result)

    assert points.shape == (3, 2)
    assert points.dtype == np.float32
    assert points[1, 0] == pytest.approx(0.5)


def test_extract_landmarks_missing():
    """Test that absent landmarks give None"""
    assert extract_landmarks(make_landmarker_result({"jawOpen": 0.1})) is None
    assert extract_landmarks(None) is None
    assert extract_landmarks({"face_landmarks": [[{"x": 0.1}]]}) is None

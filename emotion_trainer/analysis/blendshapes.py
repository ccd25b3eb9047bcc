"""Blendshape Normalizer

Converts whatever shape the face landmarker hands back into a flat mapping
from blendshape name to intensity in [0, 1]. The upstream layout is not
stable across call sites and library versions, so every accessor here is
tolerant: absent or malformed data reads as an all-zero signal, never as
an error.
"""

import logging
import math
from numbers import Real
from typing import Any, Dict, Iterable, Optional
import numpy as np


logger = logging.getLogger(__name__)


# MediaPipe FaceLandmarker blendshapes, in the order the model emits them
MEDIAPIPE_BLENDSHAPE_NAMES = (
    "_neutral",
    "browDownLeft",
    "browDownRight",
    "browInnerUp",
    "browOuterUpLeft",
    "browOuterUpRight",
    "cheekPuff",
    "cheekSquintLeft",
    "cheekSquintRight",
    "eyeBlinkLeft",
    "eyeBlinkRight",
    "eyeLookDownLeft",
    "eyeLookDownRight",
    "eyeLookInLeft",
    "eyeLookInRight",
    "eyeLookOutLeft",
    "eyeLookOutRight",
    "eyeLookUpLeft",
    "eyeLookUpRight",
    "eyeSquintLeft",
    "eyeSquintRight",
    "eyeWideLeft",
    "eyeWideRight",
    "jawForward",
    "jawLeft",
    "jawOpen",
    "jawRight",
    "mouthClose",
    "mouthDimpleLeft",
    "mouthDimpleRight",
    "mouthFrownLeft",
    "mouthFrownRight",
    "mouthFunnel",
    "mouthLeft",
    "mouthLowerDownLeft",
    "mouthLowerDownRight",
    "mouthPressLeft",
    "mouthPressRight",
    "mouthPucker",
    "mouthRight",
    "mouthRollLower",
    "mouthRollUpper",
    "mouthShrugLower",
    "mouthShrugUpper",
    "mouthSmileLeft",
    "mouthSmileRight",
    "mouthStretchLeft",
    "mouthStretchRight",
    "mouthUpperUpLeft",
    "mouthUpperUpRight",
    "noseSneerLeft",
    "noseSneerRight",
)

_NAME_KEYS = ("category_name", "categoryName", "name")
_SCORE_KEYS = ("score", "value")


def _field(item: Any, keys: Iterable[str]) -> Any:
    """First present attribute or key among `keys`, else None"""
    for key in keys:
        if isinstance(item, dict):
            if key in item:
                return item[key]
        elif hasattr(item, key):
            return getattr(item, key)
    return None


def _to_intensity(value: Any) -> float:
    """Coerce a raw score into [0, 1]; anything non-numeric reads as 0"""
    if isinstance(value, bool) or not isinstance(value, (Real, np.number)):
        return 0.0
    value = float(value)
    if math.isnan(value):
        return 0.0
    return min(1.0, max(0.0, value))


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple, np.ndarray))


def _first_face(result: Any) -> Any:
    """Pick the first face's blendshape payload out of a landmarker result"""
    if result is None:
        return None

    faces = _field(result, ("face_blendshapes", "faceBlendshapes"))
    if faces is None:
        # Already a per-face payload
        return result

    if _is_sequence(faces) and len(faces) > 0:
        return faces[0]
    return None


def _read_entries(entries: Iterable[Any], signal: Dict[str, float]) -> None:
    for entry in entries:
        name = _field(entry, _NAME_KEYS)
        if not isinstance(name, str) or not name:
            continue
        signal[name] = _to_intensity(_field(entry, _SCORE_KEYS))


def _read_vector(values: Any, signal: Dict[str, float]) -> None:
    for name, value in zip(MEDIAPIPE_BLENDSHAPE_NAMES, values):
        signal[name] = _to_intensity(value)


def _is_numeric_vector(values: Any) -> bool:
    if isinstance(values, np.ndarray):
        return values.ndim == 1 and np.issubdtype(values.dtype, np.number)
    return len(values) > 0 and all(
        isinstance(v, (Real, np.number)) and not isinstance(v, bool) for v in values
    )


def normalize_blendshapes(result: Any) -> Dict[str, float]:
    """Flatten a face landmarker result into a blendshape signal mapping.

    Fallback order for the first face's payload:
    1. a sequence of {name, score} entries (MediaPipe ``Category`` objects or dicts)
    2. an object or dict with a nested ``categories`` sequence
    3. a flat name -> value mapping

    A bare numeric sequence is read positionally in MediaPipe's blendshape order.

    Args:
        result: FaceLandmarkerResult, dict, or per-face payload. May be None.

    Returns:
        Mapping containing every MediaPipe blendshape name (0.0 when absent)
        plus any extra names present in the input, values clamped to [0, 1].
    """
    signal = dict.fromkeys(MEDIAPIPE_BLENDSHAPE_NAMES, 0.0)

    try:
        face = _first_face(result)
        if face is None:
            return signal

        if _is_sequence(face):
            if _is_numeric_vector(face):
                _read_vector(face, signal)
            else:
                _read_entries(face, signal)
            return signal

        categories = _field(face, ("categories",))
        if _is_sequence(categories):
            _read_entries(categories, signal)
            return signal

        if isinstance(face, dict):
            for name, value in face.items():
                if isinstance(name, str):
                    signal[name] = _to_intensity(value)

    except Exception as e:
        # Partial reads are kept; a broken payload must never stop the loop
        logger.debug(f"Malformed blendshape payload ignored: {e}")

    return signal


def extract_landmarks(result: Any) -> Optional[np.ndarray]:
    """Extract the first face's landmark points.

    Args:
        result: FaceLandmarkerResult or dict with ``face_landmarks``/``faceLandmarks``

    Returns:
        (N, 2) float32 array of normalized (x, y) points, or None if the
        result carries no usable landmarks
    """
    try:
        faces = _field(result, ("face_landmarks", "faceLandmarks"))
        if not _is_sequence(faces) or len(faces) == 0:
            return None

        points = []
        for landmark in faces[0]:
            x = _field(landmark, ("x",))
            y = _field(landmark, ("y",))
            if x is None or y is None:
                continue
            points.append([float(x), float(y)])

        if not points:
            return None
        return np.array(points, dtype=np.float32)

    except Exception as e:
        logger.debug(f"Malformed landmark payload ignored: {e}")
        return None


def has_face(result: Any) -> bool:
    """Whether the result carries a non-empty blendshape payload for a face"""
    try:
        face = _first_face(result)
        if face is None:
            return False
        if _is_sequence(face) or isinstance(face, dict):
            return len(face) > 0
        categories = _field(face, ("categories",))
        return _is_sequence(categories) and len(categories) > 0
    except Exception:
        return False

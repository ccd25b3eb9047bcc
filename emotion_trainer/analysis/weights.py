"""Weight tables mapping blendshape signals to emotion evidence

A weight table is a hand-tuned linear model: for each emotion category, a
mapping from blendshape name to a signed weight. Negative weights are
inhibitory, e.g. a smile suppresses "angry". Tables are data and are frozen
on construction.
"""

import logging
from pathlib import Path
from types import MappingProxyType
from collections.abc import Mapping
from typing import Iterator, Optional
import yaml

from emotion_trainer.models.enums import EmotionCategory


logger = logging.getLogger(__name__)


# Tuned against the training cohort; the default.
TUNED_WEIGHTS = {
    "happy": {
        "mouthSmileLeft": 1.3,
        "mouthSmileRight": 1.3,
        "eyeSquintLeft": 0.9,
        "eyeSquintRight": 0.9,
        "mouthPressLeft": 0.8,
        "mouthPressRight": 0.8,
        "browOuterUpLeft": 0.7,
        "browOuterUpRight": 0.7,
        "mouthDimpleLeft": 0.5,
        "mouthDimpleRight": 0.5,
    },
    "sad": {
        "mouthShrugLower": 1.3,
        "mouthShrugUpper": 1.0,
        "browInnerUp": 0.7,
        "browDownLeft": 0.6,
        "browDownRight": 0.6,
        "eyeSquintLeft": 0.8,
        "eyeSquintRight": 0.8,
        "mouthPressLeft": 0.7,
        "mouthPressRight": 0.5,
        "mouthFrownLeft": 0.3,
        "mouthFrownRight": 0.3,
    },
    "angry": {
        "mouthPucker": 1.2,
        "eyeSquintLeft": 0.8,
        "eyeSquintRight": 0.8,
        "browDownLeft": 0.7,
        "browDownRight": 0.7,
        "jawForward": 0.6,
        "noseSneerLeft": 0.3,
        "noseSneerRight": 0.3,
        "eyeWideLeft": -0.7,
        "eyeWideRight": -0.7,
        "mouthSmileLeft": -1.0,
        "mouthSmileRight": -1.0,
    },
    "surprised": {
        "eyeWideLeft": 1.0,
        "eyeWideRight": 1.0,
        "browInnerUp": 0.8,
        "browOuterUpLeft": 0.5,
        "browOuterUpRight": 0.5,
        "jawOpen": 0.8,
        "mouthPucker": -0.6,
    },
    "disgusted": {
        "noseSneerLeft": 1.0,
        "noseSneerRight": 1.0,
        "upperLipRaiseLeft": 0.7,
        "upperLipRaiseRight": 0.7,
        "mouthPucker": 0.3,
        "eyeSquintLeft": 0.3,
        "eyeSquintRight": 0.3,
    },
    "fearful": {
        "eyeWideLeft": 0.9,
        "eyeWideRight": 0.9,
        "browInnerUp": 0.7,
        "mouthStretchLeft": 0.5,
        "mouthStretchRight": 0.5,
        "jawOpen": 0.5,
        "mouthPucker": 0.2,
    },
    "neutral": {},
}

# Few high-signal blendshapes per emotion; used by the live preview.
BASIC_WEIGHTS = {
    "happy": {
        "mouthSmileLeft": 1.0,
        "mouthSmileRight": 1.0,
        "mouthOpen": 0.2,
    },
    "sad": {
        "mouthFrownLeft": 0.9,
        "mouthFrownRight": 0.9,
        "browInnerUp": 0.4,
    },
    "angry": {
        "browDownLeft": 0.9,
        "browDownRight": 0.9,
        "noseSneerLeft": 0.3,
        "noseSneerRight": 0.3,
    },
    "surprised": {
        "eyesWideLeft": 0.9,
        "eyesWideRight": 0.9,
        "mouthOpen": 0.8,
    },
    "disgusted": {
        "noseSneerLeft": 0.9,
        "noseSneerRight": 0.9,
        "mouthFunnel": 0.2,
    },
    "fearful": {
        "eyesWideLeft": 0.6,
        "eyesWideRight": 0.6,
        "browInnerUp": 0.6,
        "mouthOpen": 0.4,
    },
    "neutral": {},
}

PRESETS = {
    "tuned": TUNED_WEIGHTS,
    "basic": BASIC_WEIGHTS,
}


class WeightTable(Mapping):
    """Immutable category -> (blendshape -> weight) table.

    Categories are stored in canonical EmotionCategory order. Neutral is
    always present with no weights: its score is derived, never weighted.

    Raises:
        ValueError: On unknown categories, non-empty neutral weights or
                    non-numeric weights
    """

    def __init__(self, weights: Mapping[str, Mapping[str, float]]):
        unknown = set(weights) - set(EmotionCategory.names())
        if unknown:
            raise ValueError(f"Unknown emotion categories in weight table: {sorted(unknown)}")

        if weights.get(EmotionCategory.NEUTRAL.value):
            raise ValueError("Neutral is derived from total activation and cannot carry weights")

        table = {}
        for category in EmotionCategory.names():
            entries = weights.get(category) or {}
            frozen = {}
            for name, weight in entries.items():
                if isinstance(weight, bool) or not isinstance(weight, (int, float)):
                    raise ValueError(f"Weight for {category}.{name} must be a number, got {weight!r}")
                frozen[str(name)] = float(weight)
            table[category] = MappingProxyType(frozen)

        self._table = MappingProxyType(table)

    def __getitem__(self, category: str) -> Mapping[str, float]:
        return self._table[category]

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        sizes = ", ".join(f"{k}={len(v)}" for k, v in self._table.items())
        return f"WeightTable({sizes})"

    @classmethod
    def from_preset(cls, name: str) -> "WeightTable":
        if name not in PRESETS:
            raise ValueError(f"Unknown weight preset: {name}")
        return cls(PRESETS[name])

    @classmethod
    def from_yaml(cls, path: Path) -> "WeightTable":
        """Load a table from a YAML file shaped like TUNED_WEIGHTS"""
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Weight table in {path} must be a mapping")
        logger.info(f"Loaded weight table from {path}")
        return cls(data)


def load_weight_table(preset: str = "tuned", weights_path: Optional[Path] = None) -> WeightTable:
    """Build the weight table from a YAML override or a named preset"""
    if weights_path is not None:
        return WeightTable.from_yaml(Path(weights_path))
    return WeightTable.from_preset(preset)

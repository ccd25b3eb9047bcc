#!/usr/bin/env python3
"""Download the MediaPipe face landmarker model used by the emotion estimator"""

import sys
import urllib.request
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from emotion_trainer.config.config_loader import config  # noqa: E402


MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/"
    "face_landmarker/face_landmarker/float16/1/face_landmarker.task"
)


def download_face_landmarker(force: bool = False) -> bool:
    """Download the face landmarker task bundle to estimator.model_path"""
    print("Downloading face landmarker model...")
    output_path = config.resolve_path('estimator.model_path', 'models/face_landmarker.task')

    if output_path.exists() and not force:
        print(f"  ✓ Already present at {output_path}")
        return True

    output_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        urllib.request.urlretrieve(MODEL_URL, output_path)
        print(f"  ✓ Model saved to {output_path}")
        return True
    except Exception as e:
        print(f"  ✗ Failed to download face landmarker: {e}")
        return False


if __name__ == "__main__":
    print("Emotion Trainer Model Download")
    print("=" * 50)

    ok = download_face_landmarker(force="--force" in sys.argv)

    print("\n" + "=" * 50)
    print("Model download complete!" if ok else "Model download failed.")
    sys.exit(0 if ok else 1)

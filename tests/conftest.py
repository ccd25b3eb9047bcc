"""Pytest configuration and fixtures"""

import threading
from types import SimpleNamespace

import numpy as np
import pytest
from hypothesis import settings, Verbosity

from emotion_trainer.models.frames import VideoFrame
from emotion_trainer.models.interfaces import CameraSource, FaceInferenceBackend

# Register Hypothesis profiles
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=20, verbosity=Verbosity.normal)
settings.register_profile("debug", max_examples=10, verbosity=Verbosity.verbose)

# Use CI profile by default
settings.load_profile("ci")


def make_landmarker_result(blendshapes=None, landmarks=None):
    """Build an object shaped like MediaPipe's FaceLandmarkerResult.

    Args:
        blendshapes: name -> score for one face, or None for no face
        landmarks: list of (x, y) points for that face
    """
    faces = []
    if blendshapes is not None:
        faces.append([
            SimpleNamespace(category_name=name, score=score)
            for name, score in blendshapes.items()
        ])
    points = []
    if landmarks is not None:
        points.append([SimpleNamespace(x=x, y=y, z=0.0) for x, y in landmarks])
    return SimpleNamespace(face_blendshapes=faces, face_landmarks=points)


SMILE = {"mouthSmileLeft": 1.0, "mouthSmileRight": 1.0}


class FakeCamera(CameraSource):
    """In-memory camera producing black frames"""

    def __init__(self, ready=True, fail_start=None, start_gate=None):
        self.ready = ready
        self.fail_start = fail_start
        self.start_gate = start_gate
        self.starting = threading.Event()
        self.started = False
        self.stop_calls = 0
        self.frames_read = 0

    def start(self):
        self.starting.set()
        if self.start_gate is not None:
            self.start_gate.wait(timeout=5)
        if self.fail_start is not None:
            raise self.fail_start
        self.started = True

    def stop(self):
        self.stop_calls += 1
        self.started = False

    def is_ready(self):
        return self.ready and self.started

    def read_frame(self):
        self.frames_read += 1
        return VideoFrame(
            image=np.zeros((36, 64, 3), dtype=np.uint8),
            timestamp=float(self.frames_read),
            frame_number=self.frames_read
        )


class FakeBackend(FaceInferenceBackend):
    """Inference backend returning scripted results.

    ``outcomes`` is consumed one per detect call; an Exception instance is
    raised instead of returned. Once exhausted, ``default`` is returned.
    ``gate``, when set, makes detect block until the event is released;
    ``load_gate`` does the same for load.
    """

    def __init__(self, outcomes=None, default=None, fail_load=None, gate=None, load_gate=None):
        self.outcomes = list(outcomes or [])
        self.default = default if default is not None else make_landmarker_result(SMILE)
        self.fail_load = fail_load
        self.gate = gate
        self.load_gate = load_gate
        self.entered = threading.Event()
        self.loading = threading.Event()
        self.loaded = False
        self.close_calls = 0
        self.timestamps = []

    def load(self):
        self.loading.set()
        if self.load_gate is not None:
            self.load_gate.wait(timeout=5)
        if self.fail_load is not None:
            raise self.fail_load
        self.loaded = True

    def detect(self, frame, timestamp_ms):
        self.timestamps.append(timestamp_ms)
        self.entered.set()
        if self.gate is not None:
            self.gate.wait(timeout=5)
        outcome = self.outcomes.pop(0) if self.outcomes else self.default
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self):
        self.close_calls += 1
        self.loaded = False


@pytest.fixture
def fake_camera():
    return FakeCamera()


@pytest.fixture
def fake_backend():
    return FakeBackend()

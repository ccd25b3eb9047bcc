"""Continuous Estimation Loop

Drives capture -> infer -> score -> publish once per display frame for as
long as the estimator is running, writing each result into a ResultSlot that
the dialogue engine and UI read at their own pace.

Lifecycle: IDLE -> INITIALIZING -> RUNNING -> STOPPED.
"""

import asyncio
import logging
import time
from typing import Any, Optional

from emotion_trainer.analysis.scoring import EmotionScorer
from emotion_trainer.estimation.frame_clock import FrameClock
from emotion_trainer.estimation.result_slot import ResultSlot
from emotion_trainer.models.enums import EstimatorState
from emotion_trainer.models.interfaces import CameraSource, FaceInferenceBackend
from emotion_trainer.models.results import EstimationResult


logger = logging.getLogger(__name__)

_SKIPPED = object()


class EstimatorInitializationError(Exception):
    """Raised when the camera or the inference model cannot be brought up"""
    pass


class EmotionEstimator:
    """Runs the facial-expression estimation loop.

    The loop runs as a single asyncio task. Each iteration awaits the next
    frame tick, skips the cycle if the camera is not ready, samples and infers
    in a worker thread, then scores and publishes. Iterations never overlap.

    A failed inference call is logged and the frame skipped; the slot keeps
    its previous value. Teardown (``stop()``) is synchronous and idempotent:
    it clears the liveness flag, seals the slot, cancels the task and
    releases the camera and backend. Every continuation checks the liveness
    flag before doing further work, so nothing is published after teardown
    begins.

    Attributes:
        camera: Camera capture capability
        backend: Landmark/blendshape inference capability
        scorer: Emotion scorer
        slot: Shared result slot written by this estimator
        clock: Frame pacing primitive
        state: Current lifecycle state
        status: Human-readable status line for the UI
        frames_processed: Results published
        frames_skipped: Cycles that published nothing
    """

    def __init__(
        self,
        camera: CameraSource,
        backend: FaceInferenceBackend,
        scorer: Optional[EmotionScorer] = None,
        slot: Optional[ResultSlot] = None,
        clock: Optional[FrameClock] = None
    ):
        self.camera = camera
        self.backend = backend
        self.scorer = scorer if scorer is not None else EmotionScorer()
        self.slot = slot if slot is not None else ResultSlot()
        self.clock = clock if clock is not None else FrameClock()

        self.state = EstimatorState.IDLE
        self.status = "Idle"
        self.frames_processed = 0
        self.frames_skipped = 0

        self._running = False
        self._task: Optional[asyncio.Task] = None

        logger.info(f"EmotionEstimator initialized at {self.clock.fps:g} fps")

    @classmethod
    def from_config(cls, cfg, slot: Optional[ResultSlot] = None) -> "EmotionEstimator":
        """Wire an estimator with OpenCV capture and MediaPipe inference from config"""
        from emotion_trainer.input.camera import CameraCapture
        from emotion_trainer.input.landmarker import FaceLandmarkerBackend

        return cls(
            camera=CameraCapture.from_config(cfg),
            backend=FaceLandmarkerBackend.from_config(cfg),
            scorer=EmotionScorer.from_config(cfg),
            slot=slot,
            clock=FrameClock(cfg.get('estimator.target_fps', 30))
        )

    @property
    def is_running(self) -> bool:
        return self._running

    def get_latest_result(self) -> Optional[EstimationResult]:
        """Non-blocking read of the latest published result"""
        return self.slot.latest()

    async def start(self) -> None:
        """Load the model, acquire the camera and launch the loop task.

        Raises:
            EstimatorInitializationError: If initialization fails. The status
                line carries a user-facing message, acquired resources are
                released and the estimator ends STOPPED. No retry.
            RuntimeError: If the estimator has already been started
        """
        if self.state is not EstimatorState.IDLE:
            raise RuntimeError(f"Estimator cannot start from state {self.state.value}")

        self.state = EstimatorState.INITIALIZING
        self._running = True

        try:
            self.status = "Loading face landmarker..."
            logger.info(self.status)
            await asyncio.to_thread(self.backend.load)
            if not self._running:
                # stop() ran while the model was loading
                self.backend.close()
                return

            self.status = "Starting camera..."
            logger.info(self.status)
            await asyncio.to_thread(self.camera.start)
            if not self._running:
                # stop() ran while the camera was opening
                self.camera.stop()
                return

        except Exception as e:
            logger.error(f"Estimator initialization failed: {e}", exc_info=True)
            self.stop()
            self.status = f"Init error: {e}"
            raise EstimatorInitializationError(str(e)) from e

        self.state = EstimatorState.RUNNING
        self.status = "Running"
        self._task = asyncio.create_task(self._run_loop(), name="emotion_estimator")
        logger.info("Estimation loop started")

    def _sample_and_detect(self, timestamp_ms: int) -> Any:
        """Worker-thread half of a cycle: read a frame and run inference"""
        frame = self.camera.read_frame()
        if frame is None:
            return _SKIPPED
        return self.backend.detect(frame, timestamp_ms)

    async def run_cycle(self, timestamp_ms: int) -> Optional[EstimationResult]:
        """Run one capture -> infer -> score -> publish cycle.

        Returns:
            The published result, or None if the cycle was skipped
        """
        if not self.camera.is_ready():
            self.frames_skipped += 1
            return None

        try:
            inference = await asyncio.to_thread(self._sample_and_detect, timestamp_ms)
        except Exception as e:
            logger.warning(f"Face landmarker error, skipping frame: {e}")
            self.frames_skipped += 1
            return None

        if not self._running or inference is _SKIPPED:
            self.frames_skipped += 1
            return None

        result = self.scorer.estimate(inference, timestamp=time.time())

        if not self._running:
            return None
        self.slot.publish(result)
        self.frames_processed += 1
        return result

    async def _run_loop(self) -> None:
        """Repeat cycles until stopped"""
        while self._running:
            try:
                timestamp_ms = await self.clock.next_frame()
                if not self._running:
                    break
                await self.run_cycle(timestamp_ms)

            except asyncio.CancelledError:
                logger.info("Estimation loop cancelled")
                break
            except Exception as e:
                logger.error(f"Error in estimation cycle: {e}", exc_info=True)
                self.frames_skipped += 1

    def stop(self) -> None:
        """Tear down: no more publishes, cancel the loop, release resources.

        Safe to call at any time, any number of times, including mid-cycle.
        """
        if self.state is EstimatorState.STOPPED:
            return

        self._running = False
        self.slot.seal()
        self.state = EstimatorState.STOPPED

        if self._task is not None and not self._task.done():
            self._task.cancel()

        try:
            self.camera.stop()
        except Exception as e:
            logger.warning(f"Error releasing camera: {e}")

        try:
            self.backend.close()
        except Exception as e:
            logger.warning(f"Error closing face landmarker: {e}")

        self.status = "Stopped"
        logger.info(f"Estimator stopped: processed={self.frames_processed}, "
                    f"skipped={self.frames_skipped}")

    async def wait_stopped(self) -> None:
        """Wait for the loop task to finish after stop()"""
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)

    async def __aenter__(self) -> "EmotionEstimator":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.stop()
        await self.wait_stopped()

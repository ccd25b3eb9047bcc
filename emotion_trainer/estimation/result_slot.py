"""Shared Result Slot

Single-slot, last-write-wins channel between the estimation loop and
whatever reads its output (dialogue engine, UI, monitors).
"""

import logging
from typing import Optional

from emotion_trainer.models.results import EstimationResult


logger = logging.getLogger(__name__)


class ResultSlot:
    """Holds at most one EstimationResult.

    Exactly one writer (the estimator) replaces the value; any number of
    readers take a snapshot with ``latest()``. There is no queue, no history
    and no locking: a publish is a single reference assignment, so readers
    see either the previous result or the new one, never a mix. Readers must
    tolerate staleness. They can read the same result twice, or miss some
    entirely.

    Once sealed, the slot rejects further writes and keeps its last value.

    Attributes:
        version: Number of results published so far
    """

    def __init__(self):
        self._result: Optional[EstimationResult] = None
        self._sealed = False
        self.version = 0

    def publish(self, result: EstimationResult) -> bool:
        """Replace the held result.

        Returns:
            True if stored, False if the slot is sealed
        """
        if self._sealed:
            logger.debug("Dropped publish to sealed result slot")
            return False
        self._result = result
        self.version += 1
        return True

    def latest(self) -> Optional[EstimationResult]:
        """Most recent result, or None if nothing has been published yet"""
        return self._result

    def seal(self) -> None:
        """Reject all further writes (idempotent)"""
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def __repr__(self) -> str:
        latest = self._result.describe() if self._result else None
        return f"ResultSlot(version={self.version}, latest={latest!r}, sealed={self._sealed})"

"""Lesson session: walks a module's branching dialogue

Every user interaction is stamped with the time spent on the lesson and with
whatever emotion estimate the result slot holds at that instant. The slot is
read, never waited on: the estimate may be stale or absent.
"""

import logging
import time
from typing import Callable, List, Optional

from emotion_trainer.estimation.result_slot import ResultSlot
from emotion_trainer.models.lessons import (
    ChoiceLesson,
    DecisionRecord,
    NarrationLesson,
    TrainingModule
)


logger = logging.getLogger(__name__)


class LessonNavigationError(Exception):
    """Exception raised for an interaction that does not fit the current lesson"""
    pass


class LessonSession:
    """Cursor over one module's lessons.

    ``cursor`` is -1 before the module starts. Narration lessons are advanced
    with ``advance()``; choice lessons with ``choose()``, which jumps by the
    chosen option's relative offset. Reaching a narration lesson flagged
    ``end``, or jumping outside the lesson list, finishes the module.

    Attributes:
        module: Module being played
        slot: Result slot read at each interaction
        cursor: Current lesson index, -1 before start
        finished: Whether the module has been completed
        decisions: Interaction log for this session
    """

    def __init__(self, module: TrainingModule, slot: Optional[ResultSlot] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.module = module
        self.slot = slot
        self._clock = clock
        self.cursor = -1
        self.finished = False
        self.decisions: List[DecisionRecord] = []
        self._shown_at = clock()

    @property
    def started(self) -> bool:
        return self.cursor >= 0

    @property
    def current(self):
        """Lesson on screen, or None before start and after finish"""
        if self.finished or not 0 <= self.cursor < len(self.module.lessons):
            return None
        return self.module.lessons[self.cursor]

    def start(self) -> None:
        if self.started:
            raise LessonNavigationError("Session already started")
        self._goto(0)
        logger.info(f"Started module {self.module.module_id}: {self.module.name}")

    def advance(self) -> DecisionRecord:
        """Acknowledge a narration lesson and move on"""
        lesson = self._require(NarrationLesson)
        record = self._record(lesson, answer=None)
        if lesson.end:
            self._finish()
        else:
            self._goto(self.cursor + 1)
        return record

    def choose(self, index: int) -> DecisionRecord:
        """Pick option `index` (0 or 1) of a choice lesson

        Raises:
            LessonNavigationError: If the current lesson is not a choice or
                                   the index is out of range
        """
        lesson = self._require(ChoiceLesson)
        if not 0 <= index < len(lesson.choices):
            raise LessonNavigationError(f"No choice {index} on lesson {self.cursor}")
        choice = lesson.choices[index]
        record = self._record(lesson, answer=choice.message)
        self._goto(self.cursor + choice.next)
        return record

    def choose_message(self, message: str) -> DecisionRecord:
        """Pick the option whose text equals `message`"""
        lesson = self._require(ChoiceLesson)
        for index, choice in enumerate(lesson.choices):
            if choice.message == message:
                return self.choose(index)
        raise LessonNavigationError(f"No choice {message!r} on lesson {self.cursor}")

    def reset(self) -> None:
        """Back to the not-started state, keeping the module"""
        self.cursor = -1
        self.finished = False
        self.decisions = []
        self._shown_at = self._clock()

    def _require(self, kind):
        lesson = self.current
        if lesson is None:
            raise LessonNavigationError("No lesson is active")
        if not isinstance(lesson, kind):
            raise LessonNavigationError(
                f"Lesson {self.cursor} is a {type(lesson).__name__}, not a {kind.__name__}"
            )
        return lesson

    def _record(self, lesson, answer: Optional[str]) -> DecisionRecord:
        emotion = self.slot.latest() if self.slot is not None else None
        record = DecisionRecord(
            lesson_index=self.cursor,
            lesson=lesson,
            answer=answer,
            elapsed=self._clock() - self._shown_at,
            emotion=emotion
        )
        self.decisions.append(record)
        logger.info(f"Decision: {record.to_dict()}")
        return record

    def _goto(self, index: int) -> None:
        if not 0 <= index < len(self.module.lessons):
            logger.info(f"Lesson index {index} outside module {self.module.module_id}, finishing")
            self._finish()
            return
        self.cursor = index
        self._shown_at = self._clock()

    def _finish(self) -> None:
        self.finished = True
        logger.info(f"Finished module {self.module.module_id} after {len(self.decisions)} decisions")

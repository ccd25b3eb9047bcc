"""Data models for dialogue content: modules and their lessons"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from emotion_trainer.models.results import EstimationResult


@dataclass(frozen=True)
class Choice:
    """One option of a choice lesson

    Attributes:
        message: Option text shown to the user
        next: Offset from the current lesson index to the lesson this option leads to
    """
    message: str
    next: int


@dataclass(frozen=True)
class NarrationLesson:
    """A lesson spoken by a character, advanced by a click

    Attributes:
        speaker: Character name (e.g., "teacher")
        message: Spoken text
        end: Whether this lesson closes the module
    """
    speaker: str
    message: str
    end: bool = False


@dataclass(frozen=True)
class ChoiceLesson:
    """A lesson where the user picks one of exactly two options"""
    message: str
    choices: tuple
    speaker: str = "user"

    def __post_init__(self):
        assert len(self.choices) == 2, "Choice lessons must have exactly two choices"


Lesson = Union[NarrationLesson, ChoiceLesson]


@dataclass(frozen=True)
class TrainingModule:
    """A named, ordered sequence of lessons"""
    module_id: str
    name: str
    description: str
    lessons: tuple

    def __len__(self) -> int:
        return len(self.lessons)


@dataclass
class DecisionRecord:
    """A user interaction with a lesson, stamped with the emotion seen at that moment

    Attributes:
        lesson_index: Index of the lesson the user acted on
        lesson: The lesson itself
        answer: Chosen option text, or None for narration clicks
        elapsed: Seconds between the lesson being shown and the interaction
        emotion: Latest estimate available when the user acted, if any
    """
    lesson_index: int
    lesson: Lesson
    answer: Optional[str]
    elapsed: float
    emotion: Optional[EstimationResult] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lesson_index": self.lesson_index,
            "message": self.lesson.message,
            "answer": self.answer,
            "elapsed": round(self.elapsed, 3),
            "emotion": self.emotion.to_dict() if self.emotion else None,
        }

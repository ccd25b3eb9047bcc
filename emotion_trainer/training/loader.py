"""Loading dialogue content: module id -> {name, description, lessons}"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

from emotion_trainer.models.lessons import (
    Choice,
    ChoiceLesson,
    NarrationLesson,
    TrainingModule
)


logger = logging.getLogger(__name__)


class ModuleFormatError(Exception):
    """Exception raised for malformed dialogue content"""
    pass


def _parse_lesson(module_id: str, index: int, data: Any):
    where = f"{module_id} lesson {index}"
    if not isinstance(data, dict):
        raise ModuleFormatError(f"{where}: lesson must be an object")

    message = data.get("message")
    if not isinstance(message, str):
        raise ModuleFormatError(f"{where}: missing message")

    choices = data.get("choices")
    if choices is None:
        speaker = data.get("speaker")
        if not isinstance(speaker, str) or not speaker:
            raise ModuleFormatError(f"{where}: missing speaker")
        return NarrationLesson(speaker=speaker, message=message, end=bool(data.get("end", False)))

    if not isinstance(choices, list) or len(choices) != 2:
        raise ModuleFormatError(f"{where}: choice lessons need exactly two choices")
    if data.get("end"):
        raise ModuleFormatError(f"{where}: choice lessons cannot end a module")

    parsed = []
    for choice in choices:
        if not isinstance(choice, dict):
            raise ModuleFormatError(f"{where}: choice must be an object")
        text, offset = choice.get("message"), choice.get("next")
        if not isinstance(text, str) or isinstance(offset, bool) or not isinstance(offset, int):
            raise ModuleFormatError(f"{where}: choice needs a message and an integer next offset")
        parsed.append(Choice(message=text, next=offset))

    return ChoiceLesson(message=message, choices=tuple(parsed), speaker=data.get("speaker", "user"))


def parse_modules(data: Dict[str, Any]) -> Dict[str, TrainingModule]:
    """Build TrainingModule objects from decoded content

    Raises:
        ModuleFormatError: If any module or lesson is malformed
    """
    if not isinstance(data, dict):
        raise ModuleFormatError("Dialogue content must map module ids to modules")

    modules = {}
    for module_id, body in data.items():
        if not isinstance(body, dict):
            raise ModuleFormatError(f"{module_id}: module must be an object")
        lessons = body.get("lessons")
        if not isinstance(lessons, list) or not lessons:
            raise ModuleFormatError(f"{module_id}: module needs a non-empty lessons list")

        modules[module_id] = TrainingModule(
            module_id=module_id,
            name=str(body.get("name", module_id)),
            description=str(body.get("description", "")),
            lessons=tuple(_parse_lesson(module_id, i, lesson) for i, lesson in enumerate(lessons))
        )

    return modules


def load_modules(path) -> Dict[str, TrainingModule]:
    """Load dialogue content from a JSON file

    Raises:
        FileNotFoundError: If the file does not exist
        ModuleFormatError: If the content is not valid JSON or is malformed
    """
    path = Path(path)
    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ModuleFormatError(f"{path}: invalid JSON: {e}") from e

    modules = parse_modules(data)
    logger.info(f"Loaded {len(modules)} training modules from {path}")
    return modules

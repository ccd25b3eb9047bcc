"""Unit tests for dialogue content loading"""

import json

import pytest

from emotion_trainer.config.config_loader import PROJECT_ROOT
from emotion_trainer.models.lessons import ChoiceLesson, NarrationLesson
from emotion_trainer.training.loader import ModuleFormatError, load_modules, parse_modules


def _module(*lessons):
    return {"M": {"name": "Mod", "description": "d", "lessons": list(lessons)}}


def test_bundled_modules_load():
    modules = load_modules(PROJECT_ROOT / "data" / "modules.json")

    assert "Module 1A" in modules
    module = modules["Module 1A"]
    assert isinstance(module.lessons[0], NarrationLesson)
    assert any(isinstance(lesson, ChoiceLesson) for lesson in module.lessons)


def test_bundled_jumps_land_inside_modules():
    """Test that every choice offset in the shipped content targets a real lesson"""
    for module in load_modules(PROJECT_ROOT / "data" / "modules.json").values():
        for index, lesson in enumerate(module.lessons):
            if isinstance(lesson, ChoiceLesson):
                for choice in lesson.choices:
                    assert 0 <= index + choice.next < len(module.lessons)


def test_parse_narration_and_choice():
    modules = parse_modules(_module(
        {"speaker": "teacher", "message": "Hi"},
        {"message": "Pick", "choices": [{"message": "A", "next": 1}, {"message": "B", "next": 2}]},
        {"speaker": "boy", "message": "Bye", "end": True},
    ))
    lessons = modules["M"].lessons

    assert lessons[0] == NarrationLesson("teacher", "Hi")
    assert lessons[1].speaker == "user"
    assert [c.next for c in lessons[1].choices] == [1, 2]
    assert lessons[2].end is True


@pytest.mark.parametrize("lesson", [
    {"message": "no speaker"},
    {"speaker": "teacher"},
    {"message": "one choice", "choices": [{"message": "A", "next": 1}]},
    {"message": "bad offset", "choices": [{"message": "A", "next": "1"}, {"message": "B", "next": 2}]},
    {"message": "end choice", "end": True,
     "choices": [{"message": "A", "next": 1}, {"message": "B", "next": 2}]},
    "just a string",
])
def test_malformed_lessons_rejected(lesson):
    with pytest.raises(ModuleFormatError):
        parse_modules(_module(lesson))


def test_empty_module_rejected():
    with pytest.raises(ModuleFormatError):
        parse_modules({"M": {"name": "Empty", "lessons": []}})


def test_invalid_json(tmp_path):
    path = tmp_path / "modules.json"
    path.write_text("{not json")

    with pytest.raises(ModuleFormatError):
        load_modules(path)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_modules(tmp_path / "nope.json")


def test_round_trip_from_file(tmp_path):
    path = tmp_path / "modules.json"
    path.write_text(json.dumps(_module({"speaker": "teacher", "message": "Only", "end": True})))

    modules = load_modules(path)

    assert modules["M"].name == "Mod"
    assert len(modules["M"]) == 1

"""Dialogue engine: training modules, lessons and sessions"""

from emotion_trainer.training.loader import load_modules, parse_modules, ModuleFormatError
from emotion_trainer.training.session import LessonSession, LessonNavigationError

__all__ = ['load_modules', 'parse_modules', 'ModuleFormatError', 'LessonSession', 'LessonNavigationError']

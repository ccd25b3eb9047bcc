#!/usr/bin/env python3
"""Simple demo of the scoring pipeline without a camera or model.

Scripted blendshape payloads are scored and published to a result slot
while a training module is played with fixed answers, showing how each
decision gets stamped with the emotion estimate of that moment.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from emotion_trainer.analysis.scoring import EmotionScorer
from emotion_trainer.config.config_loader import config
from emotion_trainer.estimation.result_slot import ResultSlot
from emotion_trainer.models.lessons import ChoiceLesson
from emotion_trainer.training.loader import load_modules
from emotion_trainer.training.session import LessonSession


SCRIPTED_FACES = [
    ("no face", {}),
    ("smile", {"mouthSmileLeft": 1.0, "mouthSmileRight": 1.0}),
    ("slight smile", {"mouthSmileLeft": 0.4, "mouthSmileRight": 0.35, "eyeSquintLeft": 0.2}),
    ("surprise", {"eyeWideLeft": 0.9, "eyeWideRight": 0.9, "jawOpen": 0.7, "browInnerUp": 0.6}),
    ("frown", {"mouthShrugLower": 0.8, "browInnerUp": 0.5, "mouthFrownLeft": 0.6, "mouthFrownRight": 0.6}),
    ("sneer", {"noseSneerLeft": 0.9, "noseSneerRight": 0.8, "upperLipRaiseLeft": 0.5}),
]


def demo_scoring(scorer: EmotionScorer):
    """Print the distribution for each scripted expression"""
    print("Scoring scripted expressions")
    print("-" * 60)
    for label, signal in SCRIPTED_FACES:
        result = scorer.estimate(signal)
        top3 = sorted(result.scores.items(), key=lambda kv: kv[1], reverse=True)[:3]
        ranked = ", ".join(f"{k}={v:.2f}" for k, v in top3)
        print(f"  {label:<14} -> {result.describe():<18} [{ranked}]")


def demo_session(scorer: EmotionScorer, module_id: str = "Module 1A"):
    """Play a module with the first option always chosen"""
    modules = load_modules(config.resolve_path('training.modules_path', 'data/modules.json'))
    module = modules[module_id]
    slot = ResultSlot()
    session = LessonSession(module, slot=slot)

    print(f"\nPlaying {module_id}: {module.name}")
    print("-" * 60)
    session.start()
    step = 0
    while not session.finished:
        _, signal = SCRIPTED_FACES[step % len(SCRIPTED_FACES)]
        slot.publish(scorer.estimate(signal))
        step += 1

        lesson = session.current
        if isinstance(lesson, ChoiceLesson):
            record = session.choose(0)
        else:
            record = session.advance()
        emotion = record.emotion.describe() if record.emotion else "—"
        print(f"  [{lesson.speaker}] {lesson.message}")
        if record.answer:
            print(f"      answer: {record.answer}")
        print(f"      emotion: {emotion}")

    print(f"\nFinished after {len(session.decisions)} decisions")


def main():
    print("=" * 60)
    print("Emotion Trainer Pipeline Demo")
    print("=" * 60)

    scorer = EmotionScorer.from_config(config)
    demo_scoring(scorer)
    demo_session(scorer, sys.argv[1] if len(sys.argv) > 1 else "Module 1A")


if __name__ == "__main__":
    main()

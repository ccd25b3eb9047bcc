"""Main Application Entry Point

Headless runner: starts the emotion estimator, logs the latest estimate at a
fixed interval, and optionally plays a training module in the console,
stamping each answer with the emotion seen at that moment.

Usage:
    python -m emotion_trainer.main [module_id]
"""

import asyncio
import logging
import signal
import sys
import threading
from pathlib import Path
from typing import Optional

from emotion_trainer.config.config_loader import config
from emotion_trainer.estimation.estimator import EmotionEstimator, EstimatorInitializationError
from emotion_trainer.estimation.result_slot import ResultSlot
from emotion_trainer.models.lessons import ChoiceLesson, TrainingModule
from emotion_trainer.training.loader import load_modules
from emotion_trainer.training.session import LessonSession


logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """Configure root logging to stdout and the configured log file"""
    log_file = Path(config.get('logging.file', 'logs/emotion_trainer.log'))
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=getattr(logging, str(config.get('logging.level', 'INFO')).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler(sys.stdout)
        ]
    )


class EmotionTrainer:
    """Orchestrates the estimator and an optional console lesson session.

    Attributes:
        slot: Result slot shared between estimator and session
        estimator: Continuous emotion estimator
        monitor_interval: Seconds between logged estimates
        tasks: Running asyncio tasks
        session: Console lesson session, once one has been started
    """

    def __init__(self, estimator: Optional[EmotionEstimator] = None, monitor_interval: float = 1.0):
        logger.info("Initializing EmotionTrainer...")
        config.validate()

        self.slot = estimator.slot if estimator is not None else ResultSlot()
        self.estimator = estimator if estimator is not None else EmotionEstimator.from_config(config, slot=self.slot)
        self.monitor_interval = monitor_interval

        self.tasks = []
        self.session: Optional[LessonSession] = None
        self.shutdown_event = asyncio.Event()

    async def monitor_estimates(self):
        """Log the latest estimate periodically until shutdown"""
        last_version = -1
        while not self.shutdown_event.is_set():
            result = self.slot.latest()
            if result is not None and self.slot.version != last_version:
                last_version = self.slot.version
                logger.info(f"Emotion: {result.describe()} "
                            f"(processed={self.estimator.frames_processed}, "
                            f"skipped={self.estimator.frames_skipped})")
            await asyncio.sleep(self.monitor_interval)

    async def read_line(self, prompt: str) -> Optional[str]:
        """Read one console line, racing it against shutdown.

        input() blocks in a daemon thread so that a pending prompt neither
        delays shutdown nor keeps the interpreter alive at exit.

        Returns:
            The line read, or None if shutdown was requested or stdin closed
            first. A line typed after shutdown is dropped.
        """
        loop = asyncio.get_running_loop()
        line_future = loop.create_future()

        def deliver(line):
            if not line_future.done():
                line_future.set_result(line)

        def reader():
            try:
                line = input(prompt)
            except EOFError:
                line = None
            if not loop.is_closed():
                loop.call_soon_threadsafe(deliver, line)

        threading.Thread(target=reader, daemon=True, name="console-input").start()
        shutdown_wait = asyncio.create_task(self.shutdown_event.wait())
        try:
            await asyncio.wait({line_future, shutdown_wait}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            shutdown_wait.cancel()

        if self.shutdown_event.is_set() or not line_future.done():
            line_future.cancel()
            return None
        return line_future.result()

    async def run_console_session(self, module: TrainingModule):
        """Play a module in the terminal until it finishes or shutdown is requested"""
        session = LessonSession(module, slot=self.slot)
        self.session = session
        session.start()
        print(f"\n== {module.name} ==\n{module.description}\n")

        while not session.finished:
            lesson = session.current
            if isinstance(lesson, ChoiceLesson):
                print(lesson.message)
                for i, choice in enumerate(lesson.choices, start=1):
                    print(f"  {i}. {choice.message}")
                answer = await self.read_line("> ")
                if answer is None:
                    break
                if answer.strip() not in ("1", "2"):
                    print("Please answer 1 or 2")
                    continue
                session.choose(int(answer.strip()) - 1)
            else:
                print(f"[{lesson.speaker}] {lesson.message}")
                if await self.read_line("(press Enter) ") is None:
                    break
                session.advance()

        if not session.finished:
            logger.info(f"Session interrupted after {len(session.decisions)} decisions")
            return session

        print(f"\nYou finished {module.name}. Thank you!")
        for record in session.decisions:
            print(record.to_dict())
        return session

    async def shutdown(self):
        """Stop the estimator and cancel all tasks"""
        logger.info("Shutting down EmotionTrainer...")
        self.shutdown_event.set()
        self.estimator.stop()

        for task in self.tasks:
            if not task.done():
                task.cancel()
        if self.tasks:
            await asyncio.gather(*self.tasks, return_exceptions=True)
        await self.estimator.wait_stopped()

        logger.info("EmotionTrainer shutdown complete")

    async def run(self, module: Optional[TrainingModule] = None):
        """Start the estimator, then play `module` or idle until a signal arrives"""
        try:
            logger.info("=" * 60)
            logger.info("Starting Emotion Trainer")
            logger.info("=" * 60)

            try:
                await self.estimator.start()
            except EstimatorInitializationError:
                logger.error(self.estimator.status)
                return

            self.tasks.append(asyncio.create_task(self.monitor_estimates(), name="monitor"))

            if module is not None:
                await self.run_console_session(module)
            else:
                await self.shutdown_event.wait()

        except Exception as e:
            logger.error(f"Fatal error in main loop: {e}", exc_info=True)
        finally:
            await self.shutdown()


def setup_signal_handlers(trainer: EmotionTrainer):
    """Stop the trainer on SIGINT/SIGTERM"""
    loop = asyncio.get_running_loop()

    def signal_handler(signum, frame):
        logger.info(f"Received signal {signum}")
        loop.call_soon_threadsafe(trainer.shutdown_event.set)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)


async def main_async():
    """Async main entry point."""
    module = None
    if len(sys.argv) > 1:
        modules = load_modules(config.resolve_path('training.modules_path', 'data/modules.json'))
        module_id = sys.argv[1]
        if module_id not in modules:
            logger.error(f"Unknown module {module_id!r}; available: {', '.join(modules)}")
            return
        module = modules[module_id]

    trainer = EmotionTrainer()
    setup_signal_handlers(trainer)
    await trainer.run(module)


def main():
    """Main entry point."""
    try:
        setup_logging()
        asyncio.run(main_async())

    except KeyboardInterrupt:
        logger.info("Application terminated by user")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()

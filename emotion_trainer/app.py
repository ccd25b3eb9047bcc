"""Streamlit Application Runner

Training UI: pick a module, step through its lessons, and have each answer
stamped with the live emotion estimate. The estimator runs on its own event
loop in a background thread; the page only ever reads its result slot.

Run with:
    streamlit run emotion_trainer/app.py
"""

import asyncio
import logging
import threading
import time

import pandas as pd
import streamlit as st

from emotion_trainer.config.config_loader import config
from emotion_trainer.estimation.estimator import EmotionEstimator, EstimatorInitializationError
from emotion_trainer.estimation.result_slot import ResultSlot
from emotion_trainer.models.lessons import ChoiceLesson
from emotion_trainer.training.loader import load_modules
from emotion_trainer.training.session import LessonSession
from emotion_trainer.ui.display import EmotionDisplay, format_emotion


logger = logging.getLogger(__name__)


class EstimatorRunner:
    """Owns a background thread running the estimator's event loop"""

    def __init__(self, estimator: EmotionEstimator):
        self.estimator = estimator
        self.loop = None
        self.thread = None

    def _run(self):
        self.loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self.loop)
        try:
            self.loop.run_until_complete(self.estimator.start())
            self.loop.run_until_complete(self.estimator.wait_stopped())
        except EstimatorInitializationError:
            # status already carries the user-facing message
            pass
        except Exception as e:
            logger.error(f"Estimator thread error: {e}", exc_info=True)
        finally:
            self.loop.close()

    def start(self):
        self.thread = threading.Thread(target=self._run, daemon=True, name="estimator")
        self.thread.start()

    def stop(self):
        if self.loop is not None and self.loop.is_running():
            self.loop.call_soon_threadsafe(self.estimator.stop)
        else:
            self.estimator.stop()


class TrainingApp:
    """Streamlit application wrapper for the training flow."""

    def __init__(self):
        """Initialize the Streamlit app."""
        if 'modules' not in st.session_state:
            st.session_state.modules = load_modules(
                config.resolve_path('training.modules_path', 'data/modules.json')
            )
        if 'slot' not in st.session_state:
            st.session_state.slot = ResultSlot()
        if 'runner' not in st.session_state:
            st.session_state.runner = None
        if 'session' not in st.session_state:
            st.session_state.session = None
        if 'display' not in st.session_state:
            st.session_state.display = EmotionDisplay()

    def start_estimator(self):
        """Start the estimator in a background thread, once per browser session"""
        if st.session_state.runner is None:
            estimator = EmotionEstimator.from_config(config, slot=st.session_state.slot)
            runner = EstimatorRunner(estimator)
            runner.start()
            st.session_state.runner = runner
            if st.session_state.session is not None:
                st.session_state.session.slot = st.session_state.slot

    def stop_estimator(self):
        runner = st.session_state.runner
        if runner is not None:
            runner.stop()
            st.session_state.runner = None
            st.session_state.slot = ResultSlot()

    def render_sidebar(self):
        with st.sidebar:
            st.header("Emotion Estimator")
            runner = st.session_state.runner
            status = runner.estimator.status if runner else "Stopped"
            st.caption(status)
            st.markdown(f"**{format_emotion(st.session_state.slot.latest())}**")

            col1, col2 = st.columns(2)
            with col1:
                if st.button("▶️ Start", disabled=runner is not None):
                    self.start_estimator()
                    st.rerun()
            with col2:
                if st.button("⏹️ Stop", disabled=runner is None):
                    self.stop_estimator()
                    st.rerun()

            show_preview = st.checkbox("Show camera preview", value=False)

        return show_preview

    def render_module_picker(self):
        st.title("Emotion-Aware Training")
        for module_id, module in st.session_state.modules.items():
            if st.button(f"{module_id}: {module.name}", key=f"module-{module_id}"):
                st.session_state.session = LessonSession(module, slot=st.session_state.slot)
                st.rerun()
            st.caption(module.description)

    def render_finished(self, session: LessonSession):
        st.header(f"You finished {session.module.name}")
        st.markdown("Thank you!")
        st.dataframe(pd.DataFrame([
            {
                "lesson": record.lesson_index,
                "message": record.lesson.message,
                "answer": record.answer or "",
                "seconds": round(record.elapsed, 1),
                "emotion": format_emotion(record.emotion),
            }
            for record in session.decisions
        ]))
        if st.button("Back to modules"):
            st.session_state.session = None
            st.rerun()

    def render_lesson(self, session: LessonSession):
        lesson = session.current
        if isinstance(lesson, ChoiceLesson):
            st.subheader(lesson.message)
            with st.form(key=f"lesson-{session.cursor}"):
                answer = st.radio("Your answer", [c.message for c in lesson.choices])
                if st.form_submit_button("Submit"):
                    session.choose_message(answer)
                    st.rerun()
        else:
            st.markdown(f"**{lesson.speaker}**")
            st.subheader(lesson.message)
            if st.button("Next ➡️", key=f"next-{session.cursor}"):
                session.advance()
                st.rerun()

    def render(self):
        """Render the Streamlit interface."""
        st.set_page_config(
            page_title="Emotion-Aware Training",
            page_icon="🎭",
            layout="wide"
        )

        show_preview = self.render_sidebar()
        session = st.session_state.session

        if session is None:
            self.render_module_picker()
        elif session.finished:
            self.render_finished(session)
        elif not session.started:
            st.title(session.module.name)
            if st.button("Start"):
                session.start()
                st.rerun()
        else:
            self.render_lesson(session)

        runner = st.session_state.runner
        if show_preview and runner is not None:
            st.markdown("---")
            frame = runner.estimator.camera.latest_frame
            st.session_state.display.render(
                st.session_state.slot.latest(),
                runner.estimator.status,
                frame.image if frame is not None else None
            )
            # Auto-refresh
            time.sleep(0.1)
            st.rerun()


def main():
    """Main entry point for Streamlit app."""
    app = TrainingApp()
    app.render()


if __name__ == "__main__":
    main()

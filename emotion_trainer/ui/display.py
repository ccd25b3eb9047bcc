"""Emotion Display

Streamlit/Plotly rendering of the live emotion estimate: the current label,
the full distribution, a rolling history of the top emotion, and an OpenCV
landmark overlay on the camera preview.
"""

import time
from datetime import datetime
from typing import Dict, List, Mapping, Optional

import cv2
import numpy as np
import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from emotion_trainer.models.enums import EmotionCategory
from emotion_trainer.models.results import EstimationResult


EMOTION_COLORS = {
    "happy": "#2ca02c",
    "sad": "#1f77b4",
    "angry": "#d62728",
    "surprised": "#ff7f0e",
    "disgusted": "#8c564b",
    "fearful": "#9467bd",
    "neutral": "#7f7f7f",
}

PLACEHOLDER = "—"


def format_emotion(result: Optional[EstimationResult]) -> str:
    """Label such as 'happy (80.5%)', or a dash when nothing is available"""
    if result is None:
        return PLACEHOLDER
    return result.describe()


def draw_landmarks(image: np.ndarray, landmarks: Optional[np.ndarray],
                   color=(255, 0, 0), radius: int = 1) -> np.ndarray:
    """Draw normalized landmark points onto a copy of an RGB image.

    Args:
        image: RGB image (H, W, 3)
        landmarks: (N, 2) normalized (x, y) points, or None
        color: RGB dot color
        radius: Dot radius in pixels

    Returns:
        Annotated copy of the image; an unannotated copy if there are no landmarks
    """
    canvas = image.copy()
    if landmarks is None or len(landmarks) == 0:
        return canvas

    h, w = canvas.shape[:2]
    for x, y in landmarks:
        cv2.circle(canvas, (int(x * w), int(y * h)), radius, color, -1)
    return canvas


class EmotionDisplay:
    """Visualizes estimation results.

    Attributes:
        history_duration: Seconds of history kept for the trend chart
        history: (timestamp, top_emotion, top_score) tuples
    """

    def __init__(self, history_duration: float = 60.0):
        self.history_duration = history_duration
        self.history: List[tuple] = []
        self._last_timestamp: Optional[float] = None

    def update(self, result: Optional[EstimationResult]) -> None:
        """Append a result to the history; repeated reads of the same result are ignored"""
        if result is None or result.timestamp == self._last_timestamp:
            return
        self._last_timestamp = result.timestamp
        self.history.append((result.timestamp, result.top_emotion, result.top_score))

        cutoff = result.timestamp - self.history_duration
        while self.history and self.history[0][0] < cutoff:
            self.history.pop(0)

    def history_frame(self) -> pd.DataFrame:
        """History as a DataFrame with a relative time column"""
        df = pd.DataFrame(self.history, columns=["timestamp", "emotion", "score"])
        if not df.empty:
            df["seconds"] = df["timestamp"] - df["timestamp"].iloc[0]
        return df

    def _create_distribution_chart(self, scores: Mapping[str, float]) -> go.Figure:
        """Bar chart of the score distribution in canonical category order"""
        categories = [c for c in EmotionCategory.names() if c in scores]
        values = [scores[c] for c in categories]

        fig = go.Figure(data=[
            go.Bar(
                x=categories,
                y=values,
                marker_color=[EMOTION_COLORS.get(c, "gray") for c in categories],
                text=[f"{v:.0%}" for v in values],
                textposition="auto"
            )
        ])
        fig.update_layout(
            title="Emotion Distribution",
            yaxis=dict(range=[0, 1], tickformat=".0%"),
            height=300,
            margin=dict(l=20, r=20, t=50, b=20)
        )
        return fig

    def _create_history_chart(self) -> go.Figure:
        """Scatter of the top emotion's score over time, colored by emotion"""
        fig = go.Figure()
        df = self.history_frame()

        if df.empty:
            fig.add_annotation(text="No data yet", showarrow=False,
                               xref="paper", yref="paper", x=0.5, y=0.5)
        else:
            for emotion, group in df.groupby("emotion"):
                fig.add_trace(go.Scatter(
                    x=group["seconds"],
                    y=group["score"],
                    mode="markers",
                    name=emotion,
                    marker=dict(color=EMOTION_COLORS.get(emotion, "gray"), size=6)
                ))

        fig.update_layout(
            title="Top Emotion History",
            xaxis_title="Time (s)",
            yaxis=dict(range=[0, 1], title="Score"),
            height=300,
            margin=dict(l=20, r=20, t=50, b=20)
        )
        return fig

    def summary(self) -> Dict[str, float]:
        """Share of history samples per top emotion"""
        df = self.history_frame()
        if df.empty:
            return {}
        return df["emotion"].value_counts(normalize=True).to_dict()

    def render(self, result: Optional[EstimationResult], status: str,
               frame: Optional[np.ndarray] = None) -> None:
        """Render status, current label, preview and charts into the Streamlit page"""
        self.update(result)

        st.caption(status)
        st.markdown(f"### {format_emotion(result)}")

        if frame is not None:
            overlay = draw_landmarks(frame, result.face_landmarks if result else None)
            st.image(overlay, channels="RGB", use_container_width=True)

        if result is None:
            st.info("Waiting for the first estimate...")
            return

        col1, col2 = st.columns(2)
        with col1:
            st.plotly_chart(self._create_distribution_chart(result.scores), use_container_width=True)
        with col2:
            st.plotly_chart(self._create_history_chart(), use_container_width=True)

        timestamp_str = datetime.fromtimestamp(result.timestamp).strftime("%H:%M:%S")
        st.caption(f"Last updated: {timestamp_str} "
                   f"({time.time() - result.timestamp:.1f}s ago)")

"""
views/home_view.py — 시험 시작 화면

기능:
  - 시험 제목 / 문제 수 / 제한 시간 안내
  - "Start Exam" 버튼 → 세션 시작 (not_started -> in_progress)
"""

from __future__ import annotations

import streamlit as st

from config import PASSING_SCORE
from saa_practice.models.question_model import ExamListing
from saa_practice.services.session_machine import ExamSessionMachine
from saa_practice.views.components.timer import countdown_text


def render(listing: ExamListing, machine: ExamSessionMachine, passing_score: int = PASSING_SCORE) -> None:
    """시작 화면 렌더링."""
    _, col, _ = st.columns([1, 2.2, 1])

    with col:
        st.header(listing.title or "Practice Exam")
        st.caption(
            f"{listing.total_questions} questions · "
            f"Exam timer: {listing.exam_duration_seconds // 60} minutes "
            f"({countdown_text(listing.exam_duration_seconds)})"
        )
        st.markdown(
            "- Full timed mode with automatic submission at 00:00:00\n"
            "- Question palette for navigation\n"
            f"- Score on a 1000-point scale (pass: {passing_score})\n"
            "- Progress is saved; reload to resume where you left off"
        )

        if st.button("Start Exam", type="primary", use_container_width=True):
            machine.start()
            st.rerun()

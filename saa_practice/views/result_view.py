"""
views/result_view.py — 시험 결과 화면

표시 내용:
  - 합격 / 불합격 + 1000점 환산 점수
  - 정답 수, 오답 수
  - 문제별 채점표 (내 답 / 정답 / 결과)
  - 새로 응시하기 (세션 초기화)
"""

from __future__ import annotations

import streamlit as st

from config import PASSING_SCORE
from saa_practice.models.session_state import ScoreResult
from saa_practice.services.session_machine import ExamSessionMachine
from saa_practice.views.exam_view import clear_widget_state


def _new_attempt(machine: ExamSessionMachine) -> None:
    machine.reset()
    clear_widget_state()


def detail_rows(result: ScoreResult) -> list[dict]:
    """채점 내역 → 표 행."""
    return [
        {
            "Question": d.number,
            "Your Answer": d.user_answer or "-",
            "Correct": d.correct_answer or "-",
            "Status": "✅" if d.is_correct else "❌",
        }
        for d in result.details
    ]


def render(machine: ExamSessionMachine, passing_score: int = PASSING_SCORE) -> None:
    """결과 화면 렌더링."""
    result = machine.session.result
    if result is None:
        st.warning("No result available.")
        return

    header_col, btn_col = st.columns([3, 1])
    with header_col:
        st.header("Exam Result")
    with btn_col:
        st.button(
            "New Attempt",
            key="new_attempt_btn",
            type="primary",
            use_container_width=True,
            on_click=_new_attempt,
            args=(machine,),
        )

    verdict = "PASS" if result.passed else "FAIL"
    message = f"{verdict} · {result.scaled_score}/1000 (required: {passing_score})"
    if result.passed:
        st.success(message)
    else:
        st.error(message)

    s1, s2 = st.columns(2)
    s1.metric("Correct", f"{result.correct}/{result.total}")
    s2.metric("Incorrect", result.incorrect)

    st.table(detail_rows(result))

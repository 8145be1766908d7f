"""
views/components/sidebar.py

문제 번호 네비게이션 그리드 컴포넌트.
각 번호를 클릭하면 해당 문제로 바로 이동한다.
"""

from __future__ import annotations

import streamlit as st

from saa_practice.services.session_machine import ExamSessionMachine


def render(machine: ExamSessionMachine) -> None:
    """
    사이드바에 진행 현황과 문제 번호 버튼 그리드를 렌더링한다.

    표시:
      - 현재 문제: primary 버튼
      - 답한 문제: 번호 뒤 체크 표시
    """
    session = machine.session
    questions = machine.questions
    total = len(questions)
    answered = len(session.answers)

    # ── 진행 현황 ──────────────────────────────────────────────────────────
    st.markdown(f"Answered: **{answered}** / {total}")
    st.progress(answered / total if total > 0 else 0)

    # ── 문제 번호 그리드 (5열) ─────────────────────────────────────────────
    cols_per_row = 5

    for row_start in range(0, total, cols_per_row):
        row_qs = questions[row_start : row_start + cols_per_row]
        cols = st.columns(cols_per_row)
        for col_idx, q in enumerate(row_qs):
            q_idx = row_start + col_idx
            is_answered = str(q.number) in session.answers
            label = f"{q.number}✓" if is_answered else str(q.number)

            with cols[col_idx]:
                if st.button(
                    label,
                    key=f"nav_{q_idx}",
                    type="primary" if q_idx == session.current_index else "secondary",
                    help=f"Go to question {q.number}",
                ):
                    machine.navigate(q_idx)
                    st.rerun()

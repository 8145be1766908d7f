"""
views/exam_view.py — 시험 풀기 화면

레이아웃:
  - st.sidebar : 타이머 + 문제 번호 네비게이터 + 초기화
  - 메인 영역  : 현재 문제 카드 + 이전/다음 + 최종 제출

상태 관리:
  - 모든 변경은 ExamSessionMachine 전이로만 한다 (저장은 머신이 담당)
  - 타이머 fragment가 1초마다 tick() → 시간 종료 시 자동 제출 후 전체 rerun
"""

from __future__ import annotations

from typing import Optional

import requests
import streamlit as st

from saa_practice.errors import ExamError, StaleTransitionError
from saa_practice.models.session_state import ExamPhase
from saa_practice.services.session_machine import ExamSessionMachine
from saa_practice.views.components import question_card as qcard
from saa_practice.views.components import sidebar as nav
from saa_practice.views.components import timer as tmr


def clear_widget_state() -> None:
    """이전 응시의 라디오/확인 상태 정리."""
    for key in [k for k in st.session_state if k.startswith("radio_")]:
        del st.session_state[key]
    for key in ("confirm_submit", "confirm_reset"):
        st.session_state.pop(key, None)


def refresh_timer(machine: ExamSessionMachine) -> Optional[str]:
    """
    tick() 한 번 수행. 자동 제출 중 채점 API 오류가 나면 메시지를 돌려준다
    (세션은 in_progress로 남고 다음 tick에서 다시 시도).
    """
    try:
        machine.tick()
    except (ExamError, requests.RequestException) as e:
        return f"Auto-submit failed, retrying: {e}"
    return None


@st.fragment(run_every=1)
def _timer_fragment(machine: ExamSessionMachine) -> None:
    error = refresh_timer(machine)
    if machine.phase is not ExamPhase.IN_PROGRESS:
        st.rerun()
    tmr.render(machine.remaining_seconds())
    if error:
        st.error(error)


def _submit(machine: ExamSessionMachine) -> None:
    st.session_state["confirm_submit"] = False
    try:
        machine.submit(auto=False)
    except StaleTransitionError:
        # 타이머가 먼저 자동 제출한 경우: 결과 화면으로 이동만 한다
        pass
    st.rerun()


def render(machine: ExamSessionMachine) -> None:
    """시험 화면 렌더링."""
    session = machine.session
    questions = machine.questions
    total = len(questions)
    current_idx = session.current_index
    current_q = questions[current_idx]

    # ── 사이드바 ───────────────────────────────────────────────────────────
    with st.sidebar:
        st.markdown("### Exam Timer")
        _timer_fragment(machine)
        st.divider()

        nav.render(machine)
        st.divider()

        if st.button("Reset Exam", key="reset_btn", use_container_width=True):
            st.session_state["confirm_reset"] = True
            st.rerun()

        if st.session_state.get("confirm_reset"):
            st.warning("Reset exam progress and timer?")
            col_yes, col_no = st.columns(2)
            with col_yes:
                if st.button("Reset", key="confirm_reset_yes", type="primary"):
                    machine.reset()
                    clear_widget_state()
                    st.rerun()
            with col_no:
                if st.button("Cancel", key="confirm_reset_no"):
                    st.session_state["confirm_reset"] = False
                    st.rerun()

    # ── 문제 카드 ─────────────────────────────────────────────────────────
    saved = session.answers.get(str(current_q.number))
    selected = qcard.render(
        question=current_q,
        position=current_idx + 1,
        total=total,
        saved_answer=saved,
    )

    # 선택한 답을 즉시 세션에 저장
    if selected and selected != saved:
        machine.select_answer(selected)

    # ── 이전 / 다음 / 제출 ────────────────────────────────────────────────
    st.divider()
    nav_left, nav_center, nav_right = st.columns([1, 2, 1])

    with nav_left:
        if st.button("← Previous", key="prev_btn", disabled=current_idx == 0,
                     use_container_width=True):
            machine.previous_question()
            st.rerun()

    with nav_center:
        if st.button("Submit", key="submit_btn", type="primary", use_container_width=True):
            st.session_state["confirm_submit"] = True
            st.rerun()

    with nav_right:
        if st.button("Next →", key="next_btn", disabled=current_idx == total - 1,
                     use_container_width=True):
            machine.next_question()
            st.rerun()

    # 수동 제출 확인 단계
    if st.session_state.get("confirm_submit"):
        unanswered = total - len(machine.session.answers)
        if unanswered > 0:
            st.warning(f"{unanswered} question(s) unanswered. Submit now?")
        else:
            st.info("Submit now?")
        col_yes, col_no = st.columns(2)
        with col_yes:
            if st.button("Submit", key="confirm_yes", type="primary"):
                _submit(machine)
        with col_no:
            if st.button("Cancel", key="confirm_no"):
                st.session_state["confirm_submit"] = False
                st.rerun()

"""
views/components/timer.py

남은 시험 시간을 HH:MM:SS로 렌더링하는 컴포넌트.
시험 제한 시간: 130분 (7800초). 15분 이하 경고, 5분 이하 위험 표시.
"""

import streamlit as st

_WARNING_SECONDS = 900
_DANGER_SECONDS = 300


def countdown_text(total_seconds: int) -> str:
    """초 → 'HH:MM:SS'. 음수는 0으로 취급."""
    clamped = max(0, int(total_seconds))
    hours = clamped // 3600
    minutes = (clamped % 3600) // 60
    seconds = clamped % 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def timer_class(seconds_left: int) -> str:
    if seconds_left <= _DANGER_SECONDS:
        return "timer danger"
    if seconds_left <= _WARNING_SECONDS:
        return "timer warning"
    return "timer"


def render(remaining_seconds: int) -> None:
    """
    남은 시간 표시.

    Args:
        remaining_seconds: ExamSessionMachine.remaining_seconds() 값
    """
    css_class = timer_class(remaining_seconds)
    icon = "⚠️ " if css_class != "timer" else "⏱ "

    st.markdown(
        f'<div class="{css_class}">{icon}{countdown_text(remaining_seconds)}</div>',
        unsafe_allow_html=True,
    )
    st.caption("Auto-submit when the timer reaches 00:00:00")

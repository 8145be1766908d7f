"""
views/components/question_card.py

단일 문제(Question)를 카드 형태로 렌더링하고
사용자가 선택한 보기 라벨을 반환하는 컴포넌트.
"""

from __future__ import annotations

from typing import Optional

import streamlit as st

from config import OPTION_LABELS
from saa_practice.models.question_model import Question


def radio_key(question: Question) -> str:
    return f"radio_{question.number}"


def render(
    question: Question,
    position: int,
    total: int,
    saved_answer: Optional[str] = None,
) -> Optional[str]:
    """
    문제 카드를 렌더링하고 사용자가 선택한 라벨('A'~'D')을 반환한다.

    Args:
        question:     렌더링할 Question 객체
        position:     전체 문제 중 몇 번째 문제인지 (1-based 표시용)
        total:        전체 문제 수
        saved_answer: 이미 저장된 이전 선택 (없으면 None)

    Returns:
        선택된 라벨, 아무것도 선택하지 않은 경우 None
    """

    # ── 문제 헤더 ──────────────────────────────────────────────────────────
    head_left, head_right = st.columns([4, 1])
    with head_left:
        st.subheader(f"Question {question.number}")
    with head_right:
        st.markdown(f"**{position} / {total}**")

    # ── 문제 본문 ──────────────────────────────────────────────────────────
    st.markdown(question.prompt)

    # ── 보기 선택 (Radio) ─────────────────────────────────────────────────
    key = radio_key(question)

    # 위젯 키가 없을 때만 saved_answer로 초기화 (재렌더 시 기존 값 유지)
    if key not in st.session_state:
        st.session_state[key] = saved_answer

    return st.radio(
        "Choose an option",
        options=list(OPTION_LABELS),
        format_func=lambda label: f"{label}. {question.options[label]}",
        key=key,
        label_visibility="collapsed",
    )

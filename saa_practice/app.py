"""
app.py — SAA 연습 시험 Streamlit UI 진입점

실행: streamlit run saa_practice/app.py  (API 서버 주소는 SAA_API_URL)
"""

import os
import sys

# streamlit은 스크립트 디렉토리만 sys.path에 넣으므로 프로젝트 루트를 추가
_BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _BASE_DIR not in sys.path:
    sys.path.insert(0, _BASE_DIR)

import requests
import streamlit as st

import config
from api.client import ExamApiClient
from saa_practice.errors import ExamError, StaleTransitionError
from saa_practice.models.session_state import ExamPhase
from saa_practice.services.session_machine import ExamSessionMachine
from saa_practice.services.session_store import SessionStore
from saa_practice.views import exam_view, home_view, result_view

st.set_page_config(page_title="SAA-C03 Practice Exam", layout="wide")

st.markdown(
    """
    <style>
    .timer { font-size: 1.8rem; font-weight: 700; font-variant-numeric: tabular-nums; }
    .timer.warning { color: #d97706; }
    .timer.danger { color: #dc2626; }
    </style>
    """,
    unsafe_allow_html=True,
)


@st.cache_resource
def _load_exam():
    """프로세스당 하나의 머신 (네임스페이스당 세션 하나)."""
    client = ExamApiClient()
    settings = client.get_config()
    listing = client.get_exam()
    machine = ExamSessionMachine(
        listing.questions,
        scorer=client.score,
        store=SessionStore(),
        duration=listing.exam_duration_seconds,
        tick_interval=config.TICK_INTERVAL_SECONDS,
    )
    machine.rehydrate()
    return listing, machine, settings.get("passingScore", config.PASSING_SCORE)


def main() -> None:
    try:
        listing, machine, passing_score = _load_exam()
    except (ExamError, requests.RequestException) as e:
        st.error(f"Could not load the exam: {e}")
        return

    try:
        if machine.phase is ExamPhase.NOT_STARTED:
            home_view.render(listing, machine, passing_score)
        elif machine.phase is ExamPhase.IN_PROGRESS:
            exam_view.render(machine)
        else:
            result_view.render(machine, passing_score)
    except StaleTransitionError:
        # 화면을 그리는 사이 타이머가 자동 제출함
        st.rerun()
    except (ExamError, requests.RequestException) as e:
        st.error(f"Error: {e}")


main()

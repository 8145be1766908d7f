"""
services/session_machine.py

시험 응시 세션 상태 머신.

    not_started --start()--> in_progress --submit()/시간 종료--> submitted
         ^                                                         |
         +------------------------- reset() -----------------------+

- 모든 전이는 하나의 RLock 아래에서 실행되고, 새 세션 값을 먼저 저장한 뒤
  메모리 값을 교체한다 (저장 + 변경이 한 단위).
- 머신은 문제의 형태(번호/발문/보기)만 알고 정답표는 모른다.
  채점은 주입된 scorer(answers)에게 맡긴다.
- 시간은 clock 주입 또는 tick(now) 인자로 받는다 (테스트에서 실제 대기 없음).
"""

import logging
import math
import threading
import time
from typing import Callable, Dict, Optional, Sequence, Tuple

from config import EXAM_DURATION_SECONDS, OPTION_LABELS
from saa_practice.errors import (
    CorruptPersistedStateError, EmptyExamError, InvalidPayloadError, StaleTransitionError,
)
from saa_practice.models.question_model import Question
from saa_practice.models.session_state import ExamPhase, ExamSession, ScoreResult
from saa_practice.services.session_store import SessionStore
from saa_practice.services.ticker import SessionTicker

logger = logging.getLogger(__name__)

Scorer = Callable[[Dict[str, str]], ScoreResult]


class ExamSessionMachine:
    def __init__(
        self,
        questions: Sequence[Question],
        scorer: Scorer,
        store: Optional[SessionStore] = None,
        clock: Callable[[], float] = time.time,
        duration: int = EXAM_DURATION_SECONDS,
        tick_interval: Optional[float] = None,
    ):
        """
        Args:
            questions:     응시할 문제 목록 (번호 오름차순, 정답 정보 없음).
            scorer:        답안 스냅샷을 받아 ScoreResult를 돌려주는 채점 함수.
            store:         세션 저장소 (기본: SESSION_DIR의 고정 네임스페이스).
            clock:         현재 시각 (Unix timestamp) 공급 함수.
            duration:      시험 제한 시간 (초).
            tick_interval: 지정하면 진행 중 백그라운드 타이머가 interval초마다 tick()을 호출.
        """
        if not questions:
            raise EmptyExamError("응시할 문제가 없습니다.")
        self._questions: Tuple[Question, ...] = tuple(questions)
        self._scorer = scorer
        self._store = store if store is not None else SessionStore()
        self._clock = clock
        self._duration = duration
        self._lock = threading.RLock()
        self._session = ExamSession()
        self._ticker = SessionTicker(self.tick, tick_interval) if tick_interval else None

    # ── 조회 ─────────────────────────────────────────────────────────────────

    @property
    def questions(self) -> Tuple[Question, ...]:
        return self._questions

    @property
    def session(self) -> ExamSession:
        with self._lock:
            return self._session.model_copy(deep=True)

    @property
    def phase(self) -> ExamPhase:
        return self._session.phase

    @property
    def duration(self) -> int:
        return self._duration

    @property
    def current_question(self) -> Question:
        return self._questions[self._session.current_index]

    @property
    def answered_count(self) -> int:
        return len(self._session.answers)

    def remaining_seconds(self, now: Optional[float] = None) -> int:
        """표시용 남은 시간 (초, 반올림). 만료 판정에는 쓰지 않는다."""
        deadline = self._session.deadline
        if deadline is None:
            return self._duration
        return max(0, math.floor(deadline - self._now(now) + 0.5))

    # ── 전이 ─────────────────────────────────────────────────────────────────

    def start(self, now: Optional[float] = None) -> ExamSession:
        with self._lock:
            self._require(ExamPhase.NOT_STARTED, "start")
            session = ExamSession(
                phase=ExamPhase.IN_PROGRESS,
                current_index=0,
                answers={},
                deadline=self._now(now) + self._duration,
                result=None,
            )
            self._commit(session)
            logger.info(f"시험 시작: {len(self._questions)}문제, 제한 {self._duration}초")
        self._start_ticker()
        return self.session

    def select_answer(self, label: str) -> None:
        if label not in OPTION_LABELS:
            raise InvalidPayloadError(f"알 수 없는 보기 라벨: {label!r}")
        with self._lock:
            self._require(ExamPhase.IN_PROGRESS, "select_answer")
            answers = dict(self._session.answers)
            answers[str(self.current_question.number)] = label
            self._commit(self._session.model_copy(update={"answers": answers}))

    def navigate(self, index: int) -> int:
        with self._lock:
            self._require(ExamPhase.IN_PROGRESS, "navigate")
            idx = max(0, min(int(index), len(self._questions) - 1))
            self._commit(self._session.model_copy(update={"current_index": idx}))
            return idx

    def next_question(self) -> int:
        with self._lock:
            return self.navigate(self._session.current_index + 1)

    def previous_question(self) -> int:
        with self._lock:
            return self.navigate(self._session.current_index - 1)

    def tick(self, now: Optional[float] = None) -> Optional[float]:
        """
        현재 시각을 샘플링한다.

        Returns:
            남은 시간(초, deadline - now). 진행 중이 아니면 None.
            남은 시간이 0 이하이면 자동 제출을 한 번 수행한다.
        """
        with self._lock:
            if self._session.phase is not ExamPhase.IN_PROGRESS:
                return None
            remaining = self._session.deadline - self._now(now)
            if remaining > 0:
                return remaining
            logger.info("시험 시간 종료: 자동 제출")
            self._finalize(auto=True)
        self._stop_ticker()
        return remaining

    def submit(
        self,
        auto: bool = False,
        confirm: Optional[Callable[[], bool]] = None,
    ) -> Optional[ScoreResult]:
        """
        답안을 채점하고 세션을 종료한다.

        수동 제출(auto=False)에 confirm이 주어지면 confirm()이 True일 때만 진행한다.
        채점 오류는 그대로 전파되며 세션은 변경되지 않는다.
        """
        if not auto and confirm is not None and not confirm():
            return None

        with self._lock:
            self._require(ExamPhase.IN_PROGRESS, "submit")
            result = self._finalize(auto)
        self._stop_ticker()
        return result

    def reset(self) -> None:
        with self._lock:
            self._store.clear()
            self._session = ExamSession()
            logger.info("시험 세션 초기화")
        self._stop_ticker()

    def rehydrate(self, now: Optional[float] = None) -> ExamSession:
        """
        저장된 세션을 그대로 복원한다.
        레코드가 없거나 손상되었으면 not_started로 시작하고, 이미 만료된 진행 중
        세션은 즉시 한 번 자동 제출한다.
        """
        with self._lock:
            try:
                stored = self._store.load()
            except CorruptPersistedStateError as e:
                logger.warning(f"저장된 세션이 손상되어 폐기합니다: {e}")
                self._store.clear()
                stored = None

            if stored is None:
                self._session = ExamSession()
                return self.session

            last_index = len(self._questions) - 1
            if stored.current_index > last_index:
                stored = stored.model_copy(update={"current_index": last_index})
            self._session = stored
            logger.info(f"세션 복원: {stored.phase.value}, 답안 {len(stored.answers)}개")

        self.tick(now)
        if self._session.phase is ExamPhase.IN_PROGRESS:
            self._start_ticker()
        return self.session

    def close(self) -> None:
        self._stop_ticker()

    # ── 내부 ─────────────────────────────────────────────────────────────────

    def _now(self, now: Optional[float]) -> float:
        return self._clock() if now is None else now

    def _require(self, phase: ExamPhase, action: str) -> None:
        if self._session.phase is not phase:
            raise StaleTransitionError(
                f"{action}: 현재 단계({self._session.phase.value})에서는 허용되지 않습니다."
            )

    def _finalize(self, auto: bool) -> ScoreResult:
        # 호출 측이 lock을 잡고 in_progress임을 확인한 상태여야 한다
        result = self._scorer(dict(self._session.answers))
        self._commit(self._session.model_copy(
            update={"phase": ExamPhase.SUBMITTED, "result": result}
        ))
        logger.info(
            f"시험 제출({'자동' if auto else '수동'}): "
            f"{result.correct}/{result.total}, {result.scaled_score}점"
        )
        return result

    def _commit(self, session: ExamSession) -> None:
        self._store.save(session)
        self._session = session

    def _start_ticker(self) -> None:
        if self._ticker is not None and self._session.phase is ExamPhase.IN_PROGRESS:
            self._ticker.start()

    def _stop_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.stop()

"""
models/session_state.py

시험 진행 상태(OMR 카드)와 채점 결과 모델.
Pydantic BaseModel 기반: 저장 레코드(JSON) 직렬화/역직렬화 및 형태 검증 담당.
UI 코드 없음.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from config import MAX_SCALED_SCORE

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExamPhase(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"


class AnswerDetail(BaseModel):
    """문제별 채점 내역."""
    model_config = ConfigDict(frozen=True, **_CAMEL)

    number: int
    user_answer: Optional[str] = None
    correct_answer: Optional[str] = None
    is_correct: bool = False


class ScoreResult(BaseModel):
    """
    채점 결과. 한 번 계산되면 변경되지 않는다.

    Attributes:
        total:        채점 대상 문제 수.
        correct:      정답 수.
        incorrect:    total - correct (미응답 포함).
        scaled_score: 0 ~ 1000 환산 점수.
        passed:       scaled_score >= 720.
        details:      문제 번호 오름차순 채점 내역.
    """
    model_config = ConfigDict(frozen=True, **_CAMEL)

    total: int = Field(..., ge=0)
    correct: int = Field(..., ge=0)
    incorrect: int = Field(..., ge=0)
    scaled_score: int = Field(..., ge=0, le=MAX_SCALED_SCORE)
    passed: bool
    details: List[AnswerDetail] = Field(default_factory=list)


class ExamSession(BaseModel):
    """
    한 번의 시험 응시 전체 상태.

    Attributes:
        phase:         not_started -> in_progress -> submitted.
        current_index: 현재 문제의 인덱스 (0-based).
        answers:       답안지. {str(question.number): 선택한 라벨}
        deadline:      종료 시각 (time.time() 기준 Unix timestamp). 시작 전에는 None.
        result:        제출 후 채점 결과. 제출 전에는 None.
    """
    model_config = _CAMEL

    phase: ExamPhase = ExamPhase.NOT_STARTED
    current_index: int = Field(
        default=0,
        ge=0,
        description="현재 풀고 있는 문제 인덱스 (0-based)"
    )
    answers: Dict[str, str] = Field(
        default_factory=dict,
        description="사용자 답안지. key: str(question.number), value: 'A'~'D'"
    )
    deadline: Optional[float] = Field(
        default=None,
        allow_inf_nan=False,
        description="시험 종료 시각 (Unix timestamp)"
    )
    result: Optional[ScoreResult] = None

    @model_validator(mode='after')
    def validate_phase_shape(self) -> 'ExamSession':
        """
        단계별 필수 필드 검증. 저장 레코드가 깨진 경우를 걸러낸다.
        """
        if self.phase is ExamPhase.IN_PROGRESS and self.deadline is None:
            raise ValueError("진행 중인 세션에는 deadline이 필요합니다.")
        if self.phase is ExamPhase.SUBMITTED and self.result is None:
            raise ValueError("제출된 세션에는 result가 필요합니다.")
        if self.phase is ExamPhase.NOT_STARTED and (self.deadline is not None or self.result is not None):
            raise ValueError("시작 전 세션에는 deadline/result가 없어야 합니다.")
        return self

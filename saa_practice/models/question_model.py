from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from config import EXAM_DURATION_SECONDS, OPTION_LABELS


class Question(BaseModel):
    """
    SAA 연습 시험 문제 모델 (정답 정보 없음).
    정답은 AnswerKey로 분리되어 응시 측에 전달되지 않는다.
    """
    model_config = ConfigDict(frozen=True)

    number: int = Field(
        ...,
        gt=0,
        description="문제 번호 (문서에 적힌 번호, 고유 키)"
    )
    prompt: str = Field(
        ...,
        min_length=1,
        description="발문/문제 내용"
    )
    options: Dict[str, str] = Field(
        ...,
        description="보기 매핑. key: 'A'~'D', value: 보기 텍스트"
    )

    @field_validator('options')
    @classmethod
    def validate_option_labels(cls, v: Dict[str, str]) -> Dict[str, str]:
        """
        검증 로직: 보기는 A, B, C, D 정확히 4개여야 한다.
        """
        if sorted(v) != list(OPTION_LABELS):
            raise ValueError(f"보기(options)는 {OPTION_LABELS} 4개가 모두 필요합니다: {sorted(v)}")
        return v


class ParsedExam(BaseModel):
    """
    파싱 결과. 문제 목록(번호 오름차순)과 정답표(번호 -> 정답 라벨).
    같은 텍스트는 항상 같은 ParsedExam을 만든다.
    """
    model_config = ConfigDict(frozen=True)

    questions: Tuple[Question, ...] = ()
    answer_key: Dict[int, str] = Field(default_factory=dict)

    def correct_answer(self, number: int) -> Optional[str]:
        return self.answer_key.get(number)

    @property
    def total(self) -> int:
        return len(self.questions)


class ExamListing(BaseModel):
    """응시 측에 내려주는 문제 목록. 정답표는 절대 포함하지 않는다."""
    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    title: str = ""
    total_questions: int
    exam_duration_seconds: int = EXAM_DURATION_SECONDS
    questions: Tuple[Question, ...] = ()

"""
services/exam_service.py

시험 채점 및 응시용 문제 목록 생성 비즈니스 로직.
순수 Python 함수로 구성: UI 코드, 전역 상태 변경 없음.
"""

import re
from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import List, Union

from config import EXAM_DURATION_SECONDS, MAX_SCALED_SCORE, PASSING_SCORE
from saa_practice.errors import EmptyExamError, InvalidPayloadError
from saa_practice.models.question_model import ExamListing, ParsedExam
from saa_practice.models.session_state import AnswerDetail, ScoreResult
from saa_practice.services.exam_parser import parse


def score(
    exam: Union[str, ParsedExam],
    answers: Mapping,
) -> ScoreResult:
    """
    사용자 답안을 채점하여 1000점 만점 환산 결과를 반환한다.

    정답 판정 기준: 문서 정답표의 라벨 == answers.get(str(question.number))
    (대소문자 구분). 응답하지 않은 문제, 정답표에 없는 문제는 오답으로 처리.
    호출 측이 넘긴 정답 정보는 사용하지 않는다: 정답표는 항상 원본 문서에서 얻는다.

    Args:
        exam:    원본 시험 문서 텍스트(재파싱) 또는 이미 파싱된 ParsedExam.
        answers: 사용자 답안지. {str(question.number): 'A'~'D'}

    Returns:
        ScoreResult (문제 번호 오름차순 details 포함).

    Raises:
        InvalidPayloadError: answers가 {str: str} 매핑이 아닌 경우.
        EmptyExamError:      유효한 문제가 하나도 없는 경우.
    """
    _validate_answers(answers)

    parsed = parse(exam) if isinstance(exam, str) else exam
    if not parsed.questions:
        raise EmptyExamError("시험 문서에서 유효한 문제를 찾지 못했습니다.")

    details: List[AnswerDetail] = []
    for q in parsed.questions:
        user_answer = answers.get(str(q.number)) or None
        correct_answer = parsed.correct_answer(q.number)
        details.append(AnswerDetail(
            number=q.number,
            user_answer=user_answer,
            correct_answer=correct_answer,
            is_correct=user_answer is not None and user_answer == correct_answer,
        ))

    total = len(details)
    correct = sum(1 for d in details if d.is_correct)
    scaled = scaled_score(correct, total)

    return ScoreResult(
        total=total,
        correct=correct,
        incorrect=total - correct,
        scaled_score=scaled,
        passed=is_passed(scaled),
        details=details,
    )


def scaled_score(correct: int, total: int) -> int:
    """
    정답 비율을 0 ~ 1000 점수로 환산한다.

    .5는 0에서 먼 쪽으로 반올림(ROUND_HALF_UP)한다. 720 경계 판정에 영향을
    주므로 float 대신 Decimal로 정확히 계산한다.
    """
    if total <= 0:
        return 0
    value = Decimal(correct * MAX_SCALED_SCORE) / Decimal(total)
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def is_passed(scaled: int, pass_score: int = PASSING_SCORE) -> bool:
    """
    합격 여부를 반환한다.

    Args:
        scaled:     scaled_score()가 반환한 점수 (0 ~ 1000).
        pass_score: 합격 기준 점수 (기본값 720점).

    Returns:
        scaled >= pass_score 이면 True, 아니면 False.
    """
    return scaled >= pass_score


def build_listing(
    parsed: ParsedExam,
    title: str = "",
    duration: int = EXAM_DURATION_SECONDS,
) -> ExamListing:
    """응시용 문제 목록. 정답표는 포함하지 않는다."""
    if not parsed.questions:
        raise EmptyExamError("시험 문서에서 유효한 문제를 찾지 못했습니다.")
    return ExamListing(
        title=title,
        total_questions=parsed.total,
        exam_duration_seconds=duration,
        questions=parsed.questions,
    )


def title_from_markdown(filename: str, content: str) -> str:
    """첫 번째 '# 제목' 줄, 없으면 확장자를 뺀 파일명."""
    heading = re.search(r"^\s*#\s+(.+)$", content, re.MULTILINE)
    if heading:
        return heading.group(1).strip()
    return Path(filename).stem


def _validate_answers(answers) -> None:
    if not isinstance(answers, Mapping):
        raise InvalidPayloadError("Invalid answers payload.")
    for key, value in answers.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise InvalidPayloadError("Invalid answers payload.")

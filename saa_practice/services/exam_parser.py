"""
services/exam_parser.py

마크다운 시험 문서 파싱 서비스.
Public API:
  - parse(raw_text) -> ParsedExam          : 문제 블록 + 정답표 추출
  - parse_cached(raw_text) -> ParsedExam   : 같은 텍스트에 대한 메모이즈 버전
  - parse_answer_key(raw_text) -> dict     : 정답표만 추출

문서 형식:
    ### Câu 7
    발문 ...

    **A.** 보기 A
    **B.** 보기 B
    **C.** 보기 C
    **D.** 보기 D
    ---
    ...
    **Câu 7: C**

설계 원칙:
- 문서 전체 정규식 대신 줄 단위 스캐너 (헤딩 감지 → 블록 누적 → 보기 분리)
- 형식이 깨진 블록(보기 4개 아님, 빈 발문, 구분선 없음)은 조용히 제외
- 정답표는 문제 추출과 독립적으로 문서 전체에서 수집, 뒤에 나온 항목이 우선
- 부수효과 없음: 같은 텍스트는 항상 같은 결과
"""

import logging
import re
import unicodedata
from functools import lru_cache
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from pydantic import ValidationError

from config import OPTION_LABELS
from saa_practice.models.question_model import ParsedExam, Question

logger = logging.getLogger(__name__)

# ── 상수 ─────────────────────────────────────────────────────────────────────
_HEADING_RE = re.compile(r"^\s*#{1,6}\s*(?i:câu|question)\s*(\d+)\s*$")
_OPTION_RE = re.compile(r"^\s*\*\*([A-D])\.\*\*\s*(.*)$")
_ANSWER_RE = re.compile(r"\*\*(?i:câu|question)\s*(\d+)\s*:\s*([A-D])\*\*")
_SEPARATOR = "---"


# ══════════════════════════════════════════════════════════════════════════════
# Public API
# ══════════════════════════════════════════════════════════════════════════════

def parse(raw_text: str) -> ParsedExam:
    """
    시험 문서 텍스트 → ParsedExam.

    문제는 번호 오름차순으로 정렬되며, 같은 번호가 여러 번 나오면
    마지막으로 파싱된 유효 블록이 남는다.
    """
    text = _normalize(raw_text)
    answer_key = parse_answer_key(text)

    by_number: Dict[int, Question] = {}
    dropped = 0
    for number, body in _scan_blocks(text.splitlines()):
        question = _build_question(number, body)
        if question is None:
            dropped += 1
            continue
        if number in by_number:
            logger.debug(f"Q{number}: 중복 번호: 마지막 블록으로 덮어씀")
        by_number[number] = question

    questions = tuple(by_number[n] for n in sorted(by_number))
    logger.info(
        f"parse: {len(questions)}개 문제 추출, 정답 {len(answer_key)}개, 제외된 블록 {dropped}개"
    )
    return ParsedExam(questions=questions, answer_key=answer_key)


@lru_cache(maxsize=8)
def parse_cached(raw_text: str) -> ParsedExam:
    """parse()의 메모이즈 버전. 반환값을 변경하지 말 것."""
    return parse(raw_text)


def parse_answer_key(raw_text: str) -> Dict[int, str]:
    """문서 어디서든 '**Câu N: X**' 형식을 찾아 {N: X} 정답표를 만든다."""
    answer_key: Dict[int, str] = {}
    for match in _ANSWER_RE.finditer(_normalize(raw_text)):
        answer_key[int(match.group(1))] = match.group(2)
    return answer_key


# ══════════════════════════════════════════════════════════════════════════════
# 스캐너
# ══════════════════════════════════════════════════════════════════════════════

def _normalize(raw_text: str) -> str:
    # 'Câu'가 조합형(NFD)으로 저장된 문서도 같은 헤딩으로 인식
    return unicodedata.normalize("NFC", raw_text or "")


def _scan_blocks(lines: Iterable[str]) -> Iterator[Tuple[int, List[str]]]:
    """
    헤딩 ~ 구분선 사이의 블록을 (문제 번호, 본문 줄 리스트)로 순서대로 내보낸다.
    구분선으로 닫히지 않은 블록은 내보내지 않는다.
    """
    number: Optional[int] = None
    body: List[str] = []

    for line in lines:
        heading = _HEADING_RE.match(line)
        if heading:
            if number is not None:
                logger.debug(f"Q{number}: 구분선 없이 다음 헤딩이 시작됨: 블록 제외")
            number = int(heading.group(1))
            body = []
            continue

        if number is None:
            continue

        if line.strip() == _SEPARATOR:
            yield number, body
            number = None
            body = []
        else:
            body.append(line)

    if number is not None:
        logger.debug(f"Q{number}: 문서 끝까지 구분선 없음: 블록 제외")


def _split_options(body: List[str]) -> Tuple[str, Dict[str, str]]:
    """
    블록 본문 → (발문, {라벨: 보기 텍스트}).
    보기 구간은 다음 보기 라벨 또는 블록 끝까지 이어진다.
    """
    prompt_lines: List[str] = []
    segments: Dict[str, List[str]] = {}
    label: Optional[str] = None

    for line in body:
        option = _OPTION_RE.match(line)
        if option:
            label = option.group(1)
            segments[label] = [option.group(2)]
        elif label is None:
            prompt_lines.append(line)
        else:
            segments[label].append(line)

    prompt = "\n".join(prompt_lines).strip()
    options = {
        key: "\n".join(segments[key]).strip()
        for key in OPTION_LABELS
        if key in segments
    }
    return prompt, options


def _build_question(number: int, body: List[str]) -> Optional[Question]:
    prompt, options = _split_options(body)

    if not prompt:
        logger.debug(f"Q{number}: 발문 없음: 제외")
        return None
    if len(options) != len(OPTION_LABELS):
        logger.debug(f"Q{number}: 보기 {len(options)}개: 제외")
        return None

    try:
        return Question(number=number, prompt=prompt, options=options)
    except ValidationError as e:
        logger.debug(f"Q{number}: Question 생성 실패: {e}")
        return None

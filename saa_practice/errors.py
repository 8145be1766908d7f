"""
errors.py

시험 엔진 예외 계층.
라우트/클라이언트가 종류별로 구분해 메시지를 표시할 수 있도록 분리한다.
"""


class ExamError(Exception):
    """시험 엔진 예외의 공통 부모."""


class EmptyExamError(ExamError, ValueError):
    """문서에서 유효한 문제를 하나도 추출하지 못함."""


class InvalidPayloadError(ExamError, ValueError):
    """제출된 답안이 {str: str} 매핑이 아님."""


class StaleTransitionError(ExamError, RuntimeError):
    """현재 단계(phase)에서 허용되지 않는 전이 요청."""


class CorruptPersistedStateError(ExamError):
    """저장된 세션 레코드를 읽을 수 없거나 형태 검증에 실패함."""


class DocumentNotFoundError(ExamError, FileNotFoundError):
    """시험 문서를 찾을 수 없음."""

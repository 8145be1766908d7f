"""
services/document_source.py

시험 문서 원문 공급자.
엔진은 문서를 어디서(파일/메모리) 가져오는지 알 필요가 없다.
"""

import logging
import os

from config import EXAM_FILE, PRACTICES_DIR
from saa_practice.errors import DocumentNotFoundError
from saa_practice.models.question_model import ParsedExam
from saa_practice.services.exam_parser import parse_cached
from saa_practice.services.exam_service import title_from_markdown

logger = logging.getLogger(__name__)


class DocumentSource:
    """고정된 하나의 시험 문서를 공급하는 공통 인터페이스."""

    filename: str = EXAM_FILE

    def read(self) -> str:
        raise NotImplementedError

    def parsed(self) -> ParsedExam:
        """현재 원문의 파싱 결과 (같은 텍스트면 캐시 재사용)."""
        return parse_cached(self.read())

    def title(self) -> str:
        return title_from_markdown(self.filename, self.read())


class FileDocumentSource(DocumentSource):
    """PRACTICES_DIR 아래의 마크다운 파일. 호출할 때마다 새로 읽는다."""

    def __init__(self, directory: str = PRACTICES_DIR, filename: str = EXAM_FILE):
        self.directory = directory
        self.filename = filename

    @property
    def path(self) -> str:
        return os.path.join(self.directory, self.filename)

    def read(self) -> str:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            logger.error(f"시험 문서 없음: {self.path}")
            raise DocumentNotFoundError(f"Exam document not found: {self.filename}")


class InMemoryDocumentSource(DocumentSource):
    """메모리에 보관된 문서 (테스트/임베딩용)."""

    def __init__(self, text: str, filename: str = EXAM_FILE):
        self.text = text
        self.filename = filename

    def read(self) -> str:
        return self.text

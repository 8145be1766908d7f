"""
services/session_store.py

시험 세션 레코드의 로컬 영구 저장소.
네임스페이스 하나당 JSON 파일 하나 (<directory>/<namespace>.json).
네임스페이스당 살아 있는 세션은 하나뿐이다.
"""

import logging
import os
from typing import Optional

from pydantic import ValidationError

from config import SESSION_DIR, SESSION_NAMESPACE
from saa_practice.errors import CorruptPersistedStateError
from saa_practice.models.session_state import ExamSession

logger = logging.getLogger(__name__)


class SessionStore:
    def __init__(self, directory: str = SESSION_DIR, namespace: str = SESSION_NAMESPACE):
        self.directory = directory
        self.namespace = namespace

    @property
    def path(self) -> str:
        return os.path.join(self.directory, f"{self.namespace}.json")

    def save(self, session: ExamSession) -> None:
        """세션 전체를 직렬화해 기록. 임시 파일에 쓴 뒤 교체하므로 중간 상태가 남지 않는다."""
        os.makedirs(self.directory, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(session.model_dump_json(by_alias=True, indent=2))
        os.replace(tmp_path, self.path)

    def load(self) -> Optional[ExamSession]:
        """
        저장된 세션을 읽는다.

        Returns:
            ExamSession, 레코드가 없으면 None.

        Raises:
            CorruptPersistedStateError: 파일을 읽을 수 없거나 형태 검증에 실패한 경우.
        """
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = f.read()
            return ExamSession.model_validate_json(raw)
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            raise CorruptPersistedStateError(f"{self.path}: {e}") from e

    def clear(self) -> None:
        try:
            os.remove(self.path)
        except FileNotFoundError:
            pass

"""
api/client.py — 응시 측(UI)에서 쓰는 HTTP 클라이언트

응시 측은 정답 없는 문제 목록만 받고, 채점은 서버에 맡긴다.
"""

import logging
from typing import Any, Dict, Mapping, Optional

import requests

from config import API_TIMEOUT, API_URL
from saa_practice.errors import DocumentNotFoundError, EmptyExamError, InvalidPayloadError
from saa_practice.models.question_model import ExamListing
from saa_practice.models.session_state import ScoreResult

logger = logging.getLogger(__name__)


class ExamApiClient:
    def __init__(self, base_url: str = API_URL, http: Optional[Any] = None, timeout: float = API_TIMEOUT):
        """
        Args:
            base_url: API 서버 주소 (예: http://127.0.0.1:8000).
            http:     requests.Session 호환 객체 (get/post). 기본값은 새 Session.
            timeout:  요청 제한 시간 (초).
        """
        self.base_url = base_url.rstrip("/")
        self.http = http if http is not None else requests.Session()
        self.timeout = timeout

    def get_config(self) -> Dict[str, Any]:
        return self._request("GET", "/api/config").json()

    def get_exam(self) -> ExamListing:
        return ExamListing.model_validate(self._request("GET", "/api/exam").json())

    def score(self, answers: Mapping[str, str]) -> ScoreResult:
        response = self._request("POST", "/api/exam/score", json={"answers": dict(answers)})
        return ScoreResult.model_validate(response.json())

    def _request(self, method: str, path: str, **kwargs):
        url = f"{self.base_url}{path}"
        if method == "GET":
            response = self.http.get(url, timeout=self.timeout, **kwargs)
        else:
            response = self.http.post(url, timeout=self.timeout, **kwargs)

        if response.status_code >= 400:
            detail = _detail(response)
            logger.warning(f"{method} {path} 실패: {response.status_code}: {detail}")
            if response.status_code == 400:
                raise InvalidPayloadError(detail)
            if response.status_code == 404:
                raise DocumentNotFoundError(detail)
            if response.status_code == 422:
                raise EmptyExamError(detail)
            response.raise_for_status()
        return response


def _detail(response) -> str:
    try:
        return str(response.json().get("detail", "Request failed"))
    except (ValueError, AttributeError):
        return "Request failed"

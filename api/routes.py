"""
api/routes.py — FastAPI 엔드포인트

정답표는 /api/exam 응답에 절대 포함하지 않는다.
채점은 항상 서버가 원본 문서를 다시 파싱해서 얻은 정답표로만 한다.
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request
from fastapi.concurrency import run_in_threadpool

import config
from saa_practice.errors import DocumentNotFoundError, EmptyExamError, InvalidPayloadError
from saa_practice.models.question_model import ExamListing
from saa_practice.models.session_state import ScoreResult
from saa_practice.services.document_source import DocumentSource
from saa_practice.services.exam_service import build_listing, score

logger = logging.getLogger(__name__)

router = APIRouter()


# ── 헬퍼 ─────────────────────────────────────────────────────────────────────

def _source(request: Request) -> DocumentSource:
    return request.app.state.document_source


async def _answers_from_body(request: Request) -> Any:
    """요청 본문 {"answers": {...}}에서 답안지를 꺼낸다. 형태가 다르면 InvalidPayloadError (-> 400)."""
    raw = await request.body()
    try:
        payload = json.loads(raw) if raw else None
    except (ValueError, UnicodeDecodeError):
        raise InvalidPayloadError("Invalid answers payload.")
    if not isinstance(payload, dict):
        raise InvalidPayloadError("Invalid answers payload.")
    # 매핑 형태 검증은 채점 엔진이 한다
    return payload.get("answers")


# ── 엔드포인트 ───────────────────────────────────────────────────────────────

@router.get("/api/config")
async def get_config():
    return {
        "appDomain": config.APP_DOMAIN,
        "examDurationSeconds": config.EXAM_DURATION_SECONDS,
        "passingScore": config.PASSING_SCORE,
    }


@router.get("/api/exam", response_model=ExamListing)
def get_exam(request: Request):
    source = _source(request)
    try:
        return build_listing(source.parsed(), title=source.title())
    except DocumentNotFoundError:
        raise HTTPException(status_code=404, detail="Exam document not found.")
    except EmptyExamError:
        raise HTTPException(status_code=422, detail="The exam document has no valid questions.")
    except Exception:
        logger.exception("문제 목록 생성 실패")
        raise HTTPException(status_code=500, detail="Failed to parse exam.")


@router.post("/api/exam/score", response_model=ScoreResult)
async def score_exam(request: Request):
    try:
        answers = await _answers_from_body(request)
        source = _source(request)
        return await run_in_threadpool(lambda: score(source.read(), answers))
    except InvalidPayloadError:
        raise HTTPException(status_code=400, detail="Invalid answers payload.")
    except DocumentNotFoundError:
        raise HTTPException(status_code=404, detail="Exam document not found.")
    except EmptyExamError:
        raise HTTPException(status_code=422, detail="The exam document has no valid questions.")
    except Exception:
        logger.exception("채점 실패")
        raise HTTPException(status_code=500, detail="Failed to calculate exam score.")

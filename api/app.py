"""
api/app.py — FastAPI 앱 인스턴스 + 시험 문서 공급자 연결
"""

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import router
from saa_practice.services.document_source import DocumentSource, FileDocumentSource


def create_app(document_source: Optional[DocumentSource] = None) -> FastAPI:
    app = FastAPI(title="SAA Practice Exam", docs_url=None, redoc_url=None)

    # 채점/문제 목록 API는 문서 하나에 고정 (테스트에서는 메모리 문서로 교체)
    app.state.document_source = document_source or FileDocumentSource()

    # CORS (Streamlit UI 등 다른 포트의 클라이언트 허용)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app

# recipeshare/main.py
# FastAPI 앱 초기화 및 라우터 설정
# 라우터는 리소스별로 분리하여 관리, DB 핸들은 app.state에 보관

from __future__ import annotations
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from motor.motor_asyncio import AsyncIOMotorDatabase

from recipeshare.api.routes_ingredients import router as ingredients_router
from recipeshare.api.routes_recipes import router as recipes_router
from recipeshare.core.config import settings
from recipeshare.core.errors import ServiceError, service_error_handler, validation_exception_handler
from recipeshare.db.indexes import ensure_indexes
from recipeshare.db.init import close_db, init_db_with_retry

logging.basicConfig(level=settings.LOG_LEVEL)
log = logging.getLogger(__name__)


def create_app(db: Optional[AsyncIOMotorDatabase] = None) -> FastAPI:
    """
    db를 넘기면 그 핸들을 그대로 사용(테스트/스크립트),
    없으면 startup에서 MONGO_URI로 접속한다.
    """
    app = FastAPI(title="Recipe Share - API", version="0.1.0")
    app.state.mongo_client = None
    app.state.db = db

    # CORS: 모바일/웹 개발 서버 허용
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # 앱 시작/종료 이벤트 핸들러
    @app.on_event("startup")
    async def on_startup() -> None:
        # 1) DB 먼저 붙는다
        if app.state.db is None:
            client, handle = await init_db_with_retry(
                settings.MONGO_URI, settings.MONGO_DB, retries=settings.DB_INIT_RETRIES
            )
            app.state.mongo_client = client
            app.state.db = handle

        # 2) 인덱스 보장 (name_key 유니크 포함 — 실패하면 부팅 중단)
        await ensure_indexes(app.state.db)
        log.info("indexes ensured")

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        # 몽고db 커넥션 정리 (직접 만든 클라이언트만)
        close_db(app.state.mongo_client)
        app.state.mongo_client = None
        log.info("db closed")

    @app.get("/")
    async def root():
        return {"status": "ok"}

    @app.get("/health")
    async def health(request: Request):
        ok = {"status": "ok", "db": "skip"}
        db = request.app.state.db
        if db is not None:
            try:
                await db.command("ping")
                ok["db"] = "ok"
            except Exception as e:
                ok["db"] = f"error: {e}"
        return ok

    # 라우터 prefix는 각 파일 내에서 정의함 , 중복 prefix 금지
    app.include_router(recipes_router)
    app.include_router(ingredients_router)
    return app


app = create_app()

# recipeshare/db/init.py
# Mongo 연결 유틸 — motor
# 전역 변수 대신 핸들을 돌려주고, 보관/정리는 main(create_app)이 맡는다

from __future__ import annotations
import asyncio
import logging
from typing import Tuple

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

log = logging.getLogger(__name__)


async def init_db(uri: str, name: str) -> Tuple[AsyncIOMotorClient, AsyncIOMotorDatabase]:
    # 앱 시작 시 1회 호출
    client = AsyncIOMotorClient(uri)
    db = client[name]
    try:
        # 연결 확인 (준비 안 됐으면 예외)
        await db.command("ping")
    except Exception:
        client.close()
        raise
    return client, db


async def init_db_with_retry(uri: str, name: str, retries: int = 20, delay: float = 1.0):
    # 도커에서 mongo가 API보다 늦게 뜨는 경우 대비
    last_exc: Exception | None = None
    for i in range(max(retries, 1)):
        try:
            client, db = await init_db(uri, name)
            log.info("db ready (%s/%s)", uri, name)
            return client, db
        except Exception as e:
            last_exc = e
            log.warning("db init retry %d: %s", i + 1, e)
            await asyncio.sleep(delay)
    raise RuntimeError(f"MongoDB init failed after {retries} retries") from last_exc


def close_db(client: AsyncIOMotorClient | None) -> None:
    # 앱 종료 시 커넥션 정리
    if client is not None:
        client.close()

# recipeshare/services/recipe_service.py
# 레시피 CRUD + 초안/공개 전이
# - 예상 가능한 실패(없음/검증/공개 조건)는 Err로 반환, 예외는 저장소 장애만
# - 검색은 정규식($or title/description)으로 통일 ($text 미사용)

from __future__ import annotations
import logging
import math
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from recipeshare.core.errors import InvariantError, RecipeNotFound, RecipePublishBlocked
from recipeshare.core.result import Err, Ok, Result
from recipeshare.db.indexes import RECIPES
from recipeshare.db.models.common import parse_object_id
from recipeshare.db.models.recipe import RecipeCreate, RecipeFilters, RecipeOut, RecipePatch, RecipeReplace

log = logging.getLogger(__name__)

# 공개 전 필수 필드
PUBLISH_REQUIRED = ("title", "description", "ingredients", "steps")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _ci(text: str) -> Dict[str, str]:
    # 대소문자 무시 부분 일치 (사용자 입력은 이스케이프)
    return {"$regex": re.escape(text.strip()), "$options": "i"}


def text_query(search: str) -> Dict[str, Any]:
    rx = _ci(search)
    return {"$or": [{"title": rx}, {"description": rx}]}


def build_recipe_query(filters: RecipeFilters) -> Dict[str, Any]:
    """필터 객체 → Mongo 쿼리. 비어 있으면 전체."""
    query: Dict[str, Any] = {}
    if filters.difficulty:
        query["difficulty"] = filters.difficulty.value
    if filters.diet:
        query["diets"] = {"$in": [filters.diet]}
    if filters.max_cooking_time is not None:
        query["cooking_time"] = {"$lte": filters.max_cooking_time}
    if filters.draft is not None:
        query["is_draft"] = filters.draft
    if filters.author:
        query["author"] = filters.author
    if filters.search and filters.search.strip():
        query.update(text_query(filters.search))
    return query


def time_sum_error(doc: Mapping[str, Any]) -> Optional[InvariantError]:
    # 세 값이 모두 있을 때만 total = prep + cook
    prep, cook, total = doc.get("preparation_time"), doc.get("cooking_time"), doc.get("total_time")
    if prep is None or cook is None or total is None:
        return None
    if not math.isclose(total, prep + cook, abs_tol=1e-9):
        return InvariantError(
            f"Total time ({total}) should equal preparation time ({prep}) + cooking time ({cook})"
        )
    return None


def missing_for_publish(doc: Mapping[str, Any]) -> List[str]:
    return [f for f in PUBLISH_REQUIRED if not doc.get(f)]


class RecipeService:
    def __init__(self, db: AsyncIOMotorDatabase, default_author: str = "mock-user-id"):
        self.col = db[RECIPES]
        self.default_author = default_author

    async def _get(self, recipe_id: str) -> Optional[Dict[str, Any]]:
        oid = parse_object_id(recipe_id)
        if oid is None:
            return None
        return await self.col.find_one({"_id": oid})

    def _check_write(self, ref: str, doc: Mapping[str, Any]) -> Optional[Err]:
        err = time_sum_error(doc)
        if err:
            return Err(err)
        # 초안 해제 상태로 쓰려면 공개 조건을 만족해야 함
        if doc.get("is_draft") is False:
            missing = missing_for_publish(doc)
            if missing:
                return Err(RecipePublishBlocked(ref, missing))
        return None

    # --- 조회 -----------------------------------------------------------------

    async def find_all(self, filters: RecipeFilters) -> Result[List[RecipeOut], Any]:
        query = build_recipe_query(filters)
        cursor = self.col.find(query).skip(filters.skip).limit(filters.limit)
        docs = await cursor.to_list(length=filters.limit)
        return Ok([RecipeOut.from_doc(d) for d in docs])

    async def find_one(self, recipe_id: str) -> Result[RecipeOut, RecipeNotFound]:
        doc = await self._get(recipe_id)
        if not doc:
            return Err(RecipeNotFound(recipe_id))
        return Ok(RecipeOut.from_doc(doc))

    async def find_drafts_by_author(self, author: str) -> Result[List[RecipeOut], Any]:
        docs = await self.col.find({"author": author, "is_draft": True}).to_list(length=None)
        return Ok([RecipeOut.from_doc(d) for d in docs])

    async def search_by_text(self, q: str) -> Result[List[RecipeOut], Any]:
        if not q.strip():
            return Ok([])
        docs = await self.col.find(text_query(q)).to_list(length=None)
        return Ok([RecipeOut.from_doc(d) for d in docs])

    # --- 쓰기 -----------------------------------------------------------------

    async def create(self, dto: RecipeCreate) -> Result[RecipeOut, Any]:
        doc = dto.to_doc()
        doc["author"] = doc.get("author") or self.default_author
        doc["is_draft"] = True if dto.is_draft is None else dto.is_draft

        blocked = self._check_write(repr(doc["title"]), doc)
        if blocked:
            return blocked

        now = _now()
        doc["created_at"] = now
        doc["updated_at"] = now
        res = await self.col.insert_one(doc)
        doc["_id"] = res.inserted_id
        log.info("recipe created id=%s author=%s draft=%s", res.inserted_id, doc["author"], doc["is_draft"])
        return Ok(RecipeOut.from_doc(doc))

    async def update(self, recipe_id: str, dto: RecipeReplace) -> Result[RecipeOut, Any]:
        """전체 교체. author/is_draft/created_at은 본문에 없으면 기존 값 유지."""
        current = await self._get(recipe_id)
        if not current:
            return Err(RecipeNotFound(recipe_id))

        doc = dto.to_doc()
        doc["author"] = doc.get("author") or current.get("author") or self.default_author
        doc["is_draft"] = current.get("is_draft", True) if dto.is_draft is None else dto.is_draft

        blocked = self._check_write(recipe_id, doc)
        if blocked:
            return blocked

        doc["created_at"] = current.get("created_at")
        doc["updated_at"] = _now()
        res = await self.col.replace_one({"_id": current["_id"]}, doc)
        if res.matched_count == 0:
            # 조회와 교체 사이에 삭제됨
            return Err(RecipeNotFound(recipe_id))
        doc["_id"] = current["_id"]
        log.info("recipe replaced id=%s", recipe_id)
        return Ok(RecipeOut.from_doc(doc))

    async def partial_update(self, recipe_id: str, dto: RecipePatch) -> Result[RecipeOut, Any]:
        current = await self._get(recipe_id)
        if not current:
            return Err(RecipeNotFound(recipe_id))

        changes = dto.to_set()
        blocked = self._check_write(recipe_id, {**current, **changes})
        if blocked:
            return blocked

        changes["updated_at"] = _now()
        return await self._set(recipe_id, current["_id"], changes)

    async def remove(self, recipe_id: str) -> Result[None, RecipeNotFound]:
        oid = parse_object_id(recipe_id)
        if oid is None:
            return Err(RecipeNotFound(recipe_id))
        res = await self.col.delete_one({"_id": oid})
        if res.deleted_count == 0:
            return Err(RecipeNotFound(recipe_id))
        log.info("recipe deleted id=%s", recipe_id)
        return Ok(None)

    # --- 초안/공개 ------------------------------------------------------------

    async def publish(self, recipe_id: str) -> Result[RecipeOut, Any]:
        current = await self._get(recipe_id)
        if not current:
            return Err(RecipeNotFound(recipe_id))

        missing = missing_for_publish(current)
        if missing:
            return Err(RecipePublishBlocked(recipe_id, missing))

        result = await self._set(recipe_id, current["_id"], {"is_draft": False, "updated_at": _now()})
        if result.is_ok():
            log.info("recipe published id=%s", recipe_id)
        return result

    async def unpublish(self, recipe_id: str) -> Result[RecipeOut, RecipeNotFound]:
        oid = parse_object_id(recipe_id)
        if oid is None:
            return Err(RecipeNotFound(recipe_id))
        return await self._set(recipe_id, oid, {"is_draft": True, "updated_at": _now()})

    async def _set(self, recipe_id: str, oid, changes: Dict[str, Any]) -> Result[RecipeOut, RecipeNotFound]:
        res = await self.col.update_one({"_id": oid}, {"$set": changes})
        if res.matched_count == 0:
            return Err(RecipeNotFound(recipe_id))
        doc = await self.col.find_one({"_id": oid})
        if not doc:
            return Err(RecipeNotFound(recipe_id))
        return Ok(RecipeOut.from_doc(doc))

# recipeshare/services/ingredient_service.py
# 재료 CRUD + 별칭/다국어 검색
# name_key 중복은 쓰기 직전에 다시 확인하고, 유니크 인덱스 위반(DuplicateKeyError)도 Duplicate로 변환

from __future__ import annotations
import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from recipeshare.core.errors import DuplicateIngredient, IngredientNotFound, InvariantError
from recipeshare.core.result import Err, Ok, Result
from recipeshare.db.indexes import INGREDIENTS
from recipeshare.db.models.common import parse_object_id
from recipeshare.db.models.ingredient import (
    IngredientCreate,
    IngredientFilters,
    IngredientOut,
    IngredientPatch,
    IngredientReplace,
)

log = logging.getLogger(__name__)

DEFAULT_LANGUAGES = ("fr", "en", "es", "de", "it")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _ci(text: str) -> Dict[str, str]:
    return {"$regex": re.escape(text.strip()), "$options": "i"}


def alias_query(q: str, languages: Iterable[str]) -> Dict[str, Any]:
    """name_key / aliases / i18n.<lang> 중 하나라도 부분 일치 (OR, 순위 없음)"""
    rx = _ci(q)
    clauses: List[Dict[str, Any]] = [{"name_key": rx}, {"aliases": rx}]
    clauses += [{f"i18n.{lang}": rx} for lang in languages]
    return {"$or": clauses}


def build_ingredient_query(filters: IngredientFilters, languages: Iterable[str]) -> Dict[str, Any]:
    query: Dict[str, Any] = {}
    if filters.search and filters.search.strip():
        query.update(alias_query(filters.search, languages))
    if filters.category:
        query["category"] = filters.category.value
    if filters.created_by:
        query["created_by"] = filters.created_by
    return query


class IngredientService:
    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        languages: Iterable[str] = DEFAULT_LANGUAGES,
        default_created_by: str = "system",
    ):
        self.col = db[INGREDIENTS]
        self.languages = [lang.lower() for lang in languages]
        self.default_created_by = default_created_by

    # --- 검증 -----------------------------------------------------------------

    def _i18n_error(self, i18n: Optional[Mapping[str, str]]) -> Optional[InvariantError]:
        if not i18n:
            return InvariantError("i18n must contain at least one translation")
        for lang, label in i18n.items():
            if lang not in self.languages:
                return InvariantError(
                    f"Unsupported i18n language '{lang}' (allowed: {', '.join(self.languages)})"
                )
            if not (label or "").strip():
                return InvariantError(f"i18n value for '{lang}' must not be empty")
        return None

    async def _name_key_taken(self, name_key: str, exclude_id=None) -> bool:
        query: Dict[str, Any] = {"name_key": name_key}
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}
        return await self.col.find_one(query, {"_id": 1}) is not None

    async def _get(self, ingredient_id: str) -> Optional[Dict[str, Any]]:
        oid = parse_object_id(ingredient_id)
        if oid is None:
            return None
        return await self.col.find_one({"_id": oid})

    # --- 조회 -----------------------------------------------------------------

    async def find_all(self, filters: IngredientFilters) -> Result[List[IngredientOut], Any]:
        query = build_ingredient_query(filters, self.languages)
        cursor = self.col.find(query).skip(filters.skip).limit(filters.limit)
        docs = await cursor.to_list(length=filters.limit)
        return Ok([IngredientOut.from_doc(d) for d in docs])

    async def find_one(self, ingredient_id: str) -> Result[IngredientOut, IngredientNotFound]:
        doc = await self._get(ingredient_id)
        if not doc:
            return Err(IngredientNotFound(ingredient_id))
        return Ok(IngredientOut.from_doc(doc))

    async def search_by_aliases(self, q: str, language: Optional[str] = None) -> Result[List[IngredientOut], Any]:
        if not q.strip():
            # 공백만 있는 검색어는 빈 정규식이 되어 전부 일치함
            return Ok([])
        if language:
            lang = language.strip().lower()
            if lang not in self.languages:
                return Err(InvariantError(f"Unsupported language '{language}'"))
            languages = [lang]
        else:
            languages = self.languages
        docs = await self.col.find(alias_query(q, languages)).to_list(length=None)
        return Ok([IngredientOut.from_doc(d) for d in docs])

    # --- 쓰기 -----------------------------------------------------------------

    async def create(self, dto: IngredientCreate) -> Result[IngredientOut, Any]:
        err = self._i18n_error(dto.i18n)
        if err:
            return Err(err)
        if await self._name_key_taken(dto.name_key):
            return Err(DuplicateIngredient(dto.name_key))

        doc = dto.to_doc()
        doc["created_by"] = dto.created_by or self.default_created_by
        now = _now()
        doc["created_at"] = now
        doc["updated_at"] = now
        try:
            res = await self.col.insert_one(doc)
        except DuplicateKeyError:
            # 동시 생성 경쟁 — 유니크 인덱스가 막음
            return Err(DuplicateIngredient(dto.name_key))
        doc["_id"] = res.inserted_id
        log.info("ingredient created id=%s name_key=%s", res.inserted_id, dto.name_key)
        return Ok(IngredientOut.from_doc(doc))

    async def update(self, ingredient_id: str, dto: IngredientReplace) -> Result[IngredientOut, Any]:
        current = await self._get(ingredient_id)
        if not current:
            return Err(IngredientNotFound(ingredient_id))
        err = self._i18n_error(dto.i18n)
        if err:
            return Err(err)
        if await self._name_key_taken(dto.name_key, exclude_id=current["_id"]):
            return Err(DuplicateIngredient(dto.name_key))

        doc = dto.to_doc()
        doc["created_by"] = dto.created_by or current.get("created_by") or self.default_created_by
        doc["created_at"] = current.get("created_at")
        doc["updated_at"] = _now()
        try:
            res = await self.col.replace_one({"_id": current["_id"]}, doc)
        except DuplicateKeyError:
            return Err(DuplicateIngredient(dto.name_key))
        if res.matched_count == 0:
            return Err(IngredientNotFound(ingredient_id))
        doc["_id"] = current["_id"]
        log.info("ingredient replaced id=%s", ingredient_id)
        return Ok(IngredientOut.from_doc(doc))

    async def partial_update(self, ingredient_id: str, dto: IngredientPatch) -> Result[IngredientOut, Any]:
        current = await self._get(ingredient_id)
        if not current:
            return Err(IngredientNotFound(ingredient_id))

        changes = dto.to_set()
        if "i18n" in changes:
            err = self._i18n_error(changes["i18n"])
            if err:
                return Err(err)
        name_key = changes.get("name_key")
        if name_key and await self._name_key_taken(name_key, exclude_id=current["_id"]):
            return Err(DuplicateIngredient(name_key))

        changes["updated_at"] = _now()
        try:
            res = await self.col.update_one({"_id": current["_id"]}, {"$set": changes})
        except DuplicateKeyError:
            return Err(DuplicateIngredient(name_key or current.get("name_key", "")))
        if res.matched_count == 0:
            return Err(IngredientNotFound(ingredient_id))
        doc = await self.col.find_one({"_id": current["_id"]})
        if not doc:
            return Err(IngredientNotFound(ingredient_id))
        return Ok(IngredientOut.from_doc(doc))

    async def remove(self, ingredient_id: str) -> Result[None, IngredientNotFound]:
        oid = parse_object_id(ingredient_id)
        if oid is None:
            return Err(IngredientNotFound(ingredient_id))
        res = await self.col.delete_one({"_id": oid})
        if res.deleted_count == 0:
            return Err(IngredientNotFound(ingredient_id))
        log.info("ingredient deleted id=%s", ingredient_id)
        return Ok(None)

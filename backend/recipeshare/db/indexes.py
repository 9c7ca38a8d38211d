# 컬렉션 인덱스 생성
# 앱 스타트업에서 한 번 ensure_indexes(db)를 await로 호출한다.

from __future__ import annotations
from typing import Any, Dict, List, Tuple

RECIPES = "recipes"
INGREDIENTS = "ingredients"


async def _ensure(coll, name: str, keys: List[Tuple[str, int]], **options: Any) -> None:
    """
    인덱스를 안전하게 보장한다.
    - 이미 있으면 재생성하지 않음
    - 스펙(unique/sparse)이 다르면 드롭 후 재생성
    """
    existing: Dict[str, Dict[str, Any]] = await coll.index_information()
    if name in existing:
        idx = existing[name]
        need_unique = bool(options.get("unique", False))
        need_sparse = options.get("sparse", None)

        unique_ok = bool(idx.get("unique", False)) == need_unique
        sparse_ok = (need_sparse is None) or (bool(idx.get("sparse", False)) == bool(need_sparse))

        if unique_ok and sparse_ok:
            return
        await coll.drop_index(name)
    await coll.create_index(keys, name=name, **options)


async def ensure_indexes(db) -> None:
    # 재료: name_key 유니크 — 동시 생성 경쟁(check-then-write)의 실제 방어선
    ingredients = db[INGREDIENTS]
    await _ensure(ingredients, "name_key_1", [("name_key", 1)], unique=True)
    await _ensure(ingredients, "aliases_1", [("aliases", 1)])
    await _ensure(ingredients, "category_1", [("category", 1)])

    # 레시피: 목록 필터용
    recipes = db[RECIPES]
    await _ensure(recipes, "author_1_is_draft_1", [("author", 1), ("is_draft", 1)])
    await _ensure(recipes, "difficulty_1", [("difficulty", 1)])
    await _ensure(recipes, "diets_1", [("diets", 1)])
    await _ensure(recipes, "cooking_time_1", [("cooking_time", 1)])

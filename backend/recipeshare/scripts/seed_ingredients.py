# scripts/seed_ingredients.py
# 기본 재료 사전 시드 — name_key 기준 $setOnInsert (이미 있는 문서는 건드리지 않음)
# 사용: python -m recipeshare.scripts.seed_ingredients
import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from motor.motor_asyncio import AsyncIOMotorClient

from recipeshare.core.config import settings
from recipeshare.db.indexes import INGREDIENTS, ensure_indexes
from recipeshare.db.models.ingredient import IngredientCreate

log = logging.getLogger("seed_ingredients")

BASE_INGREDIENTS: List[Dict[str, Any]] = [
    {"name_key": "salt", "i18n": {"fr": "Sel", "en": "Salt"}, "aliases": ["sel fin", "fleur de sel"], "category": "other"},
    {"name_key": "pepper", "i18n": {"fr": "Poivre", "en": "Pepper"}, "aliases": ["poivre noir"], "category": "other"},
    {"name_key": "egg", "i18n": {"fr": "Oeuf", "en": "Egg"}, "aliases": ["oeufs", "œuf"], "category": "other"},
    {"name_key": "butter", "i18n": {"fr": "Beurre", "en": "Butter"}, "aliases": ["beurre doux"], "category": "dairy"},
    {"name_key": "milk", "i18n": {"fr": "Lait", "en": "Milk"}, "aliases": ["lait entier"], "category": "dairy"},
    {"name_key": "flour", "i18n": {"fr": "Farine", "en": "Flour"}, "aliases": ["farine de blé"], "category": "other"},
    {"name_key": "onion", "i18n": {"fr": "Oignon", "en": "Onion"}, "aliases": ["oignon jaune"], "category": "vegetable"},
    {"name_key": "garlic", "i18n": {"fr": "Ail", "en": "Garlic"}, "aliases": ["gousse d'ail"], "category": "vegetable"},
    {"name_key": "carrot", "i18n": {"fr": "Carotte", "en": "Carrot"}, "aliases": [], "category": "vegetable"},
    {"name_key": "potato", "i18n": {"fr": "Pomme de terre", "en": "Potato"}, "aliases": ["patate"], "category": "vegetable"},
    {"name_key": "tomato", "i18n": {"fr": "Tomate", "en": "Tomato"}, "aliases": [], "category": "vegetable"},
    {"name_key": "apple", "i18n": {"fr": "Pomme", "en": "Apple"}, "aliases": [], "category": "fruit"},
    {"name_key": "lemon", "i18n": {"fr": "Citron", "en": "Lemon"}, "aliases": ["citron jaune"], "category": "fruit"},
    {"name_key": "chicken", "i18n": {"fr": "Poulet", "en": "Chicken"}, "aliases": ["blanc de poulet"], "category": "meat"},
    {"name_key": "beef", "i18n": {"fr": "Boeuf", "en": "Beef"}, "aliases": ["bœuf", "steak haché"], "category": "meat"},
    {"name_key": "salmon", "i18n": {"fr": "Saumon", "en": "Salmon"}, "aliases": ["pavé de saumon"], "category": "fish"},
]


async def seed_ingredients(db, items: List[Dict[str, Any]] = BASE_INGREDIENTS) -> Dict[str, int]:
    coll = db[INGREDIENTS]
    inserted = 0
    for raw in items:
        # 스키마 검증 통과한 값만 저장
        dto = IngredientCreate.model_validate(raw)
        doc = dto.to_doc()
        doc["created_by"] = dto.created_by or settings.DEFAULT_CREATED_BY
        now = datetime.now(timezone.utc)
        res = await coll.update_one(
            {"name_key": dto.name_key},
            {"$setOnInsert": {**doc, "created_at": now, "updated_at": now}},
            upsert=True,
        )
        if res.upserted_id is not None:
            inserted += 1
    return {"inserted": inserted, "total": len(items)}


async def main():
    logging.basicConfig(level=logging.INFO)
    cli = AsyncIOMotorClient(settings.MONGO_URI)
    try:
        db = cli[settings.MONGO_DB]
        await ensure_indexes(db)
        stats = await seed_ingredients(db)
        log.info("[seed] done. inserted=%d total=%d", stats["inserted"], stats["total"])
    finally:
        cli.close()


if __name__ == "__main__":
    asyncio.run(main())

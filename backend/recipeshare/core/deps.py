# 공용 의존성 — DB 핸들/서비스 주입
# DB 핸들은 main(create_app)이 app.state에 보관한다
from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from recipeshare.core.config import settings
from recipeshare.services.ingredient_service import IngredientService
from recipeshare.services.recipe_service import RecipeService


def get_db(request: Request) -> AsyncIOMotorDatabase:
    # 라우터에서 쓰는 핸들. 미초기화면 예외 발생
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise RuntimeError("MongoDB is not initialized yet.")
    return db


def get_recipe_service(db: AsyncIOMotorDatabase = Depends(get_db)) -> RecipeService:
    return RecipeService(db, default_author=settings.DEFAULT_AUTHOR)


def get_ingredient_service(db: AsyncIOMotorDatabase = Depends(get_db)) -> IngredientService:
    return IngredientService(
        db,
        languages=settings.I18N_LANGUAGES,
        default_created_by=settings.DEFAULT_CREATED_BY,
    )

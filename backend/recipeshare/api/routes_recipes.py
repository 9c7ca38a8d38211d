# recipeshare/api/routes_recipes.py
# 레시피 CRUD + 초안/공개 라우터
# 서비스 결과(Ok/Err)를 unwrap → Err면 ServiceError가 올라가 예외 핸들러가 응답으로 변환

from __future__ import annotations
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from starlette import status

from recipeshare.core.config import settings
from recipeshare.core.deps import get_recipe_service
from recipeshare.db.models.recipe import (
    Difficulty,
    RecipeCreate,
    RecipeFilters,
    RecipeOut,
    RecipePatch,
    RecipeReplace,
)
from recipeshare.services.recipe_service import RecipeService

router = APIRouter(prefix="/recipes", tags=["recipes"])


@router.get("", response_model=List[RecipeOut])
async def list_recipes(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.PAGE_LIMIT_DEFAULT, ge=1, le=settings.PAGE_LIMIT_MAX),
    difficulty: Optional[Difficulty] = None,
    diet: Optional[str] = None,
    max_cooking_time: Optional[float] = Query(None, alias="maxCookingTime", ge=0),
    search: Optional[str] = None,
    draft: Optional[bool] = None,
    author: Optional[str] = None,
    service: RecipeService = Depends(get_recipe_service),
):
    filters = RecipeFilters(
        page=page,
        limit=limit,
        difficulty=difficulty,
        diet=diet,
        max_cooking_time=max_cooking_time,
        search=search,
        draft=draft,
        author=author,
    )
    return (await service.find_all(filters)).unwrap()


# 고정 경로는 /{recipe_id}보다 먼저 선언
@router.get("/drafts", response_model=List[RecipeOut])
async def list_drafts(
    author: str = Query(..., min_length=1),
    service: RecipeService = Depends(get_recipe_service),
):
    return (await service.find_drafts_by_author(author)).unwrap()


@router.get("/search", response_model=List[RecipeOut])
async def search_recipes(
    q: str = Query(..., min_length=1),
    service: RecipeService = Depends(get_recipe_service),
):
    return (await service.search_by_text(q)).unwrap()


@router.get("/{recipe_id}", response_model=RecipeOut)
async def get_recipe(recipe_id: str, service: RecipeService = Depends(get_recipe_service)):
    return (await service.find_one(recipe_id)).unwrap()


@router.post("", response_model=RecipeOut, status_code=status.HTTP_201_CREATED)
async def create_recipe(payload: RecipeCreate, service: RecipeService = Depends(get_recipe_service)):
    return (await service.create(payload)).unwrap()


@router.put("/{recipe_id}", response_model=RecipeOut)
async def replace_recipe(
    recipe_id: str,
    payload: RecipeReplace,
    service: RecipeService = Depends(get_recipe_service),
):
    return (await service.update(recipe_id, payload)).unwrap()


@router.patch("/{recipe_id}", response_model=RecipeOut)
async def patch_recipe(
    recipe_id: str,
    payload: RecipePatch,
    service: RecipeService = Depends(get_recipe_service),
):
    return (await service.partial_update(recipe_id, payload)).unwrap()


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recipe(recipe_id: str, service: RecipeService = Depends(get_recipe_service)):
    (await service.remove(recipe_id)).unwrap()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{recipe_id}/publish", response_model=RecipeOut)
async def publish_recipe(recipe_id: str, service: RecipeService = Depends(get_recipe_service)):
    return (await service.publish(recipe_id)).unwrap()


@router.post("/{recipe_id}/unpublish", response_model=RecipeOut)
async def unpublish_recipe(recipe_id: str, service: RecipeService = Depends(get_recipe_service)):
    return (await service.unpublish(recipe_id)).unwrap()

# recipeshare/api/routes_ingredients.py
# 재료 CRUD + 별칭/다국어 검색 라우터

from __future__ import annotations
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from starlette import status

from recipeshare.core.config import settings
from recipeshare.core.deps import get_ingredient_service
from recipeshare.db.models.ingredient import (
    IngredientCategory,
    IngredientCreate,
    IngredientFilters,
    IngredientOut,
    IngredientPatch,
    IngredientReplace,
)
from recipeshare.services.ingredient_service import IngredientService

router = APIRouter(prefix="/ingredients", tags=["ingredients"])


@router.get("", response_model=List[IngredientOut])
async def list_ingredients(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.PAGE_LIMIT_DEFAULT, ge=1, le=settings.PAGE_LIMIT_MAX),
    search: Optional[str] = None,
    category: Optional[IngredientCategory] = None,
    created_by: Optional[str] = None,
    service: IngredientService = Depends(get_ingredient_service),
):
    filters = IngredientFilters(page=page, limit=limit, search=search, category=category, created_by=created_by)
    return (await service.find_all(filters)).unwrap()


@router.get("/search", response_model=List[IngredientOut])
async def search_ingredients(
    q: str = Query(..., min_length=1),
    lang: Optional[str] = None,
    service: IngredientService = Depends(get_ingredient_service),
):
    """name_key / 별칭 / i18n(lang 지정 시 해당 언어만) 부분 일치"""
    return (await service.search_by_aliases(q, lang)).unwrap()


@router.get("/{ingredient_id}", response_model=IngredientOut)
async def get_ingredient(ingredient_id: str, service: IngredientService = Depends(get_ingredient_service)):
    return (await service.find_one(ingredient_id)).unwrap()


@router.post("", response_model=IngredientOut, status_code=status.HTTP_201_CREATED)
async def create_ingredient(payload: IngredientCreate, service: IngredientService = Depends(get_ingredient_service)):
    return (await service.create(payload)).unwrap()


@router.put("/{ingredient_id}", response_model=IngredientOut)
async def replace_ingredient(
    ingredient_id: str,
    payload: IngredientReplace,
    service: IngredientService = Depends(get_ingredient_service),
):
    return (await service.update(ingredient_id, payload)).unwrap()


@router.patch("/{ingredient_id}", response_model=IngredientOut)
async def patch_ingredient(
    ingredient_id: str,
    payload: IngredientPatch,
    service: IngredientService = Depends(get_ingredient_service),
):
    return (await service.partial_update(ingredient_id, payload)).unwrap()


@router.delete("/{ingredient_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_ingredient(ingredient_id: str, service: IngredientService = Depends(get_ingredient_service)):
    (await service.remove(ingredient_id)).unwrap()
    return Response(status_code=status.HTTP_204_NO_CONTENT)

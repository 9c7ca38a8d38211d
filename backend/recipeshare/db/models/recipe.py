# 레시피 표준 스키마
# 입력(Create/Replace/Patch) · 출력(RecipeOut) · 목록 필터(RecipeFilters)

from __future__ import annotations
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from recipeshare.db.models.common import NonBlankStr, PageParams, parse_object_id, unique_strings, with_str_id


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class StepMedia(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: Literal["image", "video"]
    url: NonBlankStr


class RecipeStep(BaseModel):
    model_config = ConfigDict(extra="forbid")

    order: int = Field(..., ge=1)
    instructions: NonBlankStr
    media: List[StepMedia] = Field(default_factory=list)
    duration: Optional[float] = Field(None, ge=0)   # 분
    temperature: Optional[float] = None             # °C


class RecipeIngredient(BaseModel):
    """재료 한 줄: 등록된 재료 참조(id) 또는 직접 입력한 이름(name)."""
    model_config = ConfigDict(extra="forbid")

    id: Optional[str] = None
    name: Optional[str] = None
    quantity: float = Field(..., ge=0)
    unit: NonBlankStr

    @field_validator("id")
    @classmethod
    def _v_ref(cls, v):
        if v is not None and parse_object_id(v) is None:
            raise ValueError("id must be a valid ingredient ObjectId")
        return v

    @field_validator("name")
    @classmethod
    def _v_name(cls, v):
        if v is None:
            return v
        v = v.strip()
        return v or None

    @model_validator(mode="after")
    def _v_ref_or_name(self):
        if not self.id and not self.name:
            raise ValueError("ingredient needs either an id reference or a custom name")
        return self


class RecipeNutrition(BaseModel):
    model_config = ConfigDict(extra="forbid")

    calories: Optional[float] = Field(None, ge=0)
    proteins: Optional[float] = Field(None, ge=0)
    carbs: Optional[float] = Field(None, ge=0)
    fats: Optional[float] = Field(None, ge=0)


def _check_step_orders(steps: Optional[List[RecipeStep]]) -> None:
    orders = [s.order for s in (steps or [])]
    if len(orders) != len(set(orders)):
        raise ValueError("step orders must be unique")


class RecipeCreate(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    title: NonBlankStr
    description: NonBlankStr
    difficulty: Difficulty

    translation_ref: Optional[str] = None
    language: Optional[str] = None
    preview_image: Optional[str] = None

    preparation_time: Optional[float] = Field(None, ge=0)
    cooking_time: Optional[float] = Field(None, ge=0)
    total_time: Optional[float] = Field(None, ge=0)

    ingredients: List[RecipeIngredient] = Field(default_factory=list)
    steps: List[RecipeStep] = Field(default_factory=list)
    diets: List[str] = Field(default_factory=list)
    allergens: List[str] = Field(default_factory=list)
    nutrition: Optional[RecipeNutrition] = None
    yield_: Optional[int] = Field(None, alias="yield", ge=1)

    author: Optional[str] = None
    is_draft: Optional[bool] = None

    @field_validator("diets", "allergens", mode="before")
    @classmethod
    def _v_sets(cls, v):
        return unique_strings(v)

    @model_validator(mode="after")
    def _v_steps(self):
        _check_step_orders(self.steps)
        return self

    def to_doc(self) -> Dict[str, Any]:
        # 저장용 dict (wire 이름 그대로: yield)
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class RecipeReplace(RecipeCreate):
    """PUT 본문 — 전체 교체. author/is_draft 생략 시 기존 값 유지."""


_PATCH_NOT_NULL = ("title", "description", "difficulty", "is_draft", "author")
_PATCH_LIST_FIELDS = ("ingredients", "steps", "diets", "allergens")


class RecipePatch(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    title: Optional[NonBlankStr] = None
    description: Optional[NonBlankStr] = None
    difficulty: Optional[Difficulty] = None

    translation_ref: Optional[str] = None
    language: Optional[str] = None
    preview_image: Optional[str] = None

    preparation_time: Optional[float] = Field(None, ge=0)
    cooking_time: Optional[float] = Field(None, ge=0)
    total_time: Optional[float] = Field(None, ge=0)

    ingredients: Optional[List[RecipeIngredient]] = None
    steps: Optional[List[RecipeStep]] = None
    diets: Optional[List[str]] = None
    allergens: Optional[List[str]] = None
    nutrition: Optional[RecipeNutrition] = None
    yield_: Optional[int] = Field(None, alias="yield", ge=1)

    author: Optional[str] = None
    is_draft: Optional[bool] = None

    @field_validator("diets", "allergens", mode="before")
    @classmethod
    def _v_sets(cls, v):
        return None if v is None else unique_strings(v)

    @model_validator(mode="after")
    def _v_not_null(self):
        for f in _PATCH_NOT_NULL:
            if f in self.model_fields_set and getattr(self, f) is None:
                raise ValueError(f"{f} cannot be null")
        _check_step_orders(self.steps)
        return self

    def to_set(self) -> Dict[str, Any]:
        # 보낸 필드만 $set (배열 필드 null → 빈 배열)
        data = self.model_dump(mode="json", by_alias=True, exclude_unset=True)
        for k in _PATCH_LIST_FIELDS:
            if k in data and data[k] is None:
                data[k] = []
        return data


class RecipeOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    title: str
    description: str
    difficulty: Difficulty

    translation_ref: Optional[str] = None
    language: Optional[str] = None
    preview_image: Optional[str] = None

    preparation_time: Optional[float] = None
    cooking_time: Optional[float] = None
    total_time: Optional[float] = None

    ingredients: List[RecipeIngredient] = Field(default_factory=list)
    steps: List[RecipeStep] = Field(default_factory=list)
    diets: List[str] = Field(default_factory=list)
    allergens: List[str] = Field(default_factory=list)
    nutrition: Optional[RecipeNutrition] = None
    yield_: Optional[int] = Field(None, alias="yield")

    author: Optional[str] = None
    is_draft: bool = True

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_doc(cls, doc: Mapping[str, Any]) -> "RecipeOut":
        return cls.model_validate(with_str_id(doc))


class RecipeFilters(PageParams):
    difficulty: Optional[Difficulty] = None
    diet: Optional[str] = None
    max_cooking_time: Optional[float] = None
    search: Optional[str] = None
    draft: Optional[bool] = None
    author: Optional[str] = None

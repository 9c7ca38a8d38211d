# 재료 스키마
# name_key 유니크 / i18n 필수 — 비어 있는 i18n 검증은 서비스에서(409)

from __future__ import annotations
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from recipeshare.db.models.common import NonBlankStr, PageParams, unique_strings, with_str_id


class IngredientCategory(str, Enum):
    VEGETABLE = "vegetable"
    FRUIT = "fruit"
    MEAT = "meat"
    DAIRY = "dairy"
    FISH = "fish"
    OTHER = "other"


class IngredientNutrition(BaseModel):
    # 100g 기준
    model_config = ConfigDict(extra="forbid")

    calories: Optional[float] = Field(None, ge=0)
    proteins: Optional[float] = Field(None, ge=0)
    carbs: Optional[float] = Field(None, ge=0)
    fats: Optional[float] = Field(None, ge=0)
    fibers: Optional[float] = Field(None, ge=0)


def _norm_i18n(v):
    # 언어 코드는 소문자로
    if not isinstance(v, dict):
        return v
    return {str(k).strip().lower(): val for k, val in v.items()}


class IngredientCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name_key: NonBlankStr
    i18n: Dict[str, str]
    aliases: List[str] = Field(default_factory=list)
    category: Optional[IngredientCategory] = None
    created_by: Optional[str] = None
    nutrition: Optional[IngredientNutrition] = None

    @field_validator("i18n", mode="before")
    @classmethod
    def _v_i18n(cls, v):
        return _norm_i18n(v)

    @field_validator("aliases", mode="before")
    @classmethod
    def _v_aliases(cls, v):
        return unique_strings(v)

    def to_doc(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class IngredientReplace(IngredientCreate):
    """PUT 본문 — created_by 생략 시 기존 값 유지."""


class IngredientPatch(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name_key: Optional[NonBlankStr] = None
    i18n: Optional[Dict[str, str]] = None
    aliases: Optional[List[str]] = None
    category: Optional[IngredientCategory] = None
    created_by: Optional[str] = None
    nutrition: Optional[IngredientNutrition] = None

    @field_validator("i18n", mode="before")
    @classmethod
    def _v_i18n(cls, v):
        return _norm_i18n(v)

    @field_validator("aliases", mode="before")
    @classmethod
    def _v_aliases(cls, v):
        return None if v is None else unique_strings(v)

    @model_validator(mode="after")
    def _v_not_null(self):
        for f in ("name_key", "i18n", "created_by"):
            if f in self.model_fields_set and getattr(self, f) is None:
                raise ValueError(f"{f} cannot be null")
        return self

    def to_set(self) -> Dict[str, Any]:
        data = self.model_dump(mode="json", exclude_unset=True)
        if "aliases" in data and data["aliases"] is None:
            data["aliases"] = []
        return data


class IngredientOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    name_key: str
    i18n: Dict[str, str]
    aliases: List[str] = Field(default_factory=list)
    category: Optional[IngredientCategory] = None
    created_by: str = "system"
    nutrition: Optional[IngredientNutrition] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_doc(cls, doc: Mapping[str, Any]) -> "IngredientOut":
        return cls.model_validate(with_str_id(doc))


class IngredientFilters(PageParams):
    search: Optional[str] = None
    category: Optional[IngredientCategory] = None
    created_by: Optional[str] = None

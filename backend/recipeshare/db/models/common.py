# recipeshare/db/models/common.py
# 모델 공용 타입/헬퍼

from __future__ import annotations
from typing import Annotated, Any, Dict, Iterable, List, Mapping

from bson import ObjectId
from pydantic import BaseModel, Field, StringConstraints

# 앞뒤 공백 제거 후 비어 있으면 거부
NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def unique_strings(v: Iterable[Any] | None) -> List[str]:
    # 집합 성격의 배열: 공백 제거, 빈 값 제거, 첫 등장 순서 유지
    out = [str(x).strip() for x in (v or []) if x is not None and str(x).strip()]
    return list(dict.fromkeys(out))


def parse_object_id(raw: str) -> ObjectId | None:
    # 형식이 틀린 id는 "없는 문서"로 취급
    if not raw or not ObjectId.is_valid(raw):
        return None
    return ObjectId(raw)


def with_str_id(doc: Mapping[str, Any]) -> Dict[str, Any]:
    # Mongo 문서의 _id(ObjectId)를 문자열로
    d = dict(doc)
    if "_id" in d:
        d["_id"] = str(d["_id"])
    return d


class PageParams(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1)

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

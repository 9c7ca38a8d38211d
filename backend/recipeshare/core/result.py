# 서비스 계층 반환 타입 — 예상 가능한 실패는 예외 대신 Err로 돌려준다
# 예외로 바꾸는 곳은 라우터(unwrap) 한 곳뿐

from __future__ import annotations
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from recipeshare.core.errors import ServiceError

T = TypeVar("T")
E = TypeVar("E", bound=ServiceError)


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self):
        raise self.error


Result = Union[Ok[T], Err[E]]

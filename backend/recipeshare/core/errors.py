# recipeshare/core/errors.py
# 서비스 오류 분류 + FastAPI 예외 핸들러
# NotFound → 404, Duplicate/Validation/PublishPrecondition → 409

from __future__ import annotations
import logging
from typing import Iterable

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

log = logging.getLogger(__name__)


class ServiceError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "server_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "not_found"


class DuplicateError(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "duplicate"


class InvariantError(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "validation_error"


class PublishPreconditionError(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "publish_precondition"


# --- 리소스별 메시지 ---------------------------------------------------------

class RecipeNotFound(NotFoundError):
    def __init__(self, recipe_id: str):
        super().__init__(f"Recipe with ID {recipe_id} not found")
        self.recipe_id = recipe_id


class RecipePublishBlocked(PublishPreconditionError):
    def __init__(self, recipe_ref: str, missing: Iterable[str]):
        self.missing = list(missing)
        super().__init__(
            f"Cannot publish recipe {recipe_ref}: missing required fields for publication "
            f"({', '.join(self.missing)})"
        )


class IngredientNotFound(NotFoundError):
    def __init__(self, ingredient_id: str):
        super().__init__(f"Ingredient with ID {ingredient_id} not found")
        self.ingredient_id = ingredient_id


class DuplicateIngredient(DuplicateError):
    def __init__(self, name_key: str):
        super().__init__(f"Ingredient with name_key '{name_key}' already exists")
        self.name_key = name_key


# --- 핸들러 -----------------------------------------------------------------

async def service_error_handler(request: Request, exc: ServiceError):
    log.warning("%s %s -> %s: %s", request.method, request.url.path, exc.error_code, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error_code": exc.error_code, "message": exc.message},
    )


async def validation_exception_handler(request, exc: RequestValidationError):
    details = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", []) if part is not None)
        msg = err.get("msg", "Invalid value")
        details.append({"field": loc or None, "message": msg})
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error_code": "validation_error",
            "message": "Invalid request payload.",
            "details": details,
        },
    )

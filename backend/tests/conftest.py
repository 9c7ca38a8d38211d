import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from recipeshare.main import create_app
from recipeshare.services.ingredient_service import IngredientService
from recipeshare.services.recipe_service import RecipeService


@pytest.fixture
def db():
    return AsyncMongoMockClient()["recipeshare_test"]


@pytest.fixture
def recipe_service(db):
    return RecipeService(db, default_author="mock-user-id")


@pytest.fixture
def ingredient_service(db):
    return IngredientService(db, languages=["fr", "en", "es"], default_created_by="system")


@pytest.fixture
def app(db):
    return create_app(db=db)


@pytest.fixture
def client(app):
    # with 블록 안에서 startup(인덱스 생성)/shutdown 실행
    with TestClient(app) as c:
        yield c


def recipe_payload(**overrides):
    payload = {
        "title": "Omelette",
        "description": "Fluffy french omelette",
        "difficulty": "easy",
        "preparation_time": 5,
        "cooking_time": 10,
        "total_time": 15,
        "ingredients": [
            {"name": "eggs", "quantity": 3, "unit": "pcs"},
            {"name": "butter", "quantity": 10, "unit": "g"},
        ],
        "steps": [
            {"order": 1, "instructions": "Beat the eggs"},
            {"order": 2, "instructions": "Cook in butter", "duration": 3},
        ],
        "diets": ["vegetarian"],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_recipe():
    return recipe_payload

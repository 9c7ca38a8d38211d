import pytest
from bson import ObjectId
from pydantic import ValidationError

from recipeshare.core.errors import RecipeNotFound
from recipeshare.core.result import Err, Ok
from recipeshare.db.models.ingredient import IngredientCreate, IngredientPatch
from recipeshare.db.models.recipe import RecipeCreate, RecipeIngredient, RecipeOut, RecipePatch

from conftest import recipe_payload


def test_recipe_ingredient_needs_reference_or_name():
    with pytest.raises(ValidationError):
        RecipeIngredient(quantity=1, unit="g")
    with pytest.raises(ValidationError):
        RecipeIngredient(name="   ", quantity=1, unit="g")
    with pytest.raises(ValidationError):
        RecipeIngredient(id="not-an-object-id", quantity=1, unit="g")

    ref = RecipeIngredient(id=str(ObjectId()), quantity=2, unit="pcs")
    assert ref.name is None


def test_recipe_sets_are_deduplicated():
    dto = RecipeCreate.model_validate(recipe_payload(diets=["vegan", " vegan ", "keto", ""]))
    assert dto.diets == ["vegan", "keto"]


def test_recipe_step_orders_unique():
    steps = [{"order": 1, "instructions": "a"}, {"order": 1, "instructions": "b"}]
    with pytest.raises(ValidationError):
        RecipeCreate.model_validate(recipe_payload(steps=steps))


def test_recipe_to_doc_uses_wire_names():
    doc = RecipeCreate.model_validate(recipe_payload(**{"yield": 4})).to_doc()
    assert doc["yield"] == 4
    assert "yield_" not in doc
    assert doc["difficulty"] == "easy"
    assert "nutrition" not in doc


def test_recipe_patch_only_sets_given_fields():
    patch = RecipePatch.model_validate({"title": "New", "steps": None})
    assert patch.to_set() == {"title": "New", "steps": []}
    with pytest.raises(ValidationError):
        RecipePatch.model_validate({"difficulty": None})


def test_recipe_out_from_doc():
    oid = ObjectId()
    out = RecipeOut.from_doc({"_id": oid, "title": "t", "description": "d", "difficulty": "hard", "yield": 3})
    assert out.id == str(oid)
    assert out.yield_ == 3
    dumped = out.model_dump(by_alias=True)
    assert dumped["_id"] == str(oid)
    assert dumped["is_draft"] is True


def test_ingredient_i18n_keys_lowercased_and_aliases_unique():
    dto = IngredientCreate.model_validate(
        {"name_key": "egg", "i18n": {"FR": "Oeuf"}, "aliases": ["oeufs", "oeufs", "œuf"]}
    )
    assert dto.i18n == {"fr": "Oeuf"}
    assert dto.aliases == ["oeufs", "œuf"]


def test_ingredient_patch_rejects_null_name_key():
    with pytest.raises(ValidationError):
        IngredientPatch.model_validate({"name_key": None})
    assert IngredientPatch.model_validate({"aliases": None}).to_set() == {"aliases": []}


def test_result_unwrap():
    assert Ok(5).unwrap() == 5
    err = Err(RecipeNotFound("abc"))
    assert err.is_err() and not err.is_ok()
    with pytest.raises(RecipeNotFound) as exc:
        err.unwrap()
    assert exc.value.status_code == 404
    assert str(exc.value) == "Recipe with ID abc not found"


def test_patch_rejects_null_owner_fields():
    with pytest.raises(ValidationError):
        RecipePatch.model_validate({"author": None})
    with pytest.raises(ValidationError):
        IngredientPatch.model_validate({"created_by": None})

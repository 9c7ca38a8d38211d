import pytest
from bson import ObjectId

from recipeshare.core.errors import DuplicateError, DuplicateIngredient, InvariantError, NotFoundError
from recipeshare.db.indexes import ensure_indexes
from recipeshare.db.models.ingredient import IngredientCreate, IngredientFilters, IngredientPatch, IngredientReplace
from recipeshare.services.ingredient_service import alias_query


def _ingredient(**overrides) -> IngredientCreate:
    data = {"name_key": "salt", "i18n": {"fr": "Sel", "en": "Salt"}, "aliases": ["fleur de sel"], "category": "other"}
    data.update(overrides)
    return IngredientCreate.model_validate(data)


@pytest.mark.asyncio
async def test_create_defaults_created_by(ingredient_service):
    result = await ingredient_service.create(_ingredient())
    assert result.is_ok()
    assert result.value.created_by == "system"
    assert result.value.i18n == {"fr": "Sel", "en": "Salt"}


@pytest.mark.asyncio
async def test_create_duplicate_name_key(ingredient_service):
    assert (await ingredient_service.create(_ingredient())).is_ok()
    result = await ingredient_service.create(_ingredient(i18n={"en": "Salt again"}))
    assert isinstance(result.error, DuplicateError)
    assert "'salt'" in result.error.message


@pytest.mark.asyncio
async def test_create_rejects_empty_or_unknown_i18n(ingredient_service):
    empty = await ingredient_service.create(_ingredient(i18n={}))
    assert isinstance(empty.error, InvariantError)

    blank = await ingredient_service.create(_ingredient(i18n={"fr": "  "}))
    assert isinstance(blank.error, InvariantError)

    unknown = await ingredient_service.create(_ingredient(i18n={"xx": "??"}))
    assert isinstance(unknown.error, InvariantError)
    assert "xx" in unknown.error.message


@pytest.mark.asyncio
async def test_update_to_existing_name_key_is_duplicate(ingredient_service):
    await ingredient_service.create(_ingredient())
    pepper = (await ingredient_service.create(_ingredient(name_key="pepper", i18n={"en": "Pepper"}))).value

    patched = await ingredient_service.partial_update(pepper.id, IngredientPatch(name_key="salt"))
    assert isinstance(patched.error, DuplicateError)

    replaced = await ingredient_service.update(
        pepper.id, IngredientReplace(name_key="salt", i18n={"en": "Pepper"})
    )
    assert isinstance(replaced.error, DuplicateError)


@pytest.mark.asyncio
async def test_update_same_document_keeps_its_own_name_key(ingredient_service):
    salt = (await ingredient_service.create(_ingredient(created_by="chef"))).value
    result = await ingredient_service.update(
        salt.id, IngredientReplace(name_key="salt", i18n={"fr": "Sel fin"}, aliases=[])
    )
    assert result.is_ok()
    assert result.value.i18n == {"fr": "Sel fin"}
    assert result.value.aliases == []
    assert result.value.created_by == "chef"


@pytest.mark.asyncio
async def test_partial_update_merges_and_validates_i18n(ingredient_service):
    salt = (await ingredient_service.create(_ingredient())).value
    ok = await ingredient_service.partial_update(salt.id, IngredientPatch(category="other", aliases=["sel gris"]))
    assert ok.value.aliases == ["sel gris"]
    assert ok.value.i18n == {"fr": "Sel", "en": "Salt"}

    bad = await ingredient_service.partial_update(salt.id, IngredientPatch(i18n={}))
    assert isinstance(bad.error, InvariantError)


@pytest.mark.asyncio
async def test_not_found_cases(ingredient_service):
    missing = str(ObjectId())
    assert isinstance((await ingredient_service.find_one(missing)).error, NotFoundError)
    assert isinstance((await ingredient_service.remove(missing)).error, NotFoundError)
    assert isinstance((await ingredient_service.partial_update(missing, IngredientPatch())).error, NotFoundError)
    assert isinstance(
        (await ingredient_service.update(missing, IngredientReplace(name_key="x", i18n={"en": "X"}))).error,
        NotFoundError,
    )


@pytest.mark.asyncio
async def test_remove(ingredient_service):
    salt = (await ingredient_service.create(_ingredient())).value
    assert (await ingredient_service.remove(salt.id)).is_ok()
    assert isinstance((await ingredient_service.find_one(salt.id)).error, NotFoundError)


@pytest.mark.asyncio
async def test_search_by_aliases_respects_language(ingredient_service):
    await ingredient_service.create(_ingredient(name_key="egg", i18n={"fr": "Oeuf", "en": "Egg"}, aliases=[]))
    await ingredient_service.create(
        _ingredient(name_key="custard", i18n={"fr": "Crème", "en": "Oeuf custard"}, aliases=[])
    )

    fr = (await ingredient_service.search_by_aliases("oeuf", "fr")).value
    assert [i.name_key for i in fr] == ["egg"]

    everywhere = (await ingredient_service.search_by_aliases("OEUF")).value
    assert sorted(i.name_key for i in everywhere) == ["custard", "egg"]


@pytest.mark.asyncio
async def test_search_by_aliases_matches_alias_and_name_key(ingredient_service):
    await ingredient_service.create(_ingredient())
    by_alias = (await ingredient_service.search_by_aliases("Fleur", "en")).value
    assert [i.name_key for i in by_alias] == ["salt"]
    by_key = (await ingredient_service.search_by_aliases("sal", "es")).value
    assert [i.name_key for i in by_key] == ["salt"]


@pytest.mark.asyncio
async def test_search_by_aliases_unknown_language(ingredient_service):
    result = await ingredient_service.search_by_aliases("sel", "jp")
    assert isinstance(result.error, InvariantError)


@pytest.mark.asyncio
async def test_find_all_filters(ingredient_service):
    await ingredient_service.create(_ingredient())
    await ingredient_service.create(
        _ingredient(name_key="carrot", i18n={"fr": "Carotte"}, aliases=[], category="vegetable", created_by="ann")
    )
    await ingredient_service.create(
        _ingredient(name_key="leek", i18n={"fr": "Poireau"}, aliases=[], category="vegetable")
    )

    veg = (await ingredient_service.find_all(IngredientFilters(category="vegetable"))).value
    assert [i.name_key for i in veg] == ["carrot", "leek"]

    by_ann = (await ingredient_service.find_all(IngredientFilters(created_by="ann"))).value
    assert [i.name_key for i in by_ann] == ["carrot"]

    searched = (await ingredient_service.find_all(IngredientFilters(search="poir"))).value
    assert [i.name_key for i in searched] == ["leek"]

    paged = (await ingredient_service.find_all(IngredientFilters(page=2, limit=2))).value
    assert [i.name_key for i in paged] == ["leek"]


def test_alias_query_escapes_input():
    q = alias_query("a+b", ["fr"])
    assert q["$or"] == [
        {"name_key": {"$regex": r"a\+b", "$options": "i"}},
        {"aliases": {"$regex": r"a\+b", "$options": "i"}},
        {"i18n.fr": {"$regex": r"a\+b", "$options": "i"}},
    ]


@pytest.mark.asyncio
async def test_unique_index_conflict_is_duplicate(ingredient_service, db, monkeypatch):
    await ensure_indexes(db)
    await ingredient_service.create(_ingredient())
    pepper = (await ingredient_service.create(_ingredient(name_key="pepper", i18n={"en": "Pepper"}))).value

    # 앱 레벨 확인을 통과시켜 동시 쓰기 경쟁을 재현, 유니크 인덱스가 막아야 함
    async def _never_taken(*args, **kwargs):
        return False

    monkeypatch.setattr(ingredient_service, "_name_key_taken", _never_taken)

    created = await ingredient_service.create(_ingredient(i18n={"en": "Salt again"}))
    assert isinstance(created.error, DuplicateIngredient)

    patched = await ingredient_service.partial_update(pepper.id, IngredientPatch(name_key="salt"))
    assert isinstance(patched.error, DuplicateIngredient)

    replaced = await ingredient_service.update(pepper.id, IngredientReplace(name_key="salt", i18n={"en": "Pepper"}))
    assert isinstance(replaced.error, DuplicateIngredient)

    assert await db["ingredients"].count_documents({"name_key": "salt"}) == 1
    assert (await ingredient_service.find_one(pepper.id)).value.name_key == "pepper"


@pytest.mark.asyncio
async def test_search_blank_query_matches_nothing(ingredient_service):
    await ingredient_service.create(_ingredient())
    result = await ingredient_service.search_by_aliases("   ")
    assert result.is_ok()
    assert result.value == []

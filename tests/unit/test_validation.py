import pytest
pytest.importorskip("pytest_asyncio")

from translatable import RecordValidationError
from translatable.db import schemas
from translatable.db.repositories import records as record_repo
from translatable.db.schemas.validation import partial_schema, validate_attributes

from tests.fixtures.records import ValidatedItem


def test_full_validation_requires_declared_fields():
    with pytest.raises(RecordValidationError) as exc_info:
        validate_attributes(schemas.TranslatableItemSchema, {"name": "x"}, table_name="translatable_table")
    err = exc_info.value
    assert err.table_name == "translatable_table"
    assert [e["loc"] for e in err.errors] == [("attr_one",)]
    assert "translatable_table" in str(err)


def test_full_validation_returns_coerced_supplied_values():
    value = validate_attributes(
        schemas.TranslatableItemSchema,
        {"name": "  padded  ", "attr_one": "one", "id": 5},
        table_name="translatable_table",
    )
    # Defaults are not materialized; unknown keys pass through
    assert value == {"name": "padded", "attr_one": "one", "id": 5}


def test_partial_validation_checks_only_present_keys():
    value = validate_attributes(
        schemas.TranslatableItemSchema, {"attr_two": " two "}, table_name="translatable_table", partial=True
    )
    assert value == {"attr_two": "two"}

    with pytest.raises(RecordValidationError):
        validate_attributes(schemas.TranslatableItemSchema, {"name": ""}, table_name="translatable_table", partial=True)


def test_partial_schema_is_cached_and_untouched_when_nothing_relaxed():
    keys = frozenset({"name"})
    assert partial_schema(schemas.TranslatableItemSchema, keys) is partial_schema(schemas.TranslatableItemSchema, keys)
    assert partial_schema(schemas.TranslatableItemSchema, frozenset({"attr_two"})) is schemas.TranslatableItemSchema


@pytest.mark.asyncio
async def test_insert_validates_base_and_current_locale(engine, monkeypatch):
    def _fail(*args, **kwargs):
        raise AssertionError("validation must run before persistence")

    monkeypatch.setattr(record_repo, "insert_record", _fail)
    item = ValidatedItem({"name": "only base"}, bind=engine)
    with pytest.raises(RecordValidationError) as exc_info:
        await item.save()
    assert exc_info.value.table_name == "translatable_table"


@pytest.mark.asyncio
async def test_insert_uses_current_locale_values(engine):
    item = ValidatedItem({"name": " named ", "attr_one": " english "}, bind=engine)
    await item.save()
    assert item.get("name") == "named"
    assert item.get("attr_one") == "english"

    loaded = await ValidatedItem.forge({"id": item.id}, bind=engine).fetch(require=True)
    assert loaded.get("name") == "named"
    assert loaded.get("attr_one") == "english"


@pytest.mark.asyncio
async def test_insert_under_locale_without_required_value_fails(engine):
    item = ValidatedItem({"name": "n", "attr_one": "english"}, bind=engine)
    item.set_locale("de")
    # attr_one exists only under "en"; the "de" values are validated
    with pytest.raises(RecordValidationError):
        await item.save()


@pytest.mark.asyncio
async def test_patch_validates_only_supplied_keys(engine):
    item = ValidatedItem({"name": "n", "attr_one": "english"}, bind=engine)
    await item.save()

    item.set_locale("de")
    await item.save({"attr_two": " zwei "}, {"patch": True})
    assert item.get("attr_two") == "zwei"

    with pytest.raises(RecordValidationError):
        await item.save({"name": ""}, {"patch": True})

    loaded = await ValidatedItem.forge({"id": item.id}, locale="de", bind=engine).fetch(require=True)
    assert loaded.get("attr_two") == "zwei"
    assert loaded.get("name") == "n"


@pytest.mark.asyncio
async def test_full_update_validates_all_attributes(engine, monkeypatch):
    item = ValidatedItem({"name": "ok", "attr_one": "a"}, bind=engine)
    await item.save()

    item.set("name", "")
    item.set("attr_two", "x" * 300)

    def _fail(*args, **kwargs):
        raise AssertionError("invalid values must not be persisted")

    monkeypatch.setattr(record_repo, "update_record", _fail)
    with pytest.raises(RecordValidationError) as exc_info:
        await item.save()
    assert {e["loc"] for e in exc_info.value.errors} == {("name",), ("attr_two",)}

    with pytest.raises(RecordValidationError):
        await item.save(None, {"method": "update"})

    loaded = await ValidatedItem.forge({"id": item.id}, bind=engine).fetch(require=True)
    assert loaded.get("name") == "ok"
    assert loaded.get("attr_two") is None


@pytest.mark.asyncio
async def test_full_update_coerces_untouched_attributes(engine):
    item = ValidatedItem({"name": "ok", "attr_one": "a"}, bind=engine)
    await item.save()

    item.set("attr_one", "  spaced  ")
    await item.save()
    loaded = await ValidatedItem.forge({"id": item.id}, bind=engine).fetch(require=True)
    assert loaded.get("attr_one") == "spaced"

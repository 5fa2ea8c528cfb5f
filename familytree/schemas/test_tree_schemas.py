# familytree/schemas/test_tree_schemas.py
import pytest
from datetime import date
from marshmallow import ValidationError

from familytree.schemas.tree_schemas import (
    FamilyTreeDataSchema,
    PersonDataSchema,
    PersonUpdateSchema,
    load_identifiers,
)

def test_person_schema_keeps_arbitrary_fields():
    data = PersonDataSchema().load({
        "firstName": "Ada",
        "lastName": "Lovelace",
        "birthPlace": "London",
        "tags": ["mathematician"],
    })
    assert data["birthPlace"] == "London"
    assert data["tags"] == ["mathematician"]

def test_person_schema_allows_null_known_fields():
    data = PersonUpdateSchema().load({"biography": None})
    assert data == {"biography": None}

@pytest.mark.parametrize("payload", [{}, None, [], "Ada"])
def test_person_schema_rejects_empty_or_non_mapping(payload):
    with pytest.raises(ValidationError):
        PersonDataSchema().load(payload)

def test_person_schema_rejects_wrong_type_for_known_field():
    with pytest.raises(ValidationError) as exc_info:
        PersonDataSchema().load({"firstName": 42})
    assert "firstName" in exc_info.value.messages

@pytest.mark.parametrize("key", ["id", "createdAt", "updatedAt"])
def test_person_schema_rejects_server_managed_fields(key):
    with pytest.raises(ValidationError) as exc_info:
        PersonUpdateSchema().load({"biography": "x", key: "value"})
    assert key in exc_info.value.messages

@pytest.mark.parametrize("key", ["ownerId", "memberIds", "createdAt"])
def test_tree_schema_rejects_membership_and_timestamps(key):
    with pytest.raises(ValidationError):
        FamilyTreeDataSchema().load({"name": "Smiths", key: "u2"})

def test_person_schema_accepts_owner_like_keys():
    # ownerId 는 가계도 문서에서만 예약된 필드입니다.
    assert PersonDataSchema().load({"ownerId": "x"}) == {"ownerId": "x"}

def test_load_identifiers():
    assert load_identifiers(family_tree_id="t1", person_id="p1") == {
        "family_tree_id": "t1", "person_id": "p1"
    }

@pytest.mark.parametrize("value", ["", "  ", None, "a/b", ".", "..", "__p__", "__name__", 12])
def test_load_identifiers_rejects_invalid_ids(value):
    with pytest.raises(ValidationError) as exc_info:
        load_identifiers(family_tree_id="t1", person_id=value)
    assert "person_id" in exc_info.value.messages

def test_load_identifiers_accepts_ids_with_inner_underscores():
    assert load_identifiers(person_id="__draft") == {"person_id": "__draft"}
    assert load_identifiers(person_id="p__1__") == {"person_id": "p__1__"}

def test_person_schema_accepts_date_values_for_dates():
    data = PersonDataSchema().load({"firstName": "Ada", "birthDate": date(1815, 12, 10), "deathDate": "1852"})
    assert data["birthDate"] == date(1815, 12, 10)
    assert data["deathDate"] == "1852"

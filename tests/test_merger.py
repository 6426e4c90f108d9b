"""
Unit tests for folding records into an entity field map
"""

from json_entity_extractor.merger import (
    fold_record,
    merge_entity_fields,
    resolve_type,
    strip_structured,
    unknown_fields,
)
from json_entity_extractor.models import Cardinality, FieldSpec, TypeTag

LONG_TEXT = "y" * 200


def fold(records):
    fields = {}
    contributions = []
    for record in records:
        contributions.extend(fold_record(fields, record))
    return fields, contributions


class TestResolveType:
    """Override policy"""

    def test_first_observation(self):
        assert resolve_type(None, TypeTag.INTEGER) is TypeTag.INTEGER
        assert resolve_type(None, None) is TypeTag.UNKNOWN

    def test_weak_observations_keep_known_type(self):
        assert resolve_type(TypeTag.INTEGER, TypeTag.NULL) is TypeTag.INTEGER
        assert resolve_type(TypeTag.INTEGER, TypeTag.UNKNOWN) is TypeTag.INTEGER
        assert resolve_type(TypeTag.INTEGER, None) is TypeTag.INTEGER

    def test_null_refines_unknown(self):
        assert resolve_type(TypeTag.UNKNOWN, TypeTag.NULL) is TypeTag.NULL

    def test_later_strong_observation_wins(self):
        assert resolve_type(TypeTag.NULL, TypeTag.FLOAT) is TypeTag.FLOAT
        assert resolve_type(TypeTag.INTEGER, TypeTag.FLOAT) is TypeTag.FLOAT

    def test_unbounded_string_is_sticky(self):
        assert resolve_type(TypeTag.UNBOUNDED_STRING, TypeTag.BOUNDED_STRING) is TypeTag.UNBOUNDED_STRING
        assert resolve_type(TypeTag.UNBOUNDED_STRING, TypeTag.INTEGER) is TypeTag.UNBOUNDED_STRING

    def test_structured_does_not_erase_scalar(self):
        assert resolve_type(TypeTag.INTEGER, TypeTag.STRUCTURED) is TypeTag.INTEGER
        assert resolve_type(TypeTag.NULL, TypeTag.STRUCTURED) is TypeTag.STRUCTURED


class TestFoldRecord:
    """Folding many records"""

    def test_field_order_follows_first_observation(self):
        fields, _ = fold([{"a": 1, "b": 2}, {"c": 3, "a": "text"}])

        assert list(fields) == ["a", "b", "c"]
        assert fields["a"].type is TypeTag.BOUNDED_STRING

    def test_keys_are_canonicalized(self):
        fields, _ = fold([{"first_name": "Ann"}])

        assert list(fields) == ["firstName"]
        assert fields["firstName"].original_key == "first_name"

    def test_null_never_erases_type(self):
        fields, _ = fold([{"age": 3}, {"age": None}])
        assert fields["age"].type is TypeTag.INTEGER

        fields, _ = fold([{"age": None}, {"age": 4}])
        assert fields["age"].type is TypeTag.INTEGER

        fields, _ = fold([{"age": None}])
        assert fields["age"].type is TypeTag.NULL

    def test_sticky_unbounded_string_in_any_order(self):
        forward, _ = fold([{"bio": "short"}, {"bio": LONG_TEXT}])
        backward, _ = fold([{"bio": LONG_TEXT}, {"bio": "short"}])

        assert forward["bio"].type is TypeTag.UNBOUNDED_STRING
        assert backward["bio"].type is TypeTag.UNBOUNDED_STRING

    def test_unclassifiable_field_is_kept_as_unknown(self):
        fields, _ = fold([{"blob": object()}])

        assert fields["blob"].type is TypeTag.UNKNOWN
        assert unknown_fields(fields) == ["blob"]

    def test_contributions_in_key_order(self):
        _, contributions = fold([{"address": {"city": "X"}, "id": 1, "orders": [{"sku": "A"}]}])

        assert [c.key for c in contributions] == ["address", "orders"]
        assert [c.cardinality for c in contributions] == [Cardinality.ONE_TO_ONE, Cardinality.ONE_TO_MANY]

    def test_mixed_scalar_and_nested_keeps_scalar(self):
        fields, contributions = fold([{"meta": 1}, {"meta": {"a": 1}}])

        assert fields["meta"].type is TypeTag.INTEGER
        assert len(contributions) == 1


class TestFieldMapHelpers:
    def test_strip_structured(self):
        fields = {
            "id": FieldSpec(TypeTag.INTEGER, "id"),
            "address": FieldSpec(TypeTag.STRUCTURED, "address"),
        }

        assert list(strip_structured(fields)) == ["id"]

    def test_merge_entity_fields(self):
        into = {
            "id": FieldSpec(TypeTag.INTEGER, "id"),
            "bio": FieldSpec(TypeTag.UNBOUNDED_STRING, "bio"),
        }
        other = {
            "bio": FieldSpec(TypeTag.BOUNDED_STRING, "bio"),
            "name": FieldSpec(TypeTag.BOUNDED_STRING, "name"),
            "id": FieldSpec(TypeTag.NULL, "id"),
        }

        merged = merge_entity_fields(into, other)

        assert list(merged) == ["id", "bio", "name"]
        assert merged["id"].type is TypeTag.INTEGER
        assert merged["bio"].type is TypeTag.UNBOUNDED_STRING
        assert merged["name"].type is TypeTag.BOUNDED_STRING

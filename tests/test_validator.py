import pytest

from agentpg.tool import PropertyDef, ToolSchema
from agentpg.validator import ValidationError, Validator


def _schema(properties, required=()):
    return ToolSchema(type="object", properties=properties, required=list(required))


@pytest.fixture
def validator():
    return Validator()


def test_valid_input_returns_decoded_object(validator):
    schema = _schema(
        {"city": PropertyDef(type="string"), "days": PropertyDef(type="integer")},
        required=["city"],
    )
    assert validator.validate_input(schema, '{"city": "Oslo", "days": 3}') == {
        "city": "Oslo",
        "days": 3,
    }


def test_bytes_input_is_accepted(validator):
    schema = _schema({"flag": PropertyDef(type="boolean")})
    assert validator.validate_input(schema, b'{"flag": true}') == {"flag": True}


def test_null_input_counts_as_empty_object(validator):
    assert validator.validate_input(_schema({"a": PropertyDef(type="string")}), "null") == {}


def test_null_input_still_misses_required(validator):
    schema = _schema({"a": PropertyDef(type="string")}, required=["a"])
    with pytest.raises(ValidationError, match="missing required field: a"):
        validator.validate_input(schema, "null")


def test_schema_must_be_object(validator):
    with pytest.raises(ValidationError, match="schema type must be 'object'"):
        validator.validate_input(ToolSchema(type="string"), "{}")


@pytest.mark.parametrize("raw", ["", "{not json", "[1, 2]"])
def test_invalid_json_input(validator, raw):
    with pytest.raises(ValidationError, match="invalid JSON input"):
        validator.validate_input(_schema({}), raw)


def test_missing_required_field(validator):
    schema = _schema({"city": PropertyDef(type="string")}, required=["city"])
    with pytest.raises(ValidationError, match="missing required field: city"):
        validator.validate_input(schema, "{}")


@pytest.mark.parametrize(
    "prop_type, raw_value",
    [
        ("string", "5"),
        ("number", '"x"'),
        ("number", "true"),
        ("integer", "2.5"),
        ("integer", '"3"'),
        ("boolean", '"yes"'),
        ("array", "{}"),
        ("object", "[]"),
    ],
)
def test_type_mismatch(validator, prop_type, raw_value):
    schema = _schema({"v": PropertyDef(type=prop_type)})
    with pytest.raises(ValidationError, match="field 'v': expected"):
        validator.validate_input(schema, '{"v": %s}' % raw_value)


@pytest.mark.parametrize("raw_value, expected", [("3", 3), ("3.0", 3.0)])
def test_integer_accepts_whole_numbers(validator, raw_value, expected):
    schema = _schema({"n": PropertyDef(type="integer")})
    assert validator.validate_input(schema, '{"n": %s}' % raw_value) == {"n": expected}


def test_null_values_are_allowed(validator):
    schema = _schema({"s": PropertyDef(type="string", enum=["a"])})
    assert validator.validate_input(schema, '{"s": null}') == {"s": None}


def test_unknown_type_is_not_checked(validator):
    schema = _schema({"v": PropertyDef(type="custom")})
    assert validator.validate_input(schema, '{"v": [1]}') == {"v": [1]}


def test_enum_rejects_unlisted_value(validator):
    schema = _schema({"op": PropertyDef(type="string", enum=["add", "subtract"])})
    with pytest.raises(ValidationError, match=r"not in allowed values \[add subtract\]"):
        validator.validate_input(schema, '{"op": "divide"}')


def test_enum_accepts_listed_value(validator):
    schema = _schema({"op": PropertyDef(type="string", enum=["add", "subtract"])})
    assert validator.validate_input(schema, '{"op": "add"}') == {"op": "add"}


def test_enum_requires_string(validator):
    schema = _schema({"op": PropertyDef(type="number", enum=["1"])})
    with pytest.raises(ValidationError, match="expected string for enum validation"):
        validator.validate_input(schema, '{"op": 1}')


def test_number_below_minimum(validator):
    schema = _schema({"n": PropertyDef(type="number", minimum=10.0)})
    with pytest.raises(ValidationError, match="is less than minimum"):
        validator.validate_input(schema, '{"n": 9}')


def test_number_above_maximum(validator):
    schema = _schema({"n": PropertyDef(type="integer", maximum=10.0)})
    with pytest.raises(ValidationError, match="exceeds maximum"):
        validator.validate_input(schema, '{"n": 11}')


def test_number_at_bounds_is_accepted(validator):
    schema = _schema({"n": PropertyDef(type="number", minimum=1.0, maximum=2.0)})
    assert validator.validate_input(schema, '{"n": 2}') == {"n": 2}


def test_string_too_short(validator):
    schema = _schema({"s": PropertyDef(type="string", min_length=3)})
    with pytest.raises(ValidationError, match="is less than minimum 3"):
        validator.validate_input(schema, '{"s": "ab"}')


def test_string_too_long_counts_bytes(validator):
    schema = _schema({"s": PropertyDef(type="string", max_length=1)})
    with pytest.raises(ValidationError, match="exceeds maximum 1"):
        validator.validate_input(schema, '{"s": "\u00e9"}')


def test_array_items_are_validated(validator):
    schema = _schema({"tags": PropertyDef(type="array", items=PropertyDef(type="string"))})
    with pytest.raises(ValidationError, match=r"field 'tags\[1\]'"):
        validator.validate_input(schema, '{"tags": ["a", 2]}')


def test_nested_object_properties_are_validated(validator):
    schema = _schema(
        {
            "owner": PropertyDef(
                type="object", properties={"age": PropertyDef(type="integer", minimum=0.0)}
            )
        }
    )
    with pytest.raises(ValidationError, match=r"field 'owner\.age'"):
        validator.validate_input(schema, '{"owner": {"age": -1}}')


def test_nested_missing_property_is_not_required(validator):
    schema = _schema(
        {"owner": PropertyDef(type="object", properties={"age": PropertyDef(type="integer")})}
    )
    assert validator.validate_input(schema, '{"owner": {}}') == {"owner": {}}
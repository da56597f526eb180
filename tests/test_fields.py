"""Test the configuration field schema and metafield serialization."""
import json

import pytest
from pydantic import BaseModel

from core.discounts.fields import ConfigField, FieldParseError, FieldType, config_fields
from verticals.volume_discount.models.schemas import VolumeDiscountConfiguration


def test_fields_derived_from_model():
    fields = config_fields(VolumeDiscountConfiguration)
    assert [f.name for f in fields] == ["quantity", "percentage"]
    assert fields[0] == ConfigField("quantity", 1, FieldType.INT)
    assert fields[1] == ConfigField("percentage", 0.0, FieldType.FLOAT)


def test_fields_reject_unsupported_types():
    class Bad(BaseModel):
        tags: list = []

    with pytest.raises(TypeError, match="unsupported type"):
        config_fields(Bad)


def test_fields_require_defaults():
    class Bad(BaseModel):
        quantity: int

    with pytest.raises(TypeError, match="need a default"):
        config_fields(Bad)


def test_parse_int():
    f = ConfigField("quantity", 1, FieldType.INT)
    assert f.parse("5") == 5
    assert f.parse(" 7 ") == 7
    assert f.parse("3.0") == 3
    assert isinstance(f.parse("3.0"), int)


@pytest.mark.parametrize("text,message", [("", "is required"), ("abc", "must be a number"),
                                          ("2.5", "must be a whole number"), ("inf", "must be a finite number")])
def test_parse_int_errors(text, message):
    f = ConfigField("quantity", 1, FieldType.INT)
    with pytest.raises(FieldParseError) as info:
        f.parse(text)
    assert info.value.field_name == "quantity"
    assert info.value.message == message


def test_parse_float_and_string():
    assert ConfigField("percentage", 0.0, FieldType.FLOAT).parse("12.5") == 12.5
    assert ConfigField("label", "", FieldType.STRING).parse(None) == ""
    assert ConfigField("label", "", FieldType.STRING).parse("Bulk") == "Bulk"


def test_render_defaults_and_integral_floats():
    f = ConfigField("percentage", 0.0, FieldType.FLOAT)
    assert f.render() == "0"
    assert f.render(10.0) == "10"
    assert f.render(12.5) == "12.5"


def test_metafield_value_matches_javascript_formatting():
    config = VolumeDiscountConfiguration(quantity=5, percentage=10)
    assert config.to_metafield_value() == '{"quantity":5,"percentage":10}'


def test_metafield_round_trip_preserves_types():
    original = VolumeDiscountConfiguration(quantity=5, percentage=12.5)
    decoded = VolumeDiscountConfiguration.from_metafield_value(original.to_metafield_value())
    assert decoded == original
    assert isinstance(decoded.quantity, int)
    assert isinstance(decoded.percentage, float)

    whole = VolumeDiscountConfiguration.from_metafield_value(json.dumps({"quantity": 2, "percentage": 10}))
    assert isinstance(whole.percentage, float)
    assert whole.percentage == 10.0


def test_missing_metafield_value_uses_defaults():
    assert VolumeDiscountConfiguration.from_metafield_value(None) == VolumeDiscountConfiguration()

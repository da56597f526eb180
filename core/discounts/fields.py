"""Configuration field schema.

A discount variant's configuration is a typed pydantic model. The editable
form needs a flat description of it (name, default, scalar type) so it can
seed text inputs and coerce them back on submit. That description is derived
from the model here rather than maintained by hand.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any
import math

from pydantic import BaseModel
from pydantic_core import PydanticUndefined


class FieldType(str, Enum):
    INT = "int"
    FLOAT = "float"
    STRING = "string"


_ANNOTATIONS: dict[Any, FieldType] = {
    int: FieldType.INT,
    float: FieldType.FLOAT,
    str: FieldType.STRING,
}


class FieldParseError(ValueError):
    """A form value could not be coerced to its declared type."""

    def __init__(self, field_name: str, message: str):
        super().__init__(f"{field_name} {message}")
        self.field_name = field_name
        self.message = message


def format_number(value: Any) -> Any:
    """Drop the fractional part of integral floats (``10.0`` -> ``10``)."""
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    return value


@dataclass(frozen=True)
class ConfigField:
    """One configuration field as seen by the form."""

    name: str
    default: Any
    type: FieldType

    def parse(self, text: Any) -> Any:
        """Coerce a submitted form value to the field's scalar type."""
        if self.type is FieldType.STRING:
            return "" if text is None else str(text)

        raw = "" if text is None else str(text).strip()
        if not raw:
            raise FieldParseError(self.name, "is required")

        try:
            number = float(raw)
        except ValueError:
            raise FieldParseError(self.name, "must be a number") from None
        if not math.isfinite(number):
            raise FieldParseError(self.name, "must be a finite number")

        if self.type is FieldType.INT:
            if not number.is_integer():
                raise FieldParseError(self.name, "must be a whole number")
            return int(number)
        return number

    def render(self, value: Any = None) -> str:
        """String shown in the text input; falls back to the default."""
        if value is None or value == "":
            value = self.default
        return str(format_number(value))


def config_fields(model: type[BaseModel]) -> tuple[ConfigField, ...]:
    """Describe a configuration model's fields in declaration order.

    Every field must have a default and a scalar annotation.
    """
    result = []
    for name, info in model.model_fields.items():
        field_type = _ANNOTATIONS.get(info.annotation)
        if field_type is None:
            raise TypeError(f"{model.__name__}.{name}: unsupported type {info.annotation!r}")
        if info.default is PydanticUndefined:
            raise TypeError(f"{model.__name__}.{name}: configuration fields need a default")
        result.append(ConfigField(name=name, default=info.default, type=field_type))
    return tuple(result)

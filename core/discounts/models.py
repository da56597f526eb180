"""Discount data model.

Wire-facing models use camelCase aliases so they serialize straight into
Admin API variables and form payloads; Python code uses snake_case.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Generic, Optional, TypeVar, Union
import json

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from core.discounts.fields import ConfigField, config_fields, format_number
from core.discounts.methods import DiscountMethod


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

class DiscountConfiguration(BaseModel):
    """Base for a discount variant's typed configuration.

    Subclasses declare scalar fields with defaults. The configuration travels
    to the discount function as the JSON value of a metafield.
    """

    @classmethod
    def fields(cls) -> tuple[ConfigField, ...]:
        return config_fields(cls)

    def to_metafield_value(self) -> str:
        """Serialize with JavaScript number formatting: ``{"quantity":5,"percentage":10}``."""
        data = {name: format_number(value) for name, value in self.model_dump().items()}
        return json.dumps(data, separators=(",", ":"))

    @classmethod
    def from_metafield_value(cls, value: Optional[str]):
        """Parse a metafield value; a missing value yields the defaults."""
        if not value:
            return cls()
        return cls.model_validate_json(value)


ConfigT = TypeVar("ConfigT", bound=DiscountConfiguration)


# ---------------------------------------------------------------------------
# Discount record
# ---------------------------------------------------------------------------

class CombinesWith(WireModel):
    order_discounts: bool = False
    product_discounts: bool = False
    shipping_discounts: bool = False


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class DiscountRecord(WireModel, Generic[ConfigT]):
    """Normalized discount as submitted by the editor.

    ``code``, ``usage_limit`` and ``applies_once_per_customer`` only mean
    something for code discounts.
    """

    title: str = ""
    method: DiscountMethod = DiscountMethod.CODE
    code: Optional[str] = Field(None, validate_default=True)
    combines_with: CombinesWith = Field(default_factory=CombinesWith)
    usage_limit: Optional[int] = None
    applies_once_per_customer: bool = False
    starts_at: datetime
    ends_at: Optional[datetime] = None
    configuration: ConfigT

    @field_validator("code")
    @classmethod
    def _code_required(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        if info.data.get("method") == DiscountMethod.CODE and not (value or "").strip():
            raise PydanticCustomError("code_required", "is required for code discounts")
        return value

    @field_validator("starts_at")
    @classmethod
    def _starts_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @field_validator("ends_at")
    @classmethod
    def _ends_after_start(cls, value: Optional[datetime], info: ValidationInfo) -> Optional[datetime]:
        value = _as_utc(value)
        starts_at = info.data.get("starts_at")
        if value is not None and starts_at is not None and value < starts_at:
            raise PydanticCustomError("ends_before_start", "must not precede the start date")
        return value

    @property
    def is_code(self) -> bool:
        return self.method == DiscountMethod.CODE


# ---------------------------------------------------------------------------
# Errors and results
# ---------------------------------------------------------------------------

class UserError(BaseModel):
    """Field-level error, as the Admin API reports it in ``userErrors``."""

    model_config = ConfigDict(extra="allow")

    code: Optional[str] = None
    message: str
    field: Optional[list[str]] = None

    def banner_line(self) -> str:
        path = ".".join(str(part) for part in self.field or [])
        return f"{path} {self.message}".strip()

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> list["UserError"]:
        """Report local validation failures in the same shape as remote ones."""
        return [
            cls(
                code="INVALID",
                message=err["msg"],
                field=[str(part) for part in err["loc"]],
            )
            for err in exc.errors()
        ]


@dataclass(frozen=True)
class SyncOk:
    """The mutation ran; ``errors`` holds its userErrors verbatim."""

    errors: list[UserError]
    discount_id: Optional[str] = None

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class TransportFailure:
    """The mutation's outcome is unknown: transport error or unexpected response."""

    cause: str

    @property
    def ok(self) -> bool:
        return False


SyncResult = Union[SyncOk, TransportFailure]


class ActionResult(BaseModel):
    """JSON payload returned to the editor after a submit."""

    errors: list[UserError] = Field(default_factory=list)
    failure: Optional[str] = None

    @classmethod
    def from_sync(cls, result: SyncResult) -> "ActionResult":
        if isinstance(result, TransportFailure):
            return cls(failure=result.cause)
        return cls(errors=list(result.errors))

    def to_wire(self) -> dict[str, Any]:
        return {
            "errors": [error.to_wire() for error in self.errors],
            "failure": self.failure,
        }


# ---------------------------------------------------------------------------
# Loader data and form submission
# ---------------------------------------------------------------------------

class LoadedDiscount(WireModel, Generic[ConfigT]):
    """An existing discount, mapped from the discount node query."""

    discount_id: str
    discount_method: DiscountMethod
    discount_title: Optional[str] = None
    discount_code: Optional[str] = None
    combines_with: Optional[CombinesWith] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    usage_limit: Optional[int] = None
    configuration: Optional[ConfigT] = None
    metafield_id: Optional[str] = None


@dataclass(frozen=True)
class SubmissionPayload:
    """The three string fields posted by the editor.

    An empty ``id`` means "create"; an empty ``metafield_id`` means the
    configuration metafield has not been assigned yet.
    """

    discount: str
    id: str = ""
    metafield_id: str = ""

    def to_form(self) -> dict[str, str]:
        return {"discount": self.discount, "id": self.id, "metafieldId": self.metafield_id}

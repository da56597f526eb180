"""Discount editor form state.

Binds an existing discount (or field defaults for a new one) into editable
values, serializes them on submit, and tracks the submission lifecycle as an
enum-based state machine:

    EDITING -> SUBMITTING -> SUBMITTED_OK             (terminal, redirects)
                          -> SUBMITTED_WITH_ERRORS -> EDITING
                          -> FAILED                -> EDITING
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Optional
import json
import logging

from core.discounts.fields import ConfigField, FieldParseError
from core.discounts.methods import DiscountMethod
from core.discounts.models import (
    ActionResult,
    CombinesWith,
    DiscountConfiguration,
    LoadedDiscount,
    SubmissionPayload,
    UserError,
)

logger = logging.getLogger(__name__)

ADMIN_DISCOUNTS = "shopify://admin/discounts"
BANNER_HEADING = "There were some issues with your form submission:"


# ---------------------------------------------------------------------------
# State definitions
# ---------------------------------------------------------------------------

class FormState(str, Enum):
    EDITING = "editing"
    SUBMITTING = "submitting"
    SUBMITTED_OK = "submitted_ok"
    SUBMITTED_WITH_ERRORS = "submitted_with_errors"
    FAILED = "failed"


_FORM_TRANSITIONS: dict[FormState, list[FormState]] = {
    FormState.EDITING: [FormState.SUBMITTING],
    FormState.SUBMITTING: [
        FormState.SUBMITTED_OK,
        FormState.SUBMITTED_WITH_ERRORS,
        FormState.FAILED,
    ],
    FormState.SUBMITTED_WITH_ERRORS: [FormState.EDITING],
    FormState.FAILED: [FormState.EDITING],
    FormState.SUBMITTED_OK: [],  # terminal
}


class RequirementType(str, Enum):
    NONE = "NONE"
    SUBTOTAL = "SUBTOTAL"
    QUANTITY = "QUANTITY"


@dataclass
class FormTransition:
    from_state: str
    to_state: str
    timestamp: datetime


# ---------------------------------------------------------------------------
# Field values
# ---------------------------------------------------------------------------

@dataclass
class DiscountFormFields:
    """Editable values. Text inputs hold strings until submit."""

    discount_id: str = ""
    title: str = ""
    method: DiscountMethod = DiscountMethod.CODE
    code: str = ""
    combines_with: CombinesWith = field(default_factory=CombinesWith)
    requirement_type: RequirementType = RequirementType.NONE
    requirement_subtotal: str = "0"
    requirement_quantity: str = "0"
    usage_limit: Optional[str] = None
    applies_once_per_customer: bool = False
    start_date: str = ""
    end_date: Optional[str] = None
    configuration: dict[str, str] = field(default_factory=dict)
    metafield_id: str = ""


@dataclass
class ErrorBanner:
    heading: str
    lines: list[str]
    tone: str = "critical"


Dispatch = Callable[[SubmissionPayload], Awaitable[ActionResult]]


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


# ---------------------------------------------------------------------------
# Form
# ---------------------------------------------------------------------------

class DiscountForm:
    """One editor instance.

    Usage::

        form = DiscountForm(VolumeDiscountConfiguration, loaded=None)
        form.fields.code = "SAVE10"
        form.fields.configuration["quantity"] = "5"
        await form.submit(dispatch)
        if form.state is FormState.SUBMITTED_OK:
            ...
    """

    def __init__(
        self,
        config_model: type[DiscountConfiguration],
        loaded: Optional[LoadedDiscount] = None,
        *,
        discount_name: str = "",
        now: Optional[datetime] = None,
        on_redirect: Optional[Callable[[str], None]] = None,
    ):
        self.config_fields: tuple[ConfigField, ...] = config_model.fields()
        self.discount_name = discount_name
        self.is_new = loaded is None
        self.state = FormState.EDITING
        self.history: list[FormTransition] = []
        self.errors: list[UserError] = []
        self.failure: Optional[str] = None
        self.redirect_to: Optional[str] = None
        self._on_redirect = on_redirect
        self.fields = self._bind(loaded, now or datetime.now(timezone.utc))

    def _bind(self, loaded: Optional[LoadedDiscount], now: datetime) -> DiscountFormFields:
        if loaded is None:
            return DiscountFormFields(
                start_date=now.isoformat(),
                configuration={f.name: f.render() for f in self.config_fields},
            )

        configuration = loaded.configuration.model_dump() if loaded.configuration else {}
        return DiscountFormFields(
            discount_id=loaded.discount_id,
            title=loaded.discount_title or "",
            method=loaded.discount_method,
            code=(loaded.discount_code or "") if loaded.discount_method == DiscountMethod.CODE else "",
            combines_with=loaded.combines_with or CombinesWith(),
            usage_limit=str(loaded.usage_limit) if loaded.usage_limit is not None else None,
            start_date=_iso(loaded.start_date) or now.isoformat(),
            end_date=_iso(loaded.end_date),
            configuration={f.name: f.render(configuration.get(f.name)) for f in self.config_fields},
            metafield_id=loaded.metafield_id or "",
        )

    # --- State machine ---

    def can_transition(self, to_state: FormState) -> bool:
        return to_state in _FORM_TRANSITIONS.get(self.state, [])

    def _transition(self, to_state: FormState) -> None:
        if not self.can_transition(to_state):
            allowed = [s.value for s in _FORM_TRANSITIONS.get(self.state, [])]
            raise ValueError(
                f"Cannot transition from {self.state.value} to {to_state.value}. "
                f"Allowed: {allowed}"
            )
        self.history.append(
            FormTransition(
                from_state=self.state.value,
                to_state=to_state.value,
                timestamp=datetime.now(timezone.utc),
            )
        )
        self.state = to_state

    @property
    def is_loading(self) -> bool:
        return self.state is FormState.SUBMITTING

    @property
    def is_terminal(self) -> bool:
        return len(_FORM_TRANSITIONS.get(self.state, [])) == 0

    # --- Serialization ---

    def _parse_fields(self) -> tuple[dict[str, Any], list[UserError]]:
        values: dict[str, Any] = {}
        errors: list[UserError] = []

        for config_field in self.config_fields:
            try:
                values[config_field.name] = config_field.parse(self.fields.configuration.get(config_field.name))
            except FieldParseError as exc:
                errors.append(UserError(code="INVALID", message=exc.message, field=["configuration", exc.field_name]))

        usage_limit = (self.fields.usage_limit or "").strip()
        if usage_limit:
            try:
                values["usageLimit"] = int(usage_limit)
            except ValueError:
                errors.append(UserError(code="INVALID", message="must be a whole number", field=["usageLimit"]))
        else:
            values["usageLimit"] = None

        return values, errors

    def _discount(self, values: dict[str, Any]) -> dict[str, Any]:
        f = self.fields
        return {
            "title": f.title,
            "method": f.method.value,
            "code": f.code,
            "combinesWith": f.combines_with.model_dump(by_alias=True),
            "usageLimit": values["usageLimit"],
            "appliesOncePerCustomer": f.applies_once_per_customer,
            "startsAt": f.start_date,
            "endsAt": f.end_date or None,
            "configuration": {c.name: values[c.name] for c in self.config_fields},
        }

    # --- Submit ---

    async def submit(self, dispatch: Dispatch) -> FormState:
        """Serialize the fields and hand them to ``dispatch``.

        Unparseable fields keep the form in EDITING with the banner populated
        and nothing is dispatched.
        """
        values, errors = self._parse_fields()
        if errors:
            self.errors, self.failure = errors, None
            return self.state

        payload = SubmissionPayload(
            discount=json.dumps(self._discount(values)),
            id=self.fields.discount_id,
            metafield_id=self.fields.metafield_id,
        )
        self._transition(FormState.SUBMITTING)
        try:
            result = await dispatch(payload)
        except Exception as exc:
            self._fail(f"{type(exc).__name__}: {exc}", [])
            raise

        if result.failure:
            self._fail(result.failure, result.errors)
        elif result.errors:
            self.errors, self.failure = list(result.errors), None
            self._transition(FormState.SUBMITTED_WITH_ERRORS)
            self._transition(FormState.EDITING)
        else:
            self.errors, self.failure = [], None
            self._transition(FormState.SUBMITTED_OK)
            self.redirect_to = ADMIN_DISCOUNTS
            if self._on_redirect:
                self._on_redirect(ADMIN_DISCOUNTS)
        return self.state

    def _fail(self, cause: str, errors: list[UserError]) -> None:
        logger.error("Discount submission failed: %s", cause)
        self.errors, self.failure = list(errors), cause
        self._transition(FormState.FAILED)
        self._transition(FormState.EDITING)

    # --- Presentation data ---

    @property
    def error_banner(self) -> Optional[ErrorBanner]:
        lines = [e.banner_line() for e in self.errors]
        if self.failure:
            lines.append(f"The discount could not be saved: {self.failure}")
        if not lines:
            return None
        return ErrorBanner(heading=BANNER_HEADING, lines=lines)

    @property
    def page_title(self) -> str:
        return "New discount" if self.is_new else "Edit discount"

    def summary(self, currency_code: str = "USD") -> dict[str, Any]:
        f = self.fields
        return {
            "header": {
                "discountMethod": f.method.value,
                "discountDescriptor": f.title if f.method == DiscountMethod.AUTOMATIC else f.code,
                "appDiscountType": self.discount_name,
            },
            "performance": {"status": "SCHEDULED", "usageCount": 0},
            "minimumRequirements": {
                "requirementType": f.requirement_type.value,
                "subtotal": f.requirement_subtotal,
                "quantity": f.requirement_quantity,
                "currencyCode": currency_code,
            },
            "usageLimits": {
                "oncePerCustomer": f.applies_once_per_customer,
                "totalUsageLimit": f.usage_limit,
            },
            "activeDates": {"startDate": f.start_date, "endDate": f.end_date},
        }

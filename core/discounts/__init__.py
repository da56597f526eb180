"""
Core Discounts: Shopify app discount synchronization.

Provides:
- DiscountMethod / DiscountType: subtype -> code/automatic classification
- build_discount_query: discount node + configuration metafield read query
- DiscountConfiguration / DiscountRecord: typed data model
- DiscountSyncAdapter: create/update mutations with explicit results
- DiscountForm: editor form state machine
- DiscountPage: loader/action data layer of an editor page
"""
from core.discounts.fields import (
    ConfigField,
    FieldParseError,
    FieldType,
    config_fields,
)
from core.discounts.form_state import (
    ADMIN_DISCOUNTS,
    DiscountForm,
    DiscountFormFields,
    ErrorBanner,
    FormState,
    RequirementType,
)
from core.discounts.methods import (
    AUTOMATIC_TYPES,
    CODE_TYPES,
    DiscountMethod,
    DiscountType,
    UnknownDiscountType,
    classify,
    classify_gid,
    classify_name,
)
from core.discounts.models import (
    ActionResult,
    CombinesWith,
    DiscountConfiguration,
    DiscountRecord,
    LoadedDiscount,
    SubmissionPayload,
    SyncOk,
    SyncResult,
    TransportFailure,
    UserError,
)
from core.discounts.page import (
    NEW_DISCOUNT_ID,
    DiscountNotFound,
    DiscountPage,
    DiscountReadError,
)
from core.discounts.query_builder import build_discount_query, node_gid
from core.discounts.sync import CONFIGURATION_KEY, DiscountSyncAdapter

__all__ = [
    # Fields
    "ConfigField",
    "FieldParseError",
    "FieldType",
    "config_fields",
    # Form
    "ADMIN_DISCOUNTS",
    "DiscountForm",
    "DiscountFormFields",
    "ErrorBanner",
    "FormState",
    "RequirementType",
    # Methods
    "AUTOMATIC_TYPES",
    "CODE_TYPES",
    "DiscountMethod",
    "DiscountType",
    "UnknownDiscountType",
    "classify",
    "classify_gid",
    "classify_name",
    # Models
    "ActionResult",
    "CombinesWith",
    "DiscountConfiguration",
    "DiscountRecord",
    "LoadedDiscount",
    "SubmissionPayload",
    "SyncOk",
    "SyncResult",
    "TransportFailure",
    "UserError",
    # Page
    "NEW_DISCOUNT_ID",
    "DiscountNotFound",
    "DiscountPage",
    "DiscountReadError",
    # Query / sync
    "build_discount_query",
    "node_gid",
    "CONFIGURATION_KEY",
    "DiscountSyncAdapter",
]

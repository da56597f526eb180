"""Discount method classification.

Every Shopify discount node resolves to a concrete subtype (``DiscountCodeApp``,
``DiscountAutomaticBxgy``, ...). The editor only cares whether a discount is
redeemed with a code or applied automatically.
"""

from enum import Enum


class DiscountMethod(str, Enum):
    """How a discount is triggered at checkout."""

    CODE = "Code"
    AUTOMATIC = "Automatic"


class DiscountType(str, Enum):
    """Known discount subtypes, including the two node-level aliases."""

    CODE_APP = "DiscountCodeApp"
    CODE_BASIC = "DiscountCodeBasic"
    CODE_BXGY = "DiscountCodeBxgy"
    CODE_FREE_SHIPPING = "DiscountCodeFreeShipping"
    CODE_NODE = "DiscountCodeNode"
    AUTOMATIC_APP = "DiscountAutomaticApp"
    AUTOMATIC_BASIC = "DiscountAutomaticBasic"
    AUTOMATIC_BXGY = "DiscountAutomaticBxgy"
    AUTOMATIC_FREE_SHIPPING = "DiscountAutomaticFreeShipping"
    AUTOMATIC_NODE = "DiscountAutomaticNode"

    @property
    def is_node_alias(self) -> bool:
        return self in (DiscountType.CODE_NODE, DiscountType.AUTOMATIC_NODE)


class UnknownDiscountType(LookupError):
    """Raised when a subtype name or identifier cannot be classified."""


_METHODS: dict[DiscountType, DiscountMethod] = {
    DiscountType.CODE_APP: DiscountMethod.CODE,
    DiscountType.CODE_BASIC: DiscountMethod.CODE,
    DiscountType.CODE_BXGY: DiscountMethod.CODE,
    DiscountType.CODE_FREE_SHIPPING: DiscountMethod.CODE,
    DiscountType.CODE_NODE: DiscountMethod.CODE,
    DiscountType.AUTOMATIC_APP: DiscountMethod.AUTOMATIC,
    DiscountType.AUTOMATIC_BASIC: DiscountMethod.AUTOMATIC,
    DiscountType.AUTOMATIC_BXGY: DiscountMethod.AUTOMATIC,
    DiscountType.AUTOMATIC_FREE_SHIPPING: DiscountMethod.AUTOMATIC,
    DiscountType.AUTOMATIC_NODE: DiscountMethod.AUTOMATIC,
}

# Concrete subtypes, in the order they are selected by the discount query.
CODE_TYPES: tuple[DiscountType, ...] = tuple(
    t for t, m in _METHODS.items() if m is DiscountMethod.CODE and not t.is_node_alias
)
AUTOMATIC_TYPES: tuple[DiscountType, ...] = tuple(
    t for t, m in _METHODS.items() if m is DiscountMethod.AUTOMATIC and not t.is_node_alias
)


def classify(discount_type: DiscountType) -> DiscountMethod:
    """Return the method for a known subtype."""
    return _METHODS[discount_type]


def classify_name(name: str) -> DiscountMethod:
    """Classify a subtype by its GraphQL type name.

    Raises UnknownDiscountType instead of falling back to a default.
    """
    try:
        discount_type = DiscountType(name)
    except ValueError:
        raise UnknownDiscountType(f"Unknown discount type: {name!r}") from None
    return classify(discount_type)


def classify_gid(gid: str) -> DiscountMethod:
    """Classify a discount by its global id, e.g. ``gid://shopify/DiscountAutomaticApp/123``."""
    parts = (gid or "").split("/")
    if len(parts) < 5 or parts[0] != "gid:":
        raise UnknownDiscountType(f"Not a discount global id: {gid!r}")
    return classify_name(parts[3])

"""GraphQL read query for a discount node and its configuration metafield."""

import json

from core.discounts.methods import AUTOMATIC_TYPES, CODE_TYPES, DiscountType

DISCOUNT_NODE_GID = "gid://shopify/DiscountNode/{id}"

_COMBINES_WITH = """combinesWith {
      orderDiscounts
      productDiscounts
      shippingDiscounts
    }"""

CODE_SELECTION = f"""title
    startsAt
    endsAt
    usageLimit
    codes(first: 3) {{
      edges {{
        node {{
          code
        }}
      }}
    }}
    {_COMBINES_WITH}"""

# Automatic discounts have no codes and no usage limit in the Admin schema.
AUTOMATIC_SELECTION = f"""title
    startsAt
    endsAt
    {_COMBINES_WITH}"""


def _literal(value: str) -> str:
    # JSON string escaping is valid GraphQL string escaping.
    return json.dumps(value)


def _fragment(discount_type: DiscountType, selection: str) -> str:
    return f"""... on {discount_type.value} {{
    {selection}
  }}"""


def node_gid(discount_id: str) -> str:
    """Expand a bare id into a DiscountNode gid; full gids pass through."""
    if discount_id.startswith("gid://"):
        return discount_id
    return DISCOUNT_NODE_GID.format(id=discount_id)


def build_discount_query(namespace: str, key: str, discount_id: str) -> str:
    """Build the discount node query.

    Every concrete subtype gets its own ``... on`` block because the node's
    ``discount`` field is a union; the query must succeed whatever type the
    id resolves to.
    """
    fragments = "\n  ".join(
        [_fragment(t, CODE_SELECTION) for t in CODE_TYPES]
        + [_fragment(t, AUTOMATIC_SELECTION) for t in AUTOMATIC_TYPES]
    )
    return f"""#graphql
query {{
  discountNode(id: {_literal(node_gid(discount_id))}) {{
    id
    metafield(namespace: {_literal(namespace)}, key: {_literal(key)}) {{
      value
      id
    }}
    discount {{
  {fragments}
    }}
  }}
}}"""

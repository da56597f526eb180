"""Test the discount node query builder."""
from core.discounts.methods import AUTOMATIC_TYPES, CODE_TYPES, DiscountType
from core.discounts.query_builder import build_discount_query, node_gid


def test_query_has_fragment_for_every_subtype():
    query = build_discount_query("$app:cart-goal", "function-configuration", "42")
    for t in CODE_TYPES + AUTOMATIC_TYPES:
        assert f"... on {t.value} {{" in query
    assert query.count("... on ") == 8


def test_query_skips_node_aliases():
    query = build_discount_query("ns", "key", "1")
    assert DiscountType.CODE_NODE.value not in query
    assert DiscountType.AUTOMATIC_NODE.value not in query


def test_query_addresses_node_and_metafield():
    query = build_discount_query("$app:cart-goal", "function-configuration", "42")
    assert query.startswith("#graphql")
    assert 'discountNode(id: "gid://shopify/DiscountNode/42")' in query
    assert 'metafield(namespace: "$app:cart-goal", key: "function-configuration")' in query


def test_code_fragment_selects_codes_and_usage_limit():
    query = build_discount_query("ns", "key", "1")
    code_block = query.split("... on DiscountCodeApp {")[1].split("... on")[0]
    for field in ("title", "startsAt", "endsAt", "usageLimit", "codes(first: 3)", "orderDiscounts",
                  "productDiscounts", "shippingDiscounts"):
        assert field in code_block


def test_automatic_fragment_selects_dates_and_combinations():
    query = build_discount_query("ns", "key", "1")
    auto_block = query.split("... on DiscountAutomaticApp {")[1].split("... on")[0]
    assert "title" in auto_block
    assert "startsAt" in auto_block
    assert "combinesWith" in auto_block
    assert "codes" not in auto_block


def test_string_arguments_are_escaped():
    query = build_discount_query('ns"x', "key", "1")
    assert 'namespace: "ns\\"x"' in query


def test_node_gid_passthrough():
    assert node_gid("7") == "gid://shopify/DiscountNode/7"
    assert node_gid("gid://shopify/DiscountNode/7") == "gid://shopify/DiscountNode/7"

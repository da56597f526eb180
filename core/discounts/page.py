"""Server-side data layer of a discount editor page.

``load`` backs the page's GET (one discount node query) and ``act`` backs its
POST (one create or update mutation). Both are generic over the discount
variant's configuration model.
"""

from typing import Any, Generic, Optional
import logging

from pydantic import ValidationError

from core.discounts.methods import UnknownDiscountType, classify_gid
from core.discounts.models import (
    ActionResult,
    CombinesWith,
    ConfigT,
    DiscountRecord,
    LoadedDiscount,
    SubmissionPayload,
    UserError,
)
from core.discounts.query_builder import build_discount_query
from core.discounts.sync import CONFIGURATION_KEY, DiscountSyncAdapter
from core.integrations.shopify_admin import ShopifyAdminClient

logger = logging.getLogger(__name__)

NEW_DISCOUNT_ID = "new"


class DiscountReadError(RuntimeError):
    """The discount could not be read or classified."""


class DiscountNotFound(DiscountReadError):
    pass


class DiscountPage(Generic[ConfigT]):
    """Loader and action for one discount variant.

    Usage::

        page = DiscountPage(VolumeDiscountConfiguration, namespace="$app:cart-goal")
        loaded = await page.load(client, "123")
        result = await page.act(client, function_id, payload)
    """

    def __init__(
        self,
        config_model: type[ConfigT],
        namespace: str,
        key: str = CONFIGURATION_KEY,
    ):
        self.config_model = config_model
        self.namespace = namespace
        self.key = key

    # --- Loader ---

    async def load(
        self,
        client: ShopifyAdminClient,
        discount_id: str,
    ) -> Optional[LoadedDiscount[ConfigT]]:
        """Fetch an existing discount; ``"new"`` yields None without a round trip."""
        if discount_id == NEW_DISCOUNT_ID:
            return None

        query = build_discount_query(self.namespace, self.key, discount_id)
        response = await client.graphql(query)
        if not response.ok:
            raise DiscountReadError(response.error or f"HTTP {response.status_code}")

        data = response.data
        if not isinstance(data, dict):
            raise DiscountReadError("Response body is not a JSON object")
        if data.get("errors"):
            raise DiscountReadError(f"GraphQL errors: {data['errors']}")

        node = (data.get("data") or {}).get("discountNode")
        if node is None:
            raise DiscountNotFound(f"Discount {discount_id} not found")
        return self.map_node(node)

    def map_node(self, node: dict[str, Any]) -> LoadedDiscount[ConfigT]:
        """Map a ``discountNode`` selection onto loader data."""
        node_id = node.get("id") or ""
        try:
            method = classify_gid(node_id)
        except UnknownDiscountType as exc:
            raise DiscountReadError(str(exc)) from exc

        discount = node.get("discount") or {}
        edges = (discount.get("codes") or {}).get("edges") or []
        code = edges[0]["node"]["code"] if edges else None

        metafield = node.get("metafield") or {}
        configuration = None
        if metafield.get("value"):
            try:
                configuration = self.config_model.from_metafield_value(metafield["value"])
            except ValidationError as exc:
                raise DiscountReadError(f"Invalid configuration metafield on {node_id}: {exc}") from exc

        combines_with = discount.get("combinesWith")
        return LoadedDiscount[self.config_model](
            discount_id=node_id,
            discount_method=method,
            discount_title=discount.get("title"),
            discount_code=code,
            combines_with=CombinesWith.model_validate(combines_with) if combines_with else None,
            start_date=discount.get("startsAt"),
            end_date=discount.get("endsAt"),
            usage_limit=discount.get("usageLimit"),
            configuration=configuration,
            metafield_id=metafield.get("id"),
        )

    # --- Action ---

    async def act(
        self,
        client: ShopifyAdminClient,
        function_id: Optional[str],
        payload: SubmissionPayload,
    ) -> ActionResult:
        """Create (empty ``id``) or update the submitted discount."""
        try:
            record = DiscountRecord[self.config_model].model_validate_json(payload.discount)
        except ValidationError as exc:
            errors = UserError.from_validation_error(exc)
            logger.info("Rejected discount submission with %d invalid field(s)", len(errors))
            return ActionResult(errors=errors)

        adapter = DiscountSyncAdapter(client, self.namespace, self.key)
        if payload.id:
            result = await adapter.update(
                record,
                discount_id=payload.id,
                function_id=function_id,
                metafield_id=payload.metafield_id or None,
            )
        else:
            result = await adapter.create(record, function_id)
        return ActionResult.from_sync(result)

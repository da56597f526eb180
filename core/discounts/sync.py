"""Create and update app discounts through the Admin GraphQL API.

Each call issues exactly one mutation and reports either the mutation's
``userErrors`` (possibly empty) or a TransportFailure. Nothing is retried and
nothing is validated beyond what the remote API enforces.
"""

from typing import Any, Optional
import logging

from pydantic import ValidationError

from core.discounts.models import (
    DiscountRecord,
    SyncOk,
    SyncResult,
    TransportFailure,
    UserError,
)
from core.integrations.shopify_admin import ShopifyAdminClient

logger = logging.getLogger(__name__)

CONFIGURATION_KEY = "function-configuration"

_USER_ERRORS = """userErrors {
      code
      message
      field
    }"""

CREATE_CODE_MUTATION = f"""#graphql
mutation CreateCodeDiscount($discount: DiscountCodeAppInput!) {{
  discountCreate: discountCodeAppCreate(codeAppDiscount: $discount) {{
    codeAppDiscount {{
      discountId
    }}
    {_USER_ERRORS}
  }}
}}"""

CREATE_AUTOMATIC_MUTATION = f"""#graphql
mutation CreateAutomaticDiscount($discount: DiscountAutomaticAppInput!) {{
  discountCreate: discountAutomaticAppCreate(automaticAppDiscount: $discount) {{
    automaticAppDiscount {{
      discountId
    }}
    {_USER_ERRORS}
  }}
}}"""

UPDATE_CODE_MUTATION = f"""#graphql
mutation UpdateCodeDiscount($discount: DiscountCodeAppInput!, $id: ID!) {{
  discountUpdate: discountCodeAppUpdate(codeAppDiscount: $discount, id: $id) {{
    codeAppDiscount {{
      discountId
    }}
    {_USER_ERRORS}
  }}
}}"""

UPDATE_AUTOMATIC_MUTATION = f"""#graphql
mutation UpdateAutomaticDiscount($discount: DiscountAutomaticAppInput!, $id: ID!) {{
  discountUpdate: discountAutomaticAppUpdate(automaticAppDiscount: $discount, id: $id) {{
    automaticAppDiscount {{
      discountId
    }}
    {_USER_ERRORS}
  }}
}}"""


def discount_input(record: DiscountRecord, function_id: Optional[str]) -> dict[str, Any]:
    """Map a record onto DiscountCodeAppInput / DiscountAutomaticAppInput."""
    data: dict[str, Any] = {
        "functionId": function_id,
        "title": record.title,
        "combinesWith": record.combines_with.model_dump(by_alias=True),
        "startsAt": record.starts_at.isoformat(),
        "endsAt": record.ends_at.isoformat() if record.ends_at else None,
    }
    if record.is_code:
        # Code discounts are listed in the admin under their code.
        data.update(
            title=record.code,
            code=record.code,
            usageLimit=record.usage_limit,
            appliesOncePerCustomer=record.applies_once_per_customer,
        )
    return data


def parse_mutation_response(
    data: Any,
    alias: str,
    discount_field: str,
) -> SyncResult:
    """Extract ``userErrors`` from a mutation response body.

    Anything other than a well-formed payload under ``alias`` is a
    TransportFailure, never an empty error list.
    """
    if not isinstance(data, dict):
        return TransportFailure("Response body is not a JSON object")
    if data.get("errors"):
        messages = "; ".join(
            str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in data["errors"]
        )
        return TransportFailure(f"GraphQL errors: {messages}")

    payload = (data.get("data") or {}).get(alias)
    if not isinstance(payload, dict) or not isinstance(payload.get("userErrors"), list):
        return TransportFailure(f"Response is missing {alias}.userErrors")

    try:
        errors = [UserError.model_validate(e) for e in payload["userErrors"]]
    except ValidationError as exc:
        return TransportFailure(f"Malformed {alias}.userErrors: {exc.error_count()} validation error(s)")
    discount = payload.get(discount_field) or {}
    return SyncOk(errors=errors, discount_id=discount.get("discountId"))


class DiscountSyncAdapter:
    """Writes discount records and their configuration metafield.

    Usage::

        adapter = DiscountSyncAdapter(client, namespace="$app:cart-goal")
        result = await adapter.create(record, function_id)
    """

    def __init__(
        self,
        client: ShopifyAdminClient,
        namespace: str,
        key: str = CONFIGURATION_KEY,
    ):
        self.client = client
        self.namespace = namespace
        self.key = key

    async def create(self, record: DiscountRecord, function_id: Optional[str]) -> SyncResult:
        """Create the discount with a new configuration metafield."""
        discount = discount_input(record, function_id)
        discount["metafields"] = [
            {
                "namespace": self.namespace,
                "key": self.key,
                "type": "json",
                "value": record.configuration.to_metafield_value(),
            }
        ]
        if record.is_code:
            mutation, discount_field = CREATE_CODE_MUTATION, "codeAppDiscount"
        else:
            mutation, discount_field = CREATE_AUTOMATIC_MUTATION, "automaticAppDiscount"

        return await self._mutate(mutation, {"discount": discount}, "discountCreate", discount_field)

    async def update(
        self,
        record: DiscountRecord,
        discount_id: str,
        function_id: Optional[str],
        metafield_id: Optional[str],
    ) -> SyncResult:
        """Update the discount addressed by ``discount_id``.

        The configuration metafield is updated in place by id. Namespace and
        key are only sent when no metafield has been assigned yet, which is
        what assigns it.
        """
        metafield: dict[str, Any] = {
            "type": "json",
            "value": record.configuration.to_metafield_value(),
        }
        if metafield_id:
            metafield["id"] = metafield_id
        else:
            logger.info("Discount %s has no configuration metafield; attaching one", discount_id)
            metafield.update(namespace=self.namespace, key=self.key)

        discount = discount_input(record, function_id)
        discount["metafields"] = [metafield]
        if record.is_code:
            mutation, discount_field = UPDATE_CODE_MUTATION, "codeAppDiscount"
        else:
            mutation, discount_field = UPDATE_AUTOMATIC_MUTATION, "automaticAppDiscount"

        return await self._mutate(
            mutation,
            {"discount": discount, "id": discount_id},
            "discountUpdate",
            discount_field,
        )

    async def _mutate(
        self,
        mutation: str,
        variables: dict[str, Any],
        alias: str,
        discount_field: str,
    ) -> SyncResult:
        logger.debug("%s variables: %s", alias, variables)
        response = await self.client.graphql(mutation, variables)
        if not response.ok:
            logger.error("%s failed on %s: %s", alias, self.client.account, response.error)
            return TransportFailure(response.error or f"HTTP {response.status_code}")

        result = parse_mutation_response(response.data, alias, discount_field)
        if isinstance(result, TransportFailure):
            logger.error("%s returned an unexpected response: %s", alias, result.cause)
        elif result.errors:
            logger.warning("%s reported %d user error(s)", alias, len(result.errors))
        return result

"""Volume discount API router: the editor page's loader and action.

GET  /{function_id}/{discount_id}  loader, ``discount_id == "new"`` for a new discount
POST /{function_id}/{discount_id}  action, form fields ``discount``, ``id``, ``metafieldId``
"""

from fastapi import APIRouter, Depends, Form, HTTPException, Response

from core.discounts.models import SubmissionPayload
from core.discounts.page import DiscountNotFound, DiscountPage
from core.integrations.shopify_admin import ShopifyAdminClient
from verticals.volume_discount.models.schemas import ActionResponse, LoaderResponse
from verticals.volume_discount.page import get_admin_client, get_discount_page

router = APIRouter()


@router.get("/{function_id}/{discount_id}", response_model=LoaderResponse)
async def loader(
    discount_id: str,
    page: DiscountPage = Depends(get_discount_page),
    client: ShopifyAdminClient = Depends(get_admin_client),
):
    """Load the discount being edited, or nothing for a new one."""
    try:
        discount = await page.load(client, discount_id)
    except DiscountNotFound:
        raise HTTPException(status_code=404, detail="Discount not found")
    return LoaderResponse(discount=discount)


@router.post("/{function_id}/{discount_id}", response_model=ActionResponse)
async def action(
    function_id: str,
    discount_id: str,
    response: Response,
    discount: str = Form(""),
    id: str = Form(""),
    metafield_id: str = Form("", alias="metafieldId"),
    page: DiscountPage = Depends(get_discount_page),
    client: ShopifyAdminClient = Depends(get_admin_client),
):
    """Create or update the submitted discount.

    Validation and remote user errors come back with 200 and a non-empty
    ``errors`` list; an unknown outcome comes back with 502 and ``failure`` set.
    """
    payload = SubmissionPayload(discount=discount, id=id, metafield_id=metafield_id)
    result = await page.act(client, function_id, payload)
    if result.failure:
        response.status_code = 502
    return result.to_wire()

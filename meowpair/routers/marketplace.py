"""
Marketplace router.

GET  /marketplace/item       — current listing
POST /marketplace/purchase   — unsigned purchase transaction for the wallet
"""
from fastapi import APIRouter, Depends

from meowpair.core.security import get_current_fid
from meowpair.schemas.common import ErrorResponse
from meowpair.schemas.marketplace import MarketplaceItemOut, PurchaseRequest, PurchaseTxOut
from meowpair.services.marketplace import MarketplaceClient, get_marketplace_client

router = APIRouter(
    prefix="/marketplace",
    tags=["marketplace"],
    responses={401: {"model": ErrorResponse, "description": "Missing or invalid bearer credentials"}},
)


@router.get(
    "/item",
    response_model=MarketplaceItemOut,
    summary="Read the listed item",
    responses={503: {"description": "Contract not configured or RPC unreachable"}},
)
def read_item(
    fid: int = Depends(get_current_fid),
    client: MarketplaceClient = Depends(get_marketplace_client),
):
    item = client.get_item()
    return MarketplaceItemOut(
        contract_address=client.address,
        id=item.id,
        name=item.name,
        metadata_uri=item.metadata_uri,
        price_wei=str(item.price_wei),
        seller=item.seller,
        available=item.available,
    )


@router.post(
    "/purchase",
    response_model=PurchaseTxOut,
    summary="Prepare a purchase transaction",
    responses={
        409: {"description": "Item already sold"},
        503: {"description": "Contract not configured or RPC unreachable"},
    },
)
def prepare_purchase(
    payload: PurchaseRequest,
    fid: int = Depends(get_current_fid),
    client: MarketplaceClient = Depends(get_marketplace_client),
):
    """
    Returns `{from, to, data, value, chain_id}` for `purchase()` with
    `value` equal to the listed price. The wallet signs and sends it.
    """
    tx = client.build_purchase_tx(payload.sender)
    return PurchaseTxOut(
        from_=tx["from"],
        to=tx["to"],
        data=tx["data"],
        value=str(tx["value"]),
        chain_id=tx["chainId"],
    )

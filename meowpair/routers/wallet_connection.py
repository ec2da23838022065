"""
Wallet connection router.

POST /wallet-connection   — record a connect + signature event
GET  /wallet-connection   — look up the last connection of an address
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from meowpair.core.security import get_current_fid
from meowpair.db.base import get_db
from meowpair.models.log_entry import LogLevel
from meowpair.models.wallet_connection import WalletConnection
from meowpair.routers._serializers import user_to_out
from meowpair.schemas.common import ErrorResponse
from meowpair.schemas.wallet_connection import (
    WalletConnectionOut,
    WalletConnectionRequest,
    WalletConnectionResponse,
)
from meowpair.services import log_sink
from meowpair.services.identity import resolve_caller
from meowpair.services.wallet import get_wallet_connection, log_wallet_connection

router = APIRouter(
    prefix="/wallet-connection",
    tags=["wallet"],
    responses={401: {"model": ErrorResponse, "description": "Missing or invalid bearer credentials"}},
)


def _connection_to_out(connection: WalletConnection) -> WalletConnectionOut:
    return WalletConnectionOut(
        id=connection.id,
        address=connection.address,
        chain_id=connection.chain_id,
        connector=connection.connector,
        user=user_to_out(connection.user),
        updated_at=connection.updated_at.isoformat() if connection.updated_at else "",
    )


@router.post(
    "",
    response_model=WalletConnectionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log a wallet connection",
)
def post_wallet_connection(
    payload: WalletConnectionRequest,
    fid: int = Depends(get_current_fid),
    db: Session = Depends(get_db),
):
    """Link the wallet to the caller and upsert the connection record."""
    context = {
        "address": payload.address,
        "chain_id": payload.chain_id,
        "connector": payload.connector,
    }
    log_sink.record(db, LogLevel.info, "Wallet connection request received", context, fid)

    with log_sink.guarded(db, "Error logging wallet connection", context, fid):
        user = resolve_caller(db, fid, address=payload.address, field="address")
        connection = log_wallet_connection(
            db,
            address=payload.address,
            chain_id=payload.chain_id,
            connector=payload.connector,
            user_id=user.id,
        )

    log_sink.record(
        db, LogLevel.info, "Wallet connection logged",
        {"connection_id": connection.id, "address": connection.address},
        fid,
    )
    return WalletConnectionResponse(
        connection=_connection_to_out(connection),
        message="Wallet connection logged successfully",
    )


@router.get(
    "",
    response_model=WalletConnectionResponse,
    summary="Fetch the connection record of an address",
    responses={404: {"description": "Address never connected"}},
)
def read_wallet_connection(
    address: str = Query(description="0x-prefixed wallet address."),
    fid: int = Depends(get_current_fid),
    db: Session = Depends(get_db),
):
    connection = get_wallet_connection(db, address)
    return WalletConnectionResponse(connection=_connection_to_out(connection))

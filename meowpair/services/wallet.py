"""
Wallet connection log: one row per address, overwritten on every reconnect.
"""
from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from meowpair.core.errors import NotFoundError, ValidationError
from meowpair.models.wallet_connection import WalletConnection
from meowpair.services.identity import normalize_address


def log_wallet_connection(
    db: Session,
    address: str,
    chain_id: int,
    connector: str,
    user_id: Optional[int] = None,
) -> WalletConnection:
    """Upsert by address: chain, connector and user are replaced."""
    address = normalize_address(address)
    if chain_id <= 0:
        raise ValidationError(f"Invalid chain id: {chain_id}", field="chain_id")

    connection = (
        db.query(WalletConnection).filter(WalletConnection.address == address).first()
    )
    if connection is None:
        connection = WalletConnection(address=address)
        db.add(connection)

    connection.chain_id = chain_id
    connection.connector = connector
    connection.user_id = user_id
    db.commit()
    db.refresh(connection)
    return connection


def get_wallet_connection(db: Session, address: str) -> WalletConnection:
    address = normalize_address(address)
    connection = (
        db.query(WalletConnection).filter(WalletConnection.address == address).first()
    )
    if connection is None:
        raise NotFoundError("WalletConnection", address)
    return connection

"""
CatMarketplace adapter.

The contract lists a single item. This service only reads the listing and
prepares an unsigned `purchase()` call sized to the listed price; the
user's wallet signs and submits it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict

from web3 import Web3
from web3.contract import Contract
from web3.exceptions import ContractLogicError

from meowpair.core.config import settings
from meowpair.core.errors import ItemUnavailableError, MarketplaceUnavailableError, ValidationError

logger = logging.getLogger(__name__)

# Minimal ABI fragment for the CatMarketplace contract.
CAT_MARKETPLACE_ABI: list[Dict[str, Any]] = [
    {
        "inputs": [],
        "name": "purchase",
        "outputs": [],
        "stateMutability": "payable",
        "type": "function",
    },
    {
        "inputs": [{"internalType": "uint256", "name": "newPrice", "type": "uint256"}],
        "name": "relist",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "getItem",
        "outputs": [
            {
                "components": [
                    {"internalType": "uint256", "name": "id", "type": "uint256"},
                    {"internalType": "string", "name": "name", "type": "string"},
                    {"internalType": "string", "name": "metadataURI", "type": "string"},
                    {"internalType": "uint256", "name": "price", "type": "uint256"},
                    {"internalType": "address", "name": "seller", "type": "address"},
                    {"internalType": "bool", "name": "available", "type": "bool"},
                ],
                "internalType": "struct CatMarketplace.Item",
                "name": "",
                "type": "tuple",
            }
        ],
        "stateMutability": "view",
        "type": "function",
    },
]


@dataclass(frozen=True)
class MarketplaceItem:
    id: int
    name: str
    metadata_uri: str
    price_wei: int
    seller: str
    available: bool


class MarketplaceClient:
    """Thin wrapper over the deployed contract."""

    def __init__(self, contract: Contract, chain_id: int) -> None:
        self._contract = contract
        self._chain_id = chain_id

    @property
    def address(self) -> str:
        return self._contract.address

    def get_item(self) -> MarketplaceItem:
        try:
            raw = self._contract.functions.getItem().call()
        except ContractLogicError as exc:
            logger.warning("getItem reverted: %s", exc)
            raise MarketplaceUnavailableError("getItem reverted") from exc
        except (ConnectionError, OSError) as exc:
            logger.error("Marketplace RPC unreachable: %s", exc)
            raise MarketplaceUnavailableError("RPC unreachable") from exc

        item_id, name, metadata_uri, price, seller, available = raw
        return MarketplaceItem(
            id=int(item_id),
            name=str(name),
            metadata_uri=str(metadata_uri),
            price_wei=int(price),
            seller=str(seller),
            available=bool(available),
        )

    def build_purchase_tx(self, sender: str) -> Dict[str, Any]:
        """Unsigned `purchase()` transaction with value = listed price."""
        if not Web3.is_address(sender):
            raise ValidationError(f"Invalid sender address: {sender!r}", field="sender")
        item = self.get_item()
        if not item.available:
            raise ItemUnavailableError(item_id=item.id)
        return {
            "from": Web3.to_checksum_address(sender),
            "to": self.address,
            "data": self._contract.encode_abi("purchase", args=[]),
            "value": item.price_wei,
            "chainId": self._chain_id,
        }


@lru_cache
def get_marketplace_client() -> MarketplaceClient:
    """FastAPI dependency built from MARKETPLACE_* settings."""
    if not settings.MARKETPLACE_ADDRESS:
        raise MarketplaceUnavailableError("MARKETPLACE_ADDRESS is not configured")
    w3 = Web3(Web3.HTTPProvider(settings.MARKETPLACE_RPC_URL))
    contract = w3.eth.contract(
        address=Web3.to_checksum_address(settings.MARKETPLACE_ADDRESS),
        abi=CAT_MARKETPLACE_ABI,
    )
    return MarketplaceClient(contract, settings.MARKETPLACE_CHAIN_ID)

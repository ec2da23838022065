"""
Marketplace schemas. Wei amounts are strings: they overflow JS numbers.
"""
from pydantic import BaseModel, ConfigDict, Field


class MarketplaceItemOut(BaseModel):
    contract_address: str
    id: int
    name: str
    metadata_uri: str
    price_wei: str
    seller: str
    available: bool


class PurchaseRequest(BaseModel):
    sender: str = Field(description="Wallet that will sign and pay.")


class PurchaseTxOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(alias="from")
    to: str
    data: str
    value: str = Field(description="Listed price in wei.")
    chain_id: int

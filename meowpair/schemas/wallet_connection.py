from typing import Annotated, Optional
from pydantic import BaseModel, ConfigDict, Field

from meowpair.schemas.common import UserOut, WalletAddress


class WalletConnectionRequest(BaseModel):
    address: WalletAddress
    chain_id: int = Field(gt=0, examples=[8453, 84532])
    connector: Annotated[str, Field(min_length=1, max_length=64, examples=["farcasterFrame"])]


class WalletConnectionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    address: str
    chain_id: int
    connector: str
    user: Optional[UserOut] = None
    updated_at: str


class WalletConnectionResponse(BaseModel):
    connection: WalletConnectionOut
    message: Optional[str] = None

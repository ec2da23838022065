"""
Cat session schemas.

POST /cat-session        → CreateCatSessionRequest → CatSessionResponse
GET  /cat-session        → CatSessionListResponse
GET  /cat-session/{id}   → CatSessionResponse
"""
from typing import Annotated, Optional
from pydantic import BaseModel, ConfigDict, Field

from meowpair.schemas.common import UserOut, WalletAddress


class CreateCatSessionRequest(BaseModel):
    partner_fid: Optional[int] = Field(
        default=None, gt=0,
        description="Farcaster fid of the partner to invite. Created if unknown.",
        examples=[4242],
    )
    name: Optional[Annotated[str, Field(min_length=1, max_length=128)]] = Field(
        default=None,
        description='Cat name. Defaults to "cattyyy".',
    )
    wallet_address: Optional[WalletAddress] = Field(
        default=None,
        description="Owner's connected wallet, linked to the caller if not yet bound.",
    )


class CatStatsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    love: int = Field(ge=0, le=100)
    hunger: int = Field(ge=0, le=100)
    happiness: int = Field(ge=0, le=100)


class ActivityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    session_id: int
    action: str = Field(description='"feed" | "cuddle" | "love"')
    created_at: str
    user: UserOut


class CatSessionOut(BaseModel):
    id: int
    name: str
    created_at: str
    owner: UserOut
    partner: Optional[UserOut] = None
    stats: Optional[CatStatsOut] = None
    activities: list[ActivityOut] = Field(description="Most recent first.")


class CatSessionResponse(BaseModel):
    session: CatSessionOut


class CatSessionListResponse(BaseModel):
    sessions: list[CatSessionOut]

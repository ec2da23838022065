"""
Activity schemas.

POST /activity  → LogActivityRequest → LogActivityResponse
GET  /activity  → ActivityListResponse
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from meowpair.models.activity import CatAction
from meowpair.schemas.cat_session import ActivityOut, CatStatsOut
from meowpair.schemas.common import WalletAddress


class LogActivityRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    session_id: Optional[int] = Field(
        default=None, gt=0,
        description="Target session. Omit to start a new quick session owned by the caller.",
    )
    action: CatAction = Field(examples=["feed", "cuddle", "love"])
    wallet_address: Optional[WalletAddress] = Field(
        default=None,
        description="Caller's connected wallet, used for identity reconciliation.",
    )


class LogActivityResponse(BaseModel):
    activity: ActivityOut
    stats: CatStatsOut
    session_id: int
    message: str = "Activity logged successfully"


class ActivityListResponse(BaseModel):
    activities: list[ActivityOut]

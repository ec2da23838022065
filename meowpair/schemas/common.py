"""
Shared schema primitives used across the API.
"""
import re
from typing import Annotated, Any, Optional
from pydantic import AfterValidator, BaseModel, ConfigDict

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def _check_address(v: str) -> str:
    v = v.strip()
    if not _ADDRESS_RE.match(v):
        raise ValueError("must be a 0x-prefixed 40-hex-digit wallet address")
    return v.lower()


# Lower-cased on the way in so lookups are case-insensitive.
WalletAddress = Annotated[str, AfterValidator(_check_address)]


class ErrorResponse(BaseModel):
    """Standard error envelope returned for all 4xx/5xx responses."""
    model_config = ConfigDict(from_attributes=True)

    code: str
    message: str
    details: Optional[dict[str, Any]] = None


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    fid: int
    address: Optional[str] = None
    username: str
    pfp_url: Optional[str] = None

from typing import Annotated
from pydantic import BaseModel, Field


class NotificationDetailsIn(BaseModel):
    url: Annotated[str, Field(min_length=1, max_length=1024)]
    token: Annotated[str, Field(min_length=1, max_length=512)]


class NotificationDetailsOut(BaseModel):
    fid: int
    url: str
    token: str

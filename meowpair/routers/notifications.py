"""
Notification details router (per caller).

GET    /notifications   — stored push target, 404 if none
PUT    /notifications   — store / replace it
DELETE /notifications   — forget it
"""
from fastapi import APIRouter, Depends, Response, status

from meowpair.core.errors import NotFoundError
from meowpair.core.security import get_current_fid
from meowpair.schemas.common import ErrorResponse
from meowpair.schemas.notification import NotificationDetailsIn, NotificationDetailsOut
from meowpair.services.notifications import (
    NotificationDetails,
    NotificationStore,
    get_notification_store,
)

router = APIRouter(
    prefix="/notifications",
    tags=["notifications"],
    responses={401: {"model": ErrorResponse, "description": "Missing or invalid bearer credentials"}},
)


@router.get("", response_model=NotificationDetailsOut, summary="Get the caller's notification target")
def read_notification_details(
    fid: int = Depends(get_current_fid),
    store: NotificationStore = Depends(get_notification_store),
):
    details = store.get(fid)
    if details is None:
        raise NotFoundError("NotificationDetails", fid)
    return NotificationDetailsOut(fid=fid, url=details.url, token=details.token)


@router.put("", response_model=NotificationDetailsOut, summary="Store the caller's notification target")
def put_notification_details(
    payload: NotificationDetailsIn,
    fid: int = Depends(get_current_fid),
    store: NotificationStore = Depends(get_notification_store),
):
    store.set(fid, NotificationDetails(url=payload.url, token=payload.token))
    return NotificationDetailsOut(fid=fid, url=payload.url, token=payload.token)


@router.delete(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Forget the caller's notification target",
)
def delete_notification_details(
    fid: int = Depends(get_current_fid),
    store: NotificationStore = Depends(get_notification_store),
):
    store.delete(fid)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""
Court notification requests for the signed-in user: subscribe, look up, cancel.

The notify job emails the user once a sub-court frees up and then deletes the request.
"""
import logging

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from vacantcourt.api.deps import current_user, get_store
from vacantcourt.services.auth import AuthUser
from vacantcourt.services.court_notify_service import (
    cancel_court_notify,
    get_court_notify_request,
    start_court_notify,
)
from vacantcourt.services.store.base import FacilityStore

router = APIRouter()
logger = logging.getLogger(__name__)


class CreateNotificationRequest(BaseModel):
    court_id: str = Field(..., alias="courtId", min_length=1, max_length=64)


@router.post("/notification-requests")
def subscribe(
    body: CreateNotificationRequest,
    user: AuthUser = Depends(current_user),
    store: FacilityStore = Depends(get_store),
) -> dict:
    """
    Ask to be emailed when this facility has an available sub-court.
    Idempotent per (user, facility): an existing request id is returned with created=false.
    """
    return start_court_notify(store, body.court_id, user.uid, user.email or "")


@router.get("/notification-requests")
def lookup(
    court_id: str = Query(..., alias="courtId"),
    user: AuthUser = Depends(current_user),
    store: FacilityStore = Depends(get_store),
) -> dict:
    """The caller's active request for courtId ({"id": null} when not subscribed)."""
    return get_court_notify_request(store, court_id, user.uid)


@router.delete("/notification-requests/{request_id}")
def cancel(
    request_id: str,
    user: AuthUser = Depends(current_user),
    store: FacilityStore = Depends(get_store),
) -> dict:
    return cancel_court_notify(store, request_id, user.uid)

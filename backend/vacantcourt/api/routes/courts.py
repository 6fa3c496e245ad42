"""
Facility reads: listing (with derived configuration and availability counts), detail, owned count.
"""
from fastapi import APIRouter, Depends

from vacantcourt.api.deps import current_user, get_settings, get_store
from vacantcourt.config import Settings
from vacantcourt.services.auth import AuthUser
from vacantcourt.services.facility_service import count_owned_courts, get_court, list_courts
from vacantcourt.services.store.base import FacilityStore

router = APIRouter()


@router.get("/courts")
def list_all_courts(
    store: FacilityStore = Depends(get_store),
    s: Settings = Depends(get_settings),
) -> list[dict]:
    """All facilities with sub-courts, isComplexConfigured, available and total."""
    return list_courts(store, s.notify_availability_predicate)


@router.get("/courts/owned/count")
def owned_courts_count(
    user: AuthUser = Depends(current_user),
    store: FacilityStore = Depends(get_store),
) -> dict:
    """Number of facilities the signed-in user owns."""
    return count_owned_courts(store, user.uid)


@router.get("/courts/{court_id}")
def court_detail(
    court_id: str,
    store: FacilityStore = Depends(get_store),
    s: Settings = Depends(get_settings),
) -> dict:
    return get_court(store, court_id, s.notify_availability_predicate)

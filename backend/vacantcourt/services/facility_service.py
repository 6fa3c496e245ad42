"""Facility reads for the listing and detail pages. Configuration state is derived here, never stored."""
from vacantcourt.core.errors import MSG_COURT_NOT_FOUND, NotFoundError
from vacantcourt.services.court_notify_service import DEFAULT_PREDICATE, available_sub_courts
from vacantcourt.services.store.base import FacilityStore
from vacantcourt.services.store.types import FacilityRecord


def _court_dict(facility: FacilityRecord, predicate: str) -> dict:
    out = facility.to_dict()
    # Same predicate as the notify job, so "N available" on the card matches what triggers emails
    out["available"] = len(available_sub_courts(facility, predicate))
    out["total"] = len(facility.courts)
    return out


def list_courts(store: FacilityStore, predicate: str = DEFAULT_PREDICATE) -> list[dict]:
    return [_court_dict(f, predicate) for f in store.list_facilities()]


def get_court(store: FacilityStore, court_id: str, predicate: str = DEFAULT_PREDICATE) -> dict:
    facility = store.get_facility(court_id)
    if facility is None:
        raise NotFoundError(MSG_COURT_NOT_FOUND)
    return _court_dict(facility, predicate)


def count_owned_courts(store: FacilityStore, owner_id: str) -> dict:
    return {"count": store.count_owned_facilities(owner_id)}

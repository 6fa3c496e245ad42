"""
Facility store: facilities with sub-courts, notification requests and user accounts.
The notify job and routes depend on the FacilityStore protocol; SqlFacilityStore is the
production implementation.
"""
from vacantcourt.services.store.base import FacilityStore
from vacantcourt.services.store.sql_store import SqlFacilityStore
from vacantcourt.services.store.types import (
    FacilityRecord,
    NotificationRequestRecord,
    RequestScan,
    SubCourtRecord,
)

__all__ = [
    "FacilityStore",
    "SqlFacilityStore",
    "FacilityRecord",
    "NotificationRequestRecord",
    "RequestScan",
    "SubCourtRecord",
]

"""Protocol for the facility store. The notify job and routes only see these operations."""
from typing import Protocol

from vacantcourt.services.store.types import FacilityRecord, RequestScan


class FacilityStore(Protocol):
    """Facilities (with sub-courts), notification requests and user accounts."""

    def list_notification_requests(self) -> RequestScan:
        """Full scan of pending requests. Rows failing validation are reported in invalid_ids."""
        ...

    def get_facility(self, court_id: str) -> FacilityRecord | None:
        """None when the facility does not exist."""
        ...

    def delete_notification_request(self, request_id: str) -> bool:
        """Delete one request. Returns False (not an error) when it is already gone."""
        ...

    def list_facilities(self) -> list[FacilityRecord]:
        ...

    def count_owned_facilities(self, owner_id: str) -> int:
        ...

    def update_facility_owner(self, court_id: str, owner_id: str) -> bool:
        """Single-field update of owner_id. False when the facility does not exist."""
        ...

    def find_user_id_by_email(self, email: str) -> str | None:
        ...

    def find_notification_request(self, court_id: str, user_id: str) -> str | None:
        """Id of the user's active request for this facility, if any."""
        ...

    def add_notification_request(
        self, court_id: str, court_name: str, user_id: str, user_email: str
    ) -> str:
        ...

    def remove_notification_request(self, request_id: str, user_id: str) -> bool:
        """Cancel a request owned by user_id. False when absent or owned by someone else."""
        ...

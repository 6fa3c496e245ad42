"""Transfer a facility to another registered user. Caller identity comes from a verified ID token."""
import logging
import re

from vacantcourt.core.errors import (
    MSG_COURT_NOT_FOUND,
    MSG_INVALID_EMAIL,
    MSG_NOT_OWNER,
    MSG_SELF_TRANSFER,
    MSG_TRANSFER_FIELDS_REQUIRED,
    MSG_USER_NOT_FOUND,
    STATUS_BAD_REQUEST,
    STATUS_FORBIDDEN,
    STATUS_NOT_FOUND,
    OwnershipTransferError,
)
from vacantcourt.services.store.base import FacilityStore

logger = logging.getLogger(__name__)

MSG_TRANSFERRED = "Ownership transferred successfully."

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def transfer_ownership(store: FacilityStore, caller_uid: str, court_id: str | None, new_owner_email: str | None) -> dict:
    """
    Set court_id's owner to the user registered under new_owner_email.
    Checks, in order: both fields present, email well-formed, target user exists, court exists,
    caller owns the court, target is not the caller. Raises OwnershipTransferError with the
    status/message for the first failed check.
    """
    court_id = (court_id or "").strip()
    new_owner_email = (new_owner_email or "").strip()
    if not court_id or not new_owner_email:
        raise OwnershipTransferError(MSG_TRANSFER_FIELDS_REQUIRED, STATUS_BAD_REQUEST)
    if not _EMAIL_RE.match(new_owner_email):
        raise OwnershipTransferError(MSG_INVALID_EMAIL, STATUS_BAD_REQUEST)

    new_owner_uid = store.find_user_id_by_email(new_owner_email)
    if not new_owner_uid:
        raise OwnershipTransferError(MSG_USER_NOT_FOUND, STATUS_NOT_FOUND)

    facility = store.get_facility(court_id)
    if facility is None:
        raise OwnershipTransferError(MSG_COURT_NOT_FOUND, STATUS_NOT_FOUND)
    if facility.owner_id != caller_uid:
        logger.warning("Ownership transfer refused: owner is %s, requester is %s", facility.owner_id, caller_uid)
        raise OwnershipTransferError(MSG_NOT_OWNER, STATUS_FORBIDDEN)
    if new_owner_uid == caller_uid:
        raise OwnershipTransferError(MSG_SELF_TRANSFER, STATUS_BAD_REQUEST)

    if not store.update_facility_owner(court_id, new_owner_uid):
        # Deleted between the read and the update
        raise OwnershipTransferError(MSG_COURT_NOT_FOUND, STATUS_NOT_FOUND)
    logger.info("Court %s transferred from %s to %s", court_id, caller_uid, new_owner_uid)
    return {"message": MSG_TRANSFERRED}

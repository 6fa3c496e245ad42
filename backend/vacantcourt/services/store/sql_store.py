"""
SQLAlchemy-backed facility store. One short-lived session per operation so the notify job
can read facilities from several threads at once.
"""
import logging
from contextlib import contextmanager
from typing import Callable, Iterator

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vacantcourt.core.errors import InvalidRecordError, StoreError
from vacantcourt.models.facility import Facility
from vacantcourt.models.notification_request import NotificationRequest
from vacantcourt.models.user_account import UserAccount
from vacantcourt.services.store.types import (
    FacilityRecord,
    NotificationRequestRecord,
    RequestScan,
    SubCourtRecord,
)

logger = logging.getLogger(__name__)


def _facility_record(row: Facility) -> FacilityRecord:
    return FacilityRecord(
        id=row.id,
        name=row.name or "",
        courts=tuple(
            SubCourtRecord.from_mapping({
                "id": c.id,
                "name": c.name,
                "status": c.status,
                "is_configured": c.is_configured,
                "surface": c.surface,
                "last_updated_status": c.last_updated_status,
            })
            for c in row.courts
        ),
        owner_id=row.owner_id,
        type=row.type,
        location=row.location,
        address=row.address,
        latitude=row.latitude,
        longitude=row.longitude,
        description=row.description,
        amenities=tuple(row.amenities or ()),
        images=tuple(row.images or ()),
    )


class SqlFacilityStore:
    """FacilityStore on a SQLAlchemy sessionmaker (PostgreSQL in production, SQLite in tests)."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreError(f"{action} failed: {e}") from e
        finally:
            db.close()

    # --- Notify job ---

    def list_notification_requests(self) -> RequestScan:
        scan = RequestScan()
        with self._session("list notification requests") as db:
            rows = db.query(NotificationRequest).order_by(NotificationRequest.requested_at.asc()).all()
            for row in rows:
                try:
                    scan.requests.append(NotificationRequestRecord.from_mapping({
                        "id": row.id,
                        "court_id": row.court_id,
                        "court_name": row.court_name,
                        "user_id": row.user_id,
                        "user_email": row.user_email,
                        "requested_at": row.requested_at,
                    }))
                except InvalidRecordError as e:
                    logger.warning("Skipping invalid notification request %s: %s", row.id, e)
                    scan.invalid_ids.append(row.id)
        return scan

    def get_facility(self, court_id: str) -> FacilityRecord | None:
        with self._session(f"get facility {court_id}") as db:
            row = db.get(Facility, court_id)
            return _facility_record(row) if row is not None else None

    def delete_notification_request(self, request_id: str) -> bool:
        with self._session(f"delete notification request {request_id}") as db:
            deleted = (
                db.query(NotificationRequest)
                .filter(NotificationRequest.id == request_id)
                .delete(synchronize_session=False)
            )
            db.commit()
        if not deleted:
            logger.debug("Notification request %s already gone", request_id)
        return bool(deleted)

    # --- Facilities ---

    def list_facilities(self) -> list[FacilityRecord]:
        with self._session("list facilities") as db:
            rows = db.query(Facility).order_by(Facility.name.asc()).all()
            return [_facility_record(r) for r in rows]

    def count_owned_facilities(self, owner_id: str) -> int:
        with self._session("count owned facilities") as db:
            return db.query(Facility).filter(Facility.owner_id == owner_id).count()

    def update_facility_owner(self, court_id: str, owner_id: str) -> bool:
        with self._session(f"update owner of {court_id}") as db:
            updated = (
                db.query(Facility)
                .filter(Facility.id == court_id)
                .update({Facility.owner_id: owner_id}, synchronize_session=False)
            )
            db.commit()
        return bool(updated)

    # --- Users ---

    def find_user_id_by_email(self, email: str) -> str | None:
        email = (email or "").strip().lower()
        if not email:
            return None
        with self._session("find user by email") as db:
            row = db.query(UserAccount).filter(func.lower(UserAccount.email) == email).first()
            return row.id if row else None

    # --- Notification requests (user-facing) ---

    def find_notification_request(self, court_id: str, user_id: str) -> str | None:
        with self._session("find notification request") as db:
            row = (
                db.query(NotificationRequest)
                .filter(NotificationRequest.court_id == court_id, NotificationRequest.user_id == user_id)
                .first()
            )
            return row.id if row else None

    def add_notification_request(
        self, court_id: str, court_name: str, user_id: str, user_email: str
    ) -> str:
        with self._session("add notification request") as db:
            row = NotificationRequest(
                court_id=court_id,
                court_name=court_name,
                user_id=user_id,
                user_email=user_email,
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            return row.id

    def remove_notification_request(self, request_id: str, user_id: str) -> bool:
        with self._session(f"remove notification request {request_id}") as db:
            deleted = (
                db.query(NotificationRequest)
                .filter(NotificationRequest.id == request_id, NotificationRequest.user_id == user_id)
                .delete(synchronize_session=False)
            )
            db.commit()
        return bool(deleted)

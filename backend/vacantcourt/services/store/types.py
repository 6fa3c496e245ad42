"""
Typed records returned by the facility store. Same shape regardless of the backing store.

Stored payloads are loosely typed (client-written); from_mapping validates them once at the
read boundary and raises InvalidRecordError for anything the notify job cannot act on.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

from vacantcourt.core.constants import STATUS_AVAILABLE
from vacantcourt.core.errors import InvalidRecordError


def _str(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _key(value: Any) -> str:
    """Ids are matched exactly by the store; blank counts as missing but nothing is trimmed."""
    return value if isinstance(value, str) and value.strip() else ""


@dataclass(frozen=True)
class SubCourtRecord:
    id: str
    name: str
    status: str
    is_configured: bool = False
    surface: str | None = None
    last_updated_status: datetime | None = None

    @property
    def is_available(self) -> bool:
        return self.status == STATUS_AVAILABLE

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SubCourtRecord":
        return cls(
            id=_str(data.get("id")),
            name=_str(data.get("name")),
            status=_str(data.get("status")).lower(),
            is_configured=bool(data.get("is_configured")),
            surface=_str(data.get("surface")) or None,
            last_updated_status=data.get("last_updated_status"),
        )


@dataclass(frozen=True)
class FacilityRecord:
    id: str
    name: str
    courts: tuple[SubCourtRecord, ...] = ()
    owner_id: str | None = None
    type: str | None = None
    location: str | None = None
    address: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    description: str | None = None
    amenities: tuple[str, ...] = ()
    images: tuple[str, ...] = ()

    @property
    def is_complex_configured(self) -> bool:
        """Listing eligibility: at least one sub-court and every sub-court configured."""
        return bool(self.courts) and all(c.is_configured for c in self.courts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "location": self.location,
            "address": self.address,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "description": self.description,
            "amenities": list(self.amenities),
            "images": list(self.images),
            "ownerId": self.owner_id,
            "courts": [
                {
                    "id": c.id,
                    "name": c.name,
                    "surface": c.surface,
                    "status": c.status,
                    "isConfigured": c.is_configured,
                    "lastUpdatedStatus": c.last_updated_status.isoformat() if c.last_updated_status else None,
                }
                for c in self.courts
            ],
            "isComplexConfigured": self.is_complex_configured,
        }


@dataclass(frozen=True)
class NotificationRequestRecord:
    id: str
    court_id: str
    user_email: str
    user_id: str = ""
    court_name: str | None = None
    requested_at: datetime | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "NotificationRequestRecord":
        """Raises InvalidRecordError when id, court_id or user_email is missing."""
        request_id = _key(data.get("id"))
        court_id = _key(data.get("court_id"))
        user_email = _str(data.get("user_email"))
        if not request_id:
            raise InvalidRecordError("notification request has no id")
        missing = [name for name, v in (("court_id", court_id), ("user_email", user_email)) if not v]
        if missing:
            raise InvalidRecordError(f"notification request {request_id} missing {', '.join(missing)}")
        return cls(
            id=request_id,
            court_id=court_id,
            user_email=user_email,
            user_id=_str(data.get("user_id")),
            court_name=_str(data.get("court_name")) or None,
            requested_at=data.get("requested_at"),
        )


@dataclass
class RequestScan:
    """Result of listing all notification requests: valid records plus ids of rows that failed validation."""

    requests: list[NotificationRequestRecord] = field(default_factory=list)
    invalid_ids: list[str] = field(default_factory=list)

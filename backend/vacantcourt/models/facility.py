"""Sports facility listing. Holds an ordered list of sub-courts whose live status is written by court sensors."""
import uuid

from sqlalchemy import JSON, Column, DateTime, Float, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from vacantcourt.db.base import Base

_JSONList = JSON().with_variant(JSONB(), "postgresql")


def _new_id() -> str:
    return uuid.uuid4().hex


class Facility(Base):
    __tablename__ = "facilities"

    id = Column(String(64), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    type = Column(String(64), nullable=True)  # e.g. "Tennis", "Pickleball"
    location = Column(String(255), nullable=True)  # display label, e.g. "Downtown"
    address = Column(String(512), nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    description = Column(Text, nullable=True)
    amenities = Column(_JSONList, nullable=False, default=list)
    images = Column(_JSONList, nullable=False, default=list)  # image URLs
    owner_id = Column(String(128), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    courts = relationship(
        "SubCourt",
        back_populates="facility",
        order_by="SubCourt.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

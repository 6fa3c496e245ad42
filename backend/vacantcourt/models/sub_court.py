"""One playing surface inside a facility. status/last_updated_status are set by hardware, never by this app."""
import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from vacantcourt.core.constants import STATUS_IN_USE
from vacantcourt.db.base import Base


class SubCourt(Base):
    __tablename__ = "sub_courts"

    id = Column(String(64), primary_key=True, default=lambda: uuid.uuid4().hex)
    facility_id = Column(
        String(64), ForeignKey("facilities.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position = Column(Integer, nullable=False, default=0)  # order within the facility
    name = Column(String(255), nullable=False)
    surface = Column(String(64), nullable=True)
    status = Column(String(16), nullable=False, default=STATUS_IN_USE)  # available | in-use | maintenance
    is_configured = Column(Boolean, nullable=False, default=False)
    last_updated_status = Column(DateTime(timezone=True), nullable=True)

    facility = relationship("Facility", back_populates="courts")

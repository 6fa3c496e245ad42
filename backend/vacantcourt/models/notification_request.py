"""User asks to be emailed when a facility has an available sub-court. Deleted once the email is sent.

court_id and user_email are written from client input and validated when the notify job reads them.
No foreign key to facilities: a request may outlive its facility (stale request, cleaned by the job).
"""
import uuid

from sqlalchemy import Column, DateTime, String
from sqlalchemy.sql import func

from vacantcourt.db.base import Base


class NotificationRequest(Base):
    __tablename__ = "notification_requests"

    id = Column(String(64), primary_key=True, default=lambda: uuid.uuid4().hex)
    court_id = Column(String(64), nullable=True, index=True)
    court_name = Column(String(255), nullable=True)  # denormalized facility name
    user_id = Column(String(128), nullable=False, index=True)
    user_email = Column(String(320), nullable=True)
    requested_at = Column(DateTime(timezone=True), server_default=func.now())

"""Auth provider user, mirrored so an email can be resolved to a uid (ownership transfer)."""
from sqlalchemy import Column, DateTime, String
from sqlalchemy.sql import func

from vacantcourt.db.base import Base


class UserAccount(Base):
    __tablename__ = "user_accounts"

    id = Column(String(128), primary_key=True)  # auth provider uid (ID token "sub")
    email = Column(String(320), nullable=False, unique=True, index=True)  # stored lowercased
    display_name = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

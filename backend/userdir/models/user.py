"""
User Model
Stores the identity fields of a directory user.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Index
from userdir.database import Base


class User(Base):
    """
    Directory user, resolvable by id, login, email or mobile.

    login and email are stored lower-cased; the unique indexes are the final
    guard against concurrent registrations of the same key.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    login = Column(String(50), nullable=False)
    email = Column(String(254), nullable=False)
    mobile = Column(String(20), nullable=True)
    first_name = Column(String(50), nullable=True)
    last_name = Column(String(50), nullable=True)
    lang_key = Column(String(10), nullable=True)
    activated = Column(Boolean, default=False, nullable=False)
    activation_key = Column(String(64), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("ix_users_login", "login", unique=True),
        Index("ix_users_email", "email", unique=True),
        Index("ix_users_mobile", "mobile"),
    )

    def __repr__(self):
        return f"<User(id={self.id}, login='{self.login}')>"

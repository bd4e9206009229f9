from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy import Enum
from sqlalchemy.orm import relationship
import enum

from app.DB.base import Base, new_id, utcnow


class UserRole(enum.Enum):
    admin = "admin"
    member = "member"


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)
    first_name = Column(String(120), nullable=True)
    last_name = Column(String(120), nullable=True)
    phone = Column(String(50), nullable=True)
    role = Column(Enum(UserRole, native_enum=False, length=20), nullable=False, default=UserRole.member)
    is_active = Column(Boolean, nullable=False, default=True)
    is_email_verified = Column(Boolean, nullable=False, default=False)
    email_verification_token = Column(String(255), nullable=True)
    reset_password_token = Column(String(255), nullable=True)
    reset_password_expires = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    problems = relationship("Problem", back_populates="owner", cascade="all, delete-orphan", passive_deletes=True)
    submissions = relationship("Submission", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    solved = relationship("ProblemSolved", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    playlists = relationship("Playlist", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email} role={self.role}>"

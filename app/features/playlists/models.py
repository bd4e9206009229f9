from sqlalchemy import Column, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.DB.base import Base, new_id, utcnow


class Playlist(Base):
    __tablename__ = "playlists"
    __table_args__ = (UniqueConstraint("name", "user_id", name="uq_playlists_name_user"),)

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="playlists")
    problems = relationship("ProblemInPlaylist", back_populates="playlist", cascade="all, delete-orphan", passive_deletes=True)


class ProblemInPlaylist(Base):
    __tablename__ = "problems_in_playlist"
    __table_args__ = (UniqueConstraint("playlist_id", "problem_id", name="uq_problems_in_playlist_pair"),)

    id = Column(String(36), primary_key=True, default=new_id)
    playlist_id = Column(String(36), ForeignKey("playlists.id", ondelete="CASCADE"), nullable=False, index=True)
    problem_id = Column(String(36), ForeignKey("problems.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    playlist = relationship("Playlist", back_populates="problems")
    problem = relationship("Problem", back_populates="in_playlists")

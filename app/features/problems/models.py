from sqlalchemy import Column, String, Text, DateTime, ForeignKey, JSON, UniqueConstraint
from sqlalchemy import Enum
from sqlalchemy.orm import relationship
import enum

from app.DB.base import Base, new_id, utcnow


class Difficulty(enum.Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class Problem(Base):
    __tablename__ = "problems"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    difficulty = Column(Enum(Difficulty, native_enum=False, length=10), nullable=False, default=Difficulty.EASY)
    tags = Column(JSON, nullable=False, default=list)
    examples = Column(JSON, nullable=False, default=dict)
    constraints = Column(Text, nullable=True)
    # ordered [{"input": ..., "output": ...}]
    testcases = Column(JSON, nullable=False, default=list)
    code_snippets = Column(JSON, nullable=False, default=dict)
    reference_solutions = Column(JSON, nullable=False, default=dict)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    owner = relationship("User", back_populates="problems")
    solved_by = relationship("ProblemSolved", back_populates="problem", cascade="all, delete-orphan", passive_deletes=True)
    submissions = relationship("Submission", back_populates="problem", cascade="all, delete-orphan", passive_deletes=True)
    in_playlists = relationship("ProblemInPlaylist", back_populates="problem", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self) -> str:
        return f"<Problem id={self.id} title={self.title!r}>"


class ProblemSolved(Base):
    """Marker that a user has at least one fully passing submission for a problem."""
    __tablename__ = "problem_solved"
    __table_args__ = (UniqueConstraint("user_id", "problem_id", name="uq_problem_solved_user_problem"),)

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    problem_id = Column(String(36), ForeignKey("problems.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="solved")
    problem = relationship("Problem", back_populates="solved_by")

from sqlalchemy import Column, String, Text, Integer, DateTime, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.DB.base import Base, new_id, utcnow


class Submission(Base):
    __tablename__ = "submissions"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    problem_id = Column(String(36), ForeignKey("problems.id", ondelete="CASCADE"), nullable=True, index=True)
    source_code = Column(Text, nullable=False)
    language = Column(String(50), nullable=False)
    stdin = Column(Text, nullable=True)
    # JSON encoded arrays aligned by test case index
    stdout = Column(Text, nullable=True)
    stderr = Column(Text, nullable=True)
    compile_output = Column(Text, nullable=True)
    status = Column(String(50), nullable=False)
    memory = Column(Text, nullable=True)
    time = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="submissions")
    problem = relationship("Problem", back_populates="submissions")
    test_cases = relationship(
        "TestCaseResult",
        back_populates="submission",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="TestCaseResult.test_case",
    )

    def __repr__(self):
        return f"<Submission(id={self.id}, status={self.status})>"


class TestCaseResult(Base):
    """Per test case outcome of a submission."""
    __tablename__ = "test_case_results"
    __table_args__ = (UniqueConstraint("submission_id", "test_case", name="uq_test_case_results_ordinal"),)
    __test__ = False  # keep pytest from collecting the model

    id = Column(String(36), primary_key=True, default=new_id)
    submission_id = Column(String(36), ForeignKey("submissions.id", ondelete="CASCADE"), nullable=False, index=True)
    test_case = Column(Integer, nullable=False)
    passed = Column(Boolean, nullable=False)
    stdout = Column(Text, nullable=True)
    expected = Column(Text, nullable=False)
    stderr = Column(Text, nullable=True)
    compile_output = Column(Text, nullable=True)
    status = Column(String(50), nullable=False)
    memory = Column(String(50), nullable=True)
    time = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    submission = relationship("Submission", back_populates="test_cases")

    def __repr__(self):
        return f"<TestCaseResult(id={self.id}, test_case={self.test_case}, passed={self.passed})>"

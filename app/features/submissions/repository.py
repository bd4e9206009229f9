from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from app.DB.upsert import insert_ignore_conflicts
from app.features.problems.models import ProblemSolved
from .models import Submission, TestCaseResult


class SubmissionsRepository:
    def create_with_results(
        self,
        db: Session,
        fields: Dict[str, Any],
        results: List[Dict[str, Any]],
        *,
        mark_solved: bool = False,
    ) -> Submission:
        """Persist a submission, its per case rows and the solved marker in one transaction."""
        try:
            submission = Submission(**fields)
            submission.test_cases = [TestCaseResult(**row) for row in results]
            db.add(submission)
            db.flush()
            if mark_solved and submission.problem_id:
                insert_ignore_conflicts(
                    db,
                    ProblemSolved,
                    [{"user_id": submission.user_id, "problem_id": submission.problem_id}],
                )
            db.commit()
        except Exception:
            db.rollback()
            raise
        return self.get_with_results(db, submission.id)  # type: ignore[return-value]

    def get_with_results(self, db: Session, submission_id: str) -> Optional[Submission]:
        stmt = (
            select(Submission)
            .options(selectinload(Submission.test_cases))
            .where(Submission.id == submission_id)
            .execution_options(populate_existing=True)
        )
        return db.scalar(stmt)

    def list_for_user(self, db: Session, user_id: str) -> List[Submission]:
        stmt = select(Submission).where(Submission.user_id == user_id).order_by(Submission.created_at.desc())
        return list(db.scalars(stmt))

    def list_for_user_problem(self, db: Session, user_id: str, problem_id: str) -> List[Submission]:
        stmt = (
            select(Submission)
            .where(Submission.user_id == user_id, Submission.problem_id == problem_id)
            .order_by(Submission.created_at.desc())
        )
        return list(db.scalars(stmt))

    def count_for_problem(self, db: Session, problem_id: str) -> int:
        stmt = select(func.count()).select_from(Submission).where(Submission.problem_id == problem_id)
        return int(db.scalar(stmt) or 0)


submissions_repository = SubmissionsRepository()

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from .models import Problem, ProblemSolved


class ProblemRepository:
    def create(self, db: Session, **fields: Any) -> Problem:
        problem = Problem(**fields)
        db.add(problem)
        db.commit()
        db.refresh(problem)
        return problem

    def get_by_id(self, db: Session, problem_id: str) -> Optional[Problem]:
        return db.get(Problem, problem_id)

    def list_all(self, db: Session) -> List[Problem]:
        return list(db.scalars(select(Problem).order_by(Problem.created_at)))

    def list_solved_by(self, db: Session, user_id: str) -> List[Problem]:
        stmt = (
            select(Problem)
            .join(ProblemSolved, ProblemSolved.problem_id == Problem.id)
            .where(ProblemSolved.user_id == user_id)
            .order_by(Problem.created_at)
        )
        return list(db.scalars(stmt))

    def solved_markers(self, db: Session, user_id: str) -> List[ProblemSolved]:
        return list(db.scalars(select(ProblemSolved).where(ProblemSolved.user_id == user_id)))

    def existing_ids(self, db: Session, problem_ids: Sequence[str]) -> set[str]:
        if not problem_ids:
            return set()
        return set(db.scalars(select(Problem.id).where(Problem.id.in_(list(problem_ids)))))

    def update(self, db: Session, problem: Problem, fields: Dict[str, Any]) -> Problem:
        for field, value in fields.items():
            setattr(problem, field, value)
        db.commit()
        db.refresh(problem)
        return problem

    def delete(self, db: Session, problem: Problem) -> None:
        db.delete(problem)
        db.commit()


problem_repository = ProblemRepository()

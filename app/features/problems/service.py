"""Problem catalog: CRUD plus reference solution verification against the judge."""

from __future__ import annotations

import logging
from typing import Dict, List

from fastapi import HTTPException, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from app.common.deps import CurrentUser
from app.features.judge0.languages import get_judge0_language_id
from app.features.judge0.schemas import CodeSubmissionCreate
from app.features.judge0.service import ACCEPTED_STATUS_ID, JudgeGateway
from app.features.profiles.models import UserRole
from .models import Problem
from .repository import problem_repository
from .schemas import ProblemCreate, ProblemUpdate, ProblemOut, ProblemWithSolved, ProblemSolvedOut, TestCase

logger = logging.getLogger("problems")


async def verify_reference_solutions(
    judge: JudgeGateway,
    reference_solutions: Dict[str, str],
    testcases: List[TestCase],
) -> None:
    """Every reference solution must be accepted on every testcase."""
    for language, solution_code in reference_solutions.items():
        language_id = get_judge0_language_id(language)
        if not language_id:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, f"Language {language} is not supported")
        if not testcases:
            continue

        submissions = [
            CodeSubmissionCreate(
                source_code=solution_code,
                language_id=language_id,
                stdin=case.input,
                expected_output=case.output,
            )
            for case in testcases
        ]
        tokens = [t for t in await judge.submit_batch(submissions) if t]
        results = await judge.poll_batch_results(tokens)

        for i, result in enumerate(results):
            if result.status_id != ACCEPTED_STATUS_ID:
                logger.info("problems.reference_failed language=%s testcase=%d", language, i + 1)
                raise HTTPException(
                    status.HTTP_400_BAD_REQUEST, f"Testcase {i + 1} failed for language {language}"
                )


async def create_problem(db: Session, judge: JudgeGateway, user: CurrentUser, payload: ProblemCreate) -> Problem:
    if payload.reference_solutions:
        await verify_reference_solutions(judge, payload.reference_solutions, payload.testcases)

    fields = payload.model_dump()
    problem = await run_in_threadpool(problem_repository.create, db, user_id=user.id, **fields)
    logger.info("problems.created problem_id=%s user_id=%s", problem.id, user.id)
    return problem


def require_problem(db: Session, problem_id: str) -> Problem:
    problem = problem_repository.get_by_id(db, problem_id)
    if not problem:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Problem not found")
    return problem


def _ensure_can_modify(problem: Problem, user: CurrentUser, action: str) -> None:
    if problem.user_id != user.id and user.role != UserRole.admin:
        raise HTTPException(status.HTTP_403_FORBIDDEN, f"Not allowed to {action} this problem")


def list_problems(db: Session, user: CurrentUser) -> List[ProblemWithSolved]:
    """All problems; ``solvedBy`` only ever lists the caller's own marker."""
    markers = {m.problem_id: m for m in problem_repository.solved_markers(db, user.id)}
    out: List[ProblemWithSolved] = []
    for problem in problem_repository.list_all(db):
        marker = markers.get(problem.id)
        out.append(
            ProblemWithSolved(
                **ProblemOut.model_validate(problem).model_dump(),
                solved_by=[ProblemSolvedOut.model_validate(marker)] if marker else [],
            )
        )
    return out


def list_solved_problems(db: Session, user: CurrentUser) -> List[ProblemWithSolved]:
    markers = {m.problem_id: m for m in problem_repository.solved_markers(db, user.id)}
    return [
        ProblemWithSolved(
            **ProblemOut.model_validate(problem).model_dump(),
            solved_by=[ProblemSolvedOut.model_validate(markers[problem.id])],
        )
        for problem in problem_repository.list_solved_by(db, user.id)
    ]


def get_problem(db: Session, problem_id: str) -> Problem:
    return require_problem(db, problem_id)


def update_problem(db: Session, user: CurrentUser, problem_id: str, payload: ProblemUpdate) -> Problem:
    problem = require_problem(db, problem_id)
    _ensure_can_modify(problem, user, "update")
    fields = payload.model_dump(exclude_unset=True)
    # non-nullable columns keep their value when null is sent
    fields = {k: v for k, v in fields.items() if v is not None or k == "constraints"}
    return problem_repository.update(db, problem, fields)


def delete_problem(db: Session, user: CurrentUser, problem_id: str) -> None:
    problem = require_problem(db, problem_id)
    _ensure_can_modify(problem, user, "delete")
    problem_repository.delete(db, problem)
    logger.info("problems.deleted problem_id=%s user_id=%s", problem_id, user.id)

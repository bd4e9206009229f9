from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.DB.session import get_db
from app.common.deps import CurrentUser, get_current_user, get_judge_gateway
from app.common.utils import envelope
from . import service
from .schemas import ExecuteCodeRequest, SubmissionOut, SubmissionWithResults

execute_router = APIRouter(prefix="/execute-code", tags=["execution"])
router = APIRouter(prefix="/submissions", tags=["submissions"])


@execute_router.post("")
async def execute_code(
    payload: ExecuteCodeRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    judge=Depends(get_judge_gateway),
):
    """Execute code against multiple testcases and record the outcome."""
    submission = await service.execute_code(db, judge, current_user.id, payload)
    return envelope("Code Executed! Successfully!", submission=SubmissionWithResults.model_validate(submission))


@router.get("")
def get_all_submissions(current_user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    submissions = service.list_user_submissions(db, current_user.id)
    return envelope(
        "Submissions fetched successfully",
        submissions=[SubmissionOut.model_validate(s) for s in submissions],
    )


@router.get("/problem/{problem_id}")
def get_submissions_for_problem(
    problem_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    submissions = service.list_user_problem_submissions(db, current_user.id, problem_id)
    return envelope(
        "Submissions fetched successfully",
        submissions=[SubmissionOut.model_validate(s) for s in submissions],
    )


@router.get("/problem/{problem_id}/count")
def get_submission_count(
    problem_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    count = service.count_problem_submissions(db, problem_id)
    return envelope("Submissions count fetched successfully", count=count)

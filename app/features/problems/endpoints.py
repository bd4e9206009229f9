from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.DB.session import get_db
from app.common.deps import CurrentUser, get_current_user, get_judge_gateway, require_admin
from app.common.utils import envelope
from . import service
from .schemas import ProblemCreate, ProblemUpdate, ProblemOut

router = APIRouter(prefix="/problems", tags=["problems"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_problem(
    payload: ProblemCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    judge=Depends(get_judge_gateway),
):
    problem = await service.create_problem(db, judge, current_user, payload)
    return envelope("Problem Created Successfully", problem=ProblemOut.model_validate(problem))


@router.get("")
def get_all_problems(current_user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return envelope("Problems fetched successfully", problems=service.list_problems(db, current_user))


@router.get("/solved")
def get_solved_problems(current_user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return envelope("Problems fetched successfully", problems=service.list_solved_problems(db, current_user))


# Admin only variants

@router.post("/admin", status_code=status.HTTP_201_CREATED)
async def admin_create_problem(
    payload: ProblemCreate,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
    judge=Depends(get_judge_gateway),
):
    problem = await service.create_problem(db, judge, admin, payload)
    return envelope("Problem Created Successfully", problem=ProblemOut.model_validate(problem))


@router.put("/admin/{problem_id}")
def admin_update_problem(
    problem_id: str,
    payload: ProblemUpdate,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    problem = service.update_problem(db, admin, problem_id, payload)
    return envelope("Problem updated", problem=ProblemOut.model_validate(problem))


@router.delete("/admin/{problem_id}")
def admin_delete_problem(
    problem_id: str,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    service.delete_problem(db, admin, problem_id)
    return envelope("Problem deleted Successfully")


@router.get("/{problem_id}")
def get_problem(problem_id: str, current_user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    problem = service.get_problem(db, problem_id)
    return envelope("Problem fetched", problem=ProblemOut.model_validate(problem))


@router.put("/{problem_id}")
def update_problem(
    problem_id: str,
    payload: ProblemUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    problem = service.update_problem(db, current_user, problem_id, payload)
    return envelope("Problem updated", problem=ProblemOut.model_validate(problem))


@router.delete("/{problem_id}")
def delete_problem(
    problem_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    service.delete_problem(db, current_user, problem_id)
    return envelope("Problem deleted Successfully")

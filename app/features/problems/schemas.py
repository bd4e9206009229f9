from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from app.common.schemas import CamelModel
from .models import Difficulty


class TestCase(BaseModel):
    input: str
    output: str


class ProblemCreate(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    difficulty: Difficulty = Difficulty.EASY
    tags: List[str] = []
    examples: Any = {}
    constraints: Optional[str] = None
    testcases: List[TestCase] = []
    code_snippets: Dict[str, str] = {}
    reference_solutions: Dict[str, str] = {}


class ProblemUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, min_length=1)
    difficulty: Optional[Difficulty] = None
    tags: Optional[List[str]] = None
    examples: Optional[Any] = None
    constraints: Optional[str] = None
    testcases: Optional[List[TestCase]] = None
    code_snippets: Optional[Dict[str, str]] = None
    reference_solutions: Optional[Dict[str, str]] = None


class ProblemSolvedOut(CamelModel):
    id: str
    user_id: str
    problem_id: str
    created_at: datetime
    updated_at: datetime


class ProblemOut(CamelModel):
    id: str
    title: str
    description: str
    difficulty: Difficulty
    tags: List[str] = []
    examples: Any = None
    constraints: Optional[str] = None
    testcases: List[TestCase] = []
    code_snippets: Dict[str, str] = {}
    reference_solutions: Dict[str, str] = {}
    user_id: str
    created_at: datetime
    updated_at: datetime


class ProblemWithSolved(ProblemOut):
    solved_by: List[ProblemSolvedOut] = []

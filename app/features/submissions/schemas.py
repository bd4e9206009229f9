from __future__ import annotations
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.common.schemas import CamelModel


class ExecuteCodeRequest(BaseModel):
    """Run one source file against index aligned inputs / expected outputs."""
    model_config = ConfigDict(populate_by_name=True)

    source_code: str
    language_id: int
    stdin: Optional[List[str]] = None
    expected_outputs: Optional[List[str]] = None
    problem_id: Optional[str] = Field(default=None, alias="problemId")


class TestCaseResultOut(CamelModel):
    id: str
    submission_id: str
    test_case: int
    passed: bool
    stdout: Optional[str] = None
    expected: str
    stderr: Optional[str] = None
    compile_output: Optional[str] = None
    status: str
    memory: Optional[str] = None
    time: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class SubmissionOut(CamelModel):
    id: str
    user_id: str
    problem_id: Optional[str] = None
    source_code: str
    language: str
    stdin: Optional[str] = None
    stdout: Optional[str] = None
    stderr: Optional[str] = None
    compile_output: Optional[str] = None
    status: str
    memory: Optional[str] = None
    time: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class SubmissionWithResults(SubmissionOut):
    test_cases: List[TestCaseResultOut] = []

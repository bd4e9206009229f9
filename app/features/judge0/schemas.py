from pydantic import BaseModel
from typing import Optional, Union


class CodeSubmissionCreate(BaseModel):
    source_code: str
    language_id: int
    stdin: Optional[str] = None
    expected_output: Optional[str] = None


class Judge0ExecutionResult(BaseModel):
    token: Optional[str] = None
    stdout: Optional[str] = None
    stderr: Optional[str] = None
    compile_output: Optional[str] = None
    message: Optional[str] = None
    time: Optional[Union[str, float]] = None
    memory: Optional[int] = None
    status: dict
    language: Optional[dict] = None

    @property
    def status_id(self) -> Optional[int]:
        return self.status.get("id")

    @property
    def status_description(self) -> str:
        return self.status.get("description") or ""

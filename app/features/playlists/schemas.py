from __future__ import annotations
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from app.common.schemas import CamelModel
from app.features.problems.schemas import ProblemOut


class PlaylistCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None


class ProblemIdsRequest(CamelModel):
    problem_ids: Optional[List[str]] = None


class PlaylistOut(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    user_id: str
    created_at: datetime
    updated_at: datetime


class ProblemInPlaylistOut(CamelModel):
    id: str
    playlist_id: str
    problem_id: str
    created_at: datetime
    updated_at: datetime
    problem: ProblemOut


class PlaylistDetail(PlaylistOut):
    problems: List[ProblemInPlaylistOut] = []


class MembershipCount(CamelModel):
    count: int

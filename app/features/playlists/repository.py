from __future__ import annotations

from typing import List, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, selectinload

from app.DB.upsert import insert_ignore_conflicts
from .models import Playlist, ProblemInPlaylist


class PlaylistRepository:
    def create(self, db: Session, **fields) -> Playlist:
        playlist = Playlist(**fields)
        db.add(playlist)
        db.commit()
        db.refresh(playlist)
        return playlist

    def get_by_id(self, db: Session, playlist_id: str) -> Optional[Playlist]:
        return db.get(Playlist, playlist_id)

    def get_with_problems(self, db: Session, playlist_id: str) -> Optional[Playlist]:
        stmt = (
            select(Playlist)
            .options(selectinload(Playlist.problems).selectinload(ProblemInPlaylist.problem))
            .where(Playlist.id == playlist_id)
            .execution_options(populate_existing=True)
        )
        return db.scalar(stmt)

    def get_by_name(self, db: Session, user_id: str, name: str) -> Optional[Playlist]:
        return db.scalar(select(Playlist).where(Playlist.user_id == user_id, Playlist.name == name))

    def list_for_user(self, db: Session, user_id: str) -> List[Playlist]:
        stmt = (
            select(Playlist)
            .options(selectinload(Playlist.problems).selectinload(ProblemInPlaylist.problem))
            .where(Playlist.user_id == user_id)
            .order_by(Playlist.created_at)
        )
        return list(db.scalars(stmt))

    def add_problems(self, db: Session, playlist_id: str, problem_ids: Sequence[str]) -> int:
        rows = [{"playlist_id": playlist_id, "problem_id": pid} for pid in dict.fromkeys(problem_ids)]
        try:
            inserted = insert_ignore_conflicts(db, ProblemInPlaylist, rows)
            db.commit()
        except Exception:
            db.rollback()
            raise
        return inserted

    def remove_problems(self, db: Session, playlist_id: str, problem_ids: Sequence[str]) -> int:
        stmt = delete(ProblemInPlaylist).where(
            ProblemInPlaylist.playlist_id == playlist_id,
            ProblemInPlaylist.problem_id.in_(list(problem_ids)),
        )
        result = db.execute(stmt)
        db.commit()
        return result.rowcount or 0

    def delete(self, db: Session, playlist: Playlist) -> None:
        db.delete(playlist)
        db.commit()


playlist_repository = PlaylistRepository()

import logging
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.features.problems.repository import problem_repository
from .models import Playlist
from .repository import playlist_repository
from .schemas import PlaylistCreate

logger = logging.getLogger("playlists")


def _require_owned(db: Session, user_id: str, playlist_id: str) -> Playlist:
    playlist = playlist_repository.get_by_id(db, playlist_id)
    if not playlist:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Playlist not found")
    if playlist.user_id != user_id:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Not allowed")
    return playlist


def _require_ids(problem_ids: Optional[List[str]]) -> List[str]:
    if not problem_ids:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Invalid or missing problemIds")
    return problem_ids


def create_playlist(db: Session, user_id: str, payload: PlaylistCreate) -> Playlist:
    if playlist_repository.get_by_name(db, user_id, payload.name):
        raise HTTPException(status.HTTP_409_CONFLICT, "Playlist with this name already exists")
    try:
        playlist = playlist_repository.create(
            db, name=payload.name, description=payload.description, user_id=user_id
        )
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status.HTTP_409_CONFLICT, "Playlist with this name already exists") from exc
    logger.info("playlists.created playlist_id=%s user_id=%s", playlist.id, user_id)
    return playlist


def list_playlists(db: Session, user_id: str) -> List[Playlist]:
    return playlist_repository.list_for_user(db, user_id)


def get_playlist(db: Session, user_id: str, playlist_id: str) -> Playlist:
    _require_owned(db, user_id, playlist_id)
    return playlist_repository.get_with_problems(db, playlist_id)  # type: ignore[return-value]


def add_problems(db: Session, user_id: str, playlist_id: str, problem_ids: Optional[List[str]]) -> int:
    ids = _require_ids(problem_ids)
    _require_owned(db, user_id, playlist_id)
    missing = set(ids) - problem_repository.existing_ids(db, ids)
    if missing:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Problem not found")
    return playlist_repository.add_problems(db, playlist_id, ids)


def remove_problems(db: Session, user_id: str, playlist_id: str, problem_ids: Optional[List[str]]) -> int:
    ids = _require_ids(problem_ids)
    _require_owned(db, user_id, playlist_id)
    return playlist_repository.remove_problems(db, playlist_id, ids)


def delete_playlist(db: Session, user_id: str, playlist_id: str) -> Playlist:
    playlist = _require_owned(db, user_id, playlist_id)
    playlist_repository.delete(db, playlist)
    logger.info("playlists.deleted playlist_id=%s user_id=%s", playlist_id, user_id)
    return playlist

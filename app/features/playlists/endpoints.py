from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from app.DB.session import get_db
from app.common.deps import CurrentUser, get_current_user
from app.common.utils import envelope
from . import service
from .schemas import PlaylistCreate, PlaylistDetail, PlaylistOut, ProblemIdsRequest, MembershipCount

router = APIRouter(prefix="/playlist", tags=["playlists"])


@router.get("")
def get_all_playlists(current_user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    playlists = service.list_playlists(db, current_user.id)
    return envelope(
        "Playlists fetched successfully",
        playLists=[PlaylistDetail.model_validate(p) for p in playlists],
    )


@router.post("/create-playlist", status_code=status.HTTP_201_CREATED)
def create_playlist(
    payload: PlaylistCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    playlist = service.create_playlist(db, current_user.id, payload)
    return envelope("Playlist created successfully", playList=PlaylistOut.model_validate(playlist))


@router.get("/{playlist_id}")
def get_playlist(
    playlist_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    playlist = service.get_playlist(db, current_user.id, playlist_id)
    return envelope("Playlist fetched successfully", playList=PlaylistDetail.model_validate(playlist))


@router.post("/{playlist_id}/add-problem")
def add_problem_to_playlist(
    playlist_id: str,
    payload: ProblemIdsRequest = Body(...),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    count = service.add_problems(db, current_user.id, playlist_id, payload.problem_ids)
    return envelope("Problems added to playlist successfully", problemsInPlaylist=MembershipCount(count=count))


@router.delete("/{playlist_id}/remove-problem")
def remove_problem_from_playlist(
    playlist_id: str,
    payload: ProblemIdsRequest = Body(...),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    count = service.remove_problems(db, current_user.id, playlist_id, payload.problem_ids)
    return envelope("Problem removed from playlist successfully", deletedProblem=MembershipCount(count=count))


@router.delete("/{playlist_id}")
def delete_playlist(
    playlist_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    playlist = service.delete_playlist(db, current_user.id, playlist_id)
    return envelope("Playlist deleted successfully", deletedPlaylist=PlaylistOut.model_validate(playlist))

# Import all models here so Alembic and create_all can discover them
from app.DB.base import Base

# User first (referenced by other models)
from app.features.profiles.models import User, UserRole
from app.features.problems.models import Problem, ProblemSolved, Difficulty
from app.features.submissions.models import Submission, TestCaseResult
from app.features.playlists.models import Playlist, ProblemInPlaylist

# This ensures all models are registered with SQLAlchemy
__all__ = [
	"Base",
	"User",
	"UserRole",
	"Problem",
	"ProblemSolved",
	"Difficulty",
	"Submission",
	"TestCaseResult",
	"Playlist",
	"ProblemInPlaylist",
]

"""initial schema: users, problems, submissions, playlists

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("first_name", sa.String(length=120), nullable=True),
        sa.Column("last_name", sa.String(length=120), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="member"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_email_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("email_verification_token", sa.String(length=255), nullable=True),
        sa.Column("reset_password_token", sa.String(length=255), nullable=True),
        sa.Column("reset_password_expires", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "problems",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("difficulty", sa.String(length=10), nullable=False, server_default="EASY"),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("examples", sa.JSON(), nullable=False),
        sa.Column("constraints", sa.Text(), nullable=True),
        sa.Column("testcases", sa.JSON(), nullable=False),
        sa.Column("code_snippets", sa.JSON(), nullable=False),
        sa.Column("reference_solutions", sa.JSON(), nullable=False),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_problems_user_id", "problems", ["user_id"])

    op.create_table(
        "problem_solved",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("problem_id", sa.String(length=36), sa.ForeignKey("problems.id", ondelete="CASCADE"), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "problem_id", name="uq_problem_solved_user_problem"),
    )
    op.create_index("ix_problem_solved_user_id", "problem_solved", ["user_id"])
    op.create_index("ix_problem_solved_problem_id", "problem_solved", ["problem_id"])

    op.create_table(
        "submissions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("problem_id", sa.String(length=36), sa.ForeignKey("problems.id", ondelete="CASCADE"), nullable=True),
        sa.Column("source_code", sa.Text(), nullable=False),
        sa.Column("language", sa.String(length=50), nullable=False),
        sa.Column("stdin", sa.Text(), nullable=True),
        sa.Column("stdout", sa.Text(), nullable=True),
        sa.Column("stderr", sa.Text(), nullable=True),
        sa.Column("compile_output", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=50), nullable=False),
        sa.Column("memory", sa.Text(), nullable=True),
        sa.Column("time", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_submissions_user_id", "submissions", ["user_id"])
    op.create_index("ix_submissions_problem_id", "submissions", ["problem_id"])

    op.create_table(
        "test_case_results",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "submission_id", sa.String(length=36), sa.ForeignKey("submissions.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("test_case", sa.Integer(), nullable=False),
        sa.Column("passed", sa.Boolean(), nullable=False),
        sa.Column("stdout", sa.Text(), nullable=True),
        sa.Column("expected", sa.Text(), nullable=False),
        sa.Column("stderr", sa.Text(), nullable=True),
        sa.Column("compile_output", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=50), nullable=False),
        sa.Column("memory", sa.String(length=50), nullable=True),
        sa.Column("time", sa.String(length=50), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("submission_id", "test_case", name="uq_test_case_results_ordinal"),
    )
    op.create_index("ix_test_case_results_submission_id", "test_case_results", ["submission_id"])

    op.create_table(
        "playlists",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("name", "user_id", name="uq_playlists_name_user"),
    )
    op.create_index("ix_playlists_user_id", "playlists", ["user_id"])

    op.create_table(
        "problems_in_playlist",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("playlist_id", sa.String(length=36), sa.ForeignKey("playlists.id", ondelete="CASCADE"), nullable=False),
        sa.Column("problem_id", sa.String(length=36), sa.ForeignKey("problems.id", ondelete="CASCADE"), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("playlist_id", "problem_id", name="uq_problems_in_playlist_pair"),
    )
    op.create_index("ix_problems_in_playlist_playlist_id", "problems_in_playlist", ["playlist_id"])
    op.create_index("ix_problems_in_playlist_problem_id", "problems_in_playlist", ["problem_id"])


def downgrade() -> None:
    op.drop_table("problems_in_playlist")
    op.drop_table("playlists")
    op.drop_table("test_case_results")
    op.drop_table("submissions")
    op.drop_table("problem_solved")
    op.drop_table("problems")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

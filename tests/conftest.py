import sys
import os
import tempfile

# Ensure repo root on sys.path for imports like `app...`
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

# Settings are read once per process; pin a throwaway environment before `app` is imported.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("USE_REAL_JUDGE0", "false")
os.environ.setdefault("UPLOAD_DEST", tempfile.mkdtemp(prefix="codejudge-uploads-"))
os.environ.setdefault("MAIL_HOST", "")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select

from app.Core.config import Settings
from app.features.judge0.schemas import Judge0ExecutionResult
from app.features.profiles.models import User, UserRole
from app.main import create_app

DEFAULT_PASSWORD = "Passw0rd!"


class RecordingMailService:
    """Captures outgoing mail instead of talking SMTP."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: list[dict] = []

    def send_forgot_password_email(self, email, reset_token, reset_link):
        self.sent.append({"kind": "forgot", "to": email, "token": reset_token, "link": reset_link})
        if self.fail:
            raise RuntimeError("smtp down")

    def send_password_reset_confirmation(self, email):
        self.sent.append({"kind": "reset-confirmation", "to": email})
        if self.fail:
            raise RuntimeError("smtp down")


class FakeJudge:
    """Scriptable judge gateway; every case is Accepted with no stdout unless told otherwise."""

    def __init__(self):
        self.batches: list[list] = []
        self.stdout: list[str] | None = None
        self.statuses: list[dict] | None = None
        self.memory: int | None = None
        self.time: str | None = None

    async def submit_batch(self, submissions):
        self.batches.append(list(submissions))
        return [f"fake-{len(self.batches)}-{i}" for i in range(len(submissions))]

    async def poll_batch_results(self, tokens):
        results = []
        for i, token in enumerate(tokens):
            status = self.statuses[i] if self.statuses else {"id": 3, "description": "Accepted"}
            results.append(
                Judge0ExecutionResult(
                    token=token,
                    stdout=self.stdout[i] if self.stdout else None,
                    status=status,
                    memory=self.memory,
                    time=self.time,
                )
            )
        return results


@pytest.fixture
def settings(tmp_path):
    s = Settings()
    s.database_url = "sqlite://"
    s.db_auto_create = True
    s.upload_dest = str(tmp_path / "uploads")
    s.cookie_secure = False
    return s


@pytest.fixture
def app(settings):
    application = create_app(settings)
    application.state.mail_service = RecordingMailService()
    application.state.judge_gateway = FakeJudge()
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def mailer(app) -> RecordingMailService:
    return app.state.mail_service


@pytest.fixture
def judge(app) -> FakeJudge:
    return app.state.judge_gateway


def register(client, email, password=DEFAULT_PASSWORD, **extra):
    body = {"email": email, "password": password, **extra}
    return client.post("/api/v1/auth/register", json=body)


@pytest.fixture
def make_user(client, app):
    """Register a user and return (user_json, bearer headers); the session cookie is dropped."""

    def _make(email, role: UserRole = UserRole.member, password=DEFAULT_PASSWORD):
        resp = register(client, email, password)
        assert resp.status_code == 201, resp.text
        client.cookies.clear()
        data = resp.json()
        if role != UserRole.member:
            with app.state.session_factory() as session:
                user = session.get(User, data["user"]["id"])
                user.role = role
                session.commit()
        return data["user"], {"Authorization": f"Bearer {data['token']}"}

    return _make


def count_rows(session, model, *criteria) -> int:
    stmt = select(func.count()).select_from(model)
    if criteria:
        stmt = stmt.where(*criteria)
    return int(session.scalar(stmt) or 0)

import asyncio
import json

import httpx
import pytest

from app.Core.config import Settings
from app.features.judge0.languages import get_judge0_language_id, get_language_name
from app.features.judge0.schemas import CodeSubmissionCreate
from app.features.judge0.service import (
    Judge0Service,
    JudgeGatewayError,
    SimulatedJudge0Service,
    build_judge_gateway,
)


class _FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code
        self.text = json.dumps(payload)

    @property
    def is_success(self):
        return 200 <= self.status_code < 300

    def json(self):
        return self._payload


def _settings(**overrides) -> Settings:
    s = Settings()
    s.use_real_judge0 = True
    s.judge0_api_url = "http://judge.test"
    s.judge0_poll_interval_s = 0
    for key, value in overrides.items():
        setattr(s, key, value)
    return s


def test_submit_batch_posts_all_cases(monkeypatch):
    service = Judge0Service(_settings())
    captured: dict[str, object] = {}

    async def fake_request(method, path, **kwargs):
        captured["method"] = method
        captured["path"] = path
        captured["json"] = kwargs.get("json")
        return _FakeResponse([{"token": "a"}, {"token": "b"}], status_code=201)

    monkeypatch.setattr(service, "_request", fake_request)

    subs = [
        CodeSubmissionCreate(source_code="print(input())", language_id=71, stdin="1"),
        CodeSubmissionCreate(source_code="print(input())", language_id=71, stdin="2", expected_output="2"),
    ]
    tokens = asyncio.run(service.submit_batch(subs))

    assert tokens == ["a", "b"]
    assert captured["method"] == "POST"
    assert captured["path"] == "/submissions/batch?base64_encoded=false"
    payload = captured["json"]
    assert [s["stdin"] for s in payload["submissions"]] == ["1", "2"]
    assert "expected_output" not in payload["submissions"][0]
    assert payload["submissions"][1]["expected_output"] == "2"


def test_submit_batch_non_success_raises(monkeypatch):
    service = Judge0Service(_settings())

    async def fake_request(method, path, **kwargs):
        return _FakeResponse({"error": "boom"}, status_code=500)

    monkeypatch.setattr(service, "_request", fake_request)

    with pytest.raises(JudgeGatewayError):
        asyncio.run(service.submit_batch([CodeSubmissionCreate(source_code="x", language_id=71)]))


def test_poll_waits_until_every_token_is_terminal(monkeypatch):
    service = Judge0Service(_settings())
    rounds = [
        {"submissions": [
            {"token": "a", "status": {"id": 3, "description": "Accepted"}},
            {"token": "b", "status": {"id": 2, "description": "Processing"}},
        ]},
        {"submissions": [
            {"token": "a", "status": {"id": 3, "description": "Accepted"}, "stdout": "1\n"},
            {"token": "b", "status_id": 4, "status_description": "Wrong Answer", "stdout": "3\n", "memory": 512},
        ]},
    ]
    paths: list[str] = []

    async def fake_request(method, path, **kwargs):
        paths.append(path)
        return _FakeResponse(rounds[len(paths) - 1])

    monkeypatch.setattr(service, "_request", fake_request)

    results = asyncio.run(service.poll_batch_results(["a", "b"]))

    assert len(paths) == 2
    assert paths[0] == "/submissions/batch?tokens=a,b&base64_encoded=false"
    assert [r.status_id for r in results] == [3, 4]
    assert results[1].status_description == "Wrong Answer"
    assert results[1].memory == 512


def test_request_masks_key_and_wraps_transport_errors(monkeypatch, caplog):
    service = Judge0Service(_settings(judge0_api_key="secret-key", judge0_host="judge0.p.rapidapi.com"))
    assert service.headers["X-RapidAPI-Key"] == "secret-key"

    class _BrokenClient:
        def __init__(self, *args, **kwargs):
            pass

        async def __aenter__(self):
            return self

        async def __aexit__(self, *exc):
            return False

        async def request(self, *args, **kwargs):
            raise httpx.ConnectError("refused")

    monkeypatch.setattr(httpx, "AsyncClient", _BrokenClient)
    caplog.set_level("DEBUG", logger="judge0")

    with pytest.raises(JudgeGatewayError):
        asyncio.run(service.get_batch_results(["a"]))
    assert "secret-key" not in caplog.text
    assert "[REDACTED]" in caplog.text


def test_simulated_backend_accepts_everything():
    gateway = SimulatedJudge0Service()
    subs = [CodeSubmissionCreate(source_code="x", language_id=63, stdin=str(i)) for i in range(3)]

    async def _run():
        tokens = await gateway.submit_batch(subs)
        return tokens, await gateway.poll_batch_results(tokens)

    tokens, results = asyncio.run(_run())
    assert len(tokens) == 3
    assert all(t.startswith("sim-") for t in tokens)
    assert tokens[2].endswith("-2")
    assert [r.status_id for r in results] == [3, 3, 3]
    assert all(r.stdout is None for r in results)


def test_build_gateway_selects_backend():
    assert isinstance(build_judge_gateway(_settings()), Judge0Service)
    assert isinstance(build_judge_gateway(_settings(use_real_judge0=False)), SimulatedJudge0Service)
    assert isinstance(build_judge_gateway(_settings(judge0_api_url="")), SimulatedJudge0Service)


@pytest.mark.parametrize(
    "label, expected",
    [("python", 71), ("Python3", 71), ("cpp", 54), ("C++", 54), ("ts", 74), ("nodejs", 63), ("cobol", None)],
)
def test_language_lookup(label, expected):
    assert get_judge0_language_id(label) == expected


def test_language_names():
    assert get_language_name(71) == "Python"
    assert get_language_name(54) == "C++"
    assert get_language_name(999) == "Unknown"

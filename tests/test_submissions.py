import json

from conftest import count_rows
from app.features.problems.models import ProblemSolved
from app.features.submissions.models import Submission, TestCaseResult

EXECUTE_URL = "/api/v1/execute-code"


def _create_problem(client, headers, **overrides):
    body = {
        "title": "Echo",
        "description": "Print the input back.",
        "testcases": [{"input": "1", "output": "1"}, {"input": "2", "output": "2"}],
        **overrides,
    }
    resp = client.post("/api/v1/problems", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["problem"]


def _execute(client, headers, **overrides):
    body = {
        "source_code": "print(input())",
        "language_id": 71,
        "stdin": ["1", "2"],
        "expected_outputs": ["1", "2"],
        **overrides,
    }
    return client.post(EXECUTE_URL, json=body, headers=headers)


def test_mismatched_test_cases_are_rejected(client, app, judge, make_user):
    _, headers = make_user("mismatch@example.com")

    resp = _execute(client, headers, stdin=["a", "b"], expected_outputs=["x"])
    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert _execute(client, headers, stdin=[], expected_outputs=[]).status_code == 400

    assert judge.batches == []
    with app.state.session_factory() as session:
        assert count_rows(session, Submission) == 0


def test_all_passing_submission_marks_problem_solved_once(client, app, judge, make_user):
    user, headers = make_user("solver@example.com")
    problem = _create_problem(client, headers)
    judge.batches.clear()

    resp = _execute(client, headers, problemId=problem["id"])
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Code Executed! Successfully!"
    submission = body["submission"]
    assert submission["status"] == "Accepted"
    assert submission["language"] == "Python"
    assert submission["stdin"] == "1\n2"
    assert submission["problemId"] == problem["id"]
    assert json.loads(submission["stdout"]) == ["1", "2"]
    assert submission["stderr"] is None
    cases = submission["testCases"]
    assert [c["testCase"] for c in cases] == [1, 2]
    assert all(c["passed"] for c in cases)

    sent = judge.batches[0]
    assert [s.stdin for s in sent] == ["1", "2"]
    assert {s.language_id for s in sent} == {71}

    assert _execute(client, headers, problemId=problem["id"]).status_code == 200
    with app.state.session_factory() as session:
        assert count_rows(session, ProblemSolved, ProblemSolved.user_id == user["id"]) == 1
        assert count_rows(session, Submission) == 2
        assert count_rows(session, TestCaseResult) == 4


def test_wrong_answer_is_recorded_without_solving(client, app, judge, make_user):
    _, headers = make_user("wrong@example.com")
    problem = _create_problem(client, headers)
    judge.stdout = ["1\n", "5\n"]
    judge.statuses = [{"id": 3, "description": "Accepted"}, {"id": 4, "description": "Wrong Answer"}]
    judge.memory = 256
    judge.time = "0.02"

    resp = _execute(client, headers, problemId=problem["id"])
    assert resp.status_code == 200
    submission = resp.json()["submission"]
    assert submission["status"] == "Wrong Answer"
    first, second = submission["testCases"]
    assert first["passed"] is True and first["stdout"] == "1"
    assert second["passed"] is False
    assert second["stdout"] == "5"
    assert second["expected"] == "2"
    assert second["status"] == "Wrong Answer"
    assert second["memory"] == "256 KB"
    assert second["time"] == "0.02 s"
    assert json.loads(submission["memory"]) == ["256 KB", "256 KB"]

    with app.state.session_factory() as session:
        assert count_rows(session, ProblemSolved) == 0


def test_unknown_problem_is_rejected_before_judging(client, judge, make_user):
    _, headers = make_user("ghost@example.com")
    resp = _execute(client, headers, problemId="does-not-exist")
    assert resp.status_code == 404
    assert resp.json()["message"] == "Problem not found"
    assert judge.batches == []


def test_execute_requires_authentication(client):
    assert _execute(client, {}).status_code == 401


def test_submission_queries(client, make_user):
    _, alice = make_user("alice@example.com")
    _, bob = make_user("bob@example.com")
    problem = _create_problem(client, alice)

    _execute(client, alice, problemId=problem["id"])
    _execute(client, alice)
    _execute(client, bob, problemId=problem["id"])

    mine = client.get("/api/v1/submissions", headers=alice).json()["submissions"]
    assert len(mine) == 2

    for_problem = client.get(f"/api/v1/submissions/problem/{problem['id']}", headers=alice).json()["submissions"]
    assert len(for_problem) == 1
    assert for_problem[0]["problemId"] == problem["id"]

    count = client.get(f"/api/v1/submissions/problem/{problem['id']}/count", headers=bob).json()
    assert count["success"] is True
    assert count["count"] == 2


def test_missing_judge_result_does_not_solve(client, app, judge, make_user, monkeypatch):
    user, headers = make_user("partial@example.com")
    problem = _create_problem(client, headers)
    full_poll = judge.poll_batch_results

    async def drop_last(tokens):
        return (await full_poll(tokens))[:-1]

    monkeypatch.setattr(judge, "poll_batch_results", drop_last)

    resp = _execute(client, headers, problemId=problem["id"])
    assert resp.status_code == 200
    submission = resp.json()["submission"]
    assert submission["status"] == "Wrong Answer"
    assert len(submission["testCases"]) == 1
    with app.state.session_factory() as session:
        assert count_rows(session, ProblemSolved, ProblemSolved.user_id == user["id"]) == 0

from conftest import count_rows
from app.features.playlists.models import Playlist, ProblemInPlaylist

PLAYLIST_URL = "/api/v1/playlist"


def _problem(client, headers, title="Problem"):
    resp = client.post("/api/v1/problems", json={"title": title, "description": "d"}, headers=headers)
    assert resp.status_code == 201
    return resp.json()["problem"]["id"]


def _playlist(client, headers, name="Favourites", description=None):
    resp = client.post(f"{PLAYLIST_URL}/create-playlist", json={"name": name, "description": description}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["playList"]


def test_create_and_list_playlists(client, make_user):
    user, headers = make_user("curator@example.com")
    playlist = _playlist(client, headers, description="Warm-ups")
    assert playlist["userId"] == user["id"]
    assert playlist["description"] == "Warm-ups"

    listed = client.get(PLAYLIST_URL, headers=headers).json()
    assert listed["message"] == "Playlists fetched successfully"
    assert [p["id"] for p in listed["playLists"]] == [playlist["id"]]
    assert listed["playLists"][0]["problems"] == []


def test_duplicate_playlist_name_conflicts(client, make_user):
    _, alice = make_user("alice@example.com")
    _, bob = make_user("bob@example.com")
    _playlist(client, alice, name="Graphs")

    resp = client.post(f"{PLAYLIST_URL}/create-playlist", json={"name": "Graphs"}, headers=alice)
    assert resp.status_code == 409
    # names are only unique per owner
    _playlist(client, bob, name="Graphs")


def test_add_problem_is_idempotent(client, app, make_user):
    _, headers = make_user("adder@example.com")
    problem_id = _problem(client, headers)
    playlist = _playlist(client, headers)
    url = f"{PLAYLIST_URL}/{playlist['id']}/add-problem"

    first = client.post(url, json={"problemIds": [problem_id]}, headers=headers)
    assert first.status_code == 200
    assert first.json()["problemsInPlaylist"] == {"count": 1}

    second = client.post(url, json={"problemIds": [problem_id, problem_id]}, headers=headers)
    assert second.status_code == 200
    assert second.json()["problemsInPlaylist"] == {"count": 0}

    with app.state.session_factory() as session:
        assert count_rows(session, ProblemInPlaylist, ProblemInPlaylist.problem_id == problem_id) == 1

    detail = client.get(f"{PLAYLIST_URL}/{playlist['id']}", headers=headers).json()["playList"]
    assert [entry["problem"]["id"] for entry in detail["problems"]] == [problem_id]


def test_remove_problems(client, make_user):
    _, headers = make_user("remover@example.com")
    keep = _problem(client, headers, "Keep")
    drop = _problem(client, headers, "Drop")
    playlist = _playlist(client, headers)
    client.post(f"{PLAYLIST_URL}/{playlist['id']}/add-problem", json={"problemIds": [keep, drop]}, headers=headers)

    resp = client.request(
        "DELETE", f"{PLAYLIST_URL}/{playlist['id']}/remove-problem", json={"problemIds": [drop]}, headers=headers
    )
    assert resp.status_code == 200
    assert resp.json()["deletedProblem"] == {"count": 1}

    detail = client.get(f"{PLAYLIST_URL}/{playlist['id']}", headers=headers).json()["playList"]
    assert [entry["problemId"] for entry in detail["problems"]] == [keep]


def test_membership_requires_ids(client, make_user):
    _, headers = make_user("empty@example.com")
    playlist = _playlist(client, headers)

    for body in ({"problemIds": []}, {}):
        resp = client.post(f"{PLAYLIST_URL}/{playlist['id']}/add-problem", json=body, headers=headers)
        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid or missing problemIds"

    resp = client.request("DELETE", f"{PLAYLIST_URL}/{playlist['id']}/remove-problem", json={"problemIds": []}, headers=headers)
    assert resp.status_code == 400


def test_add_unknown_problem_is_not_found(client, make_user):
    _, headers = make_user("unknown@example.com")
    playlist = _playlist(client, headers)
    resp = client.post(f"{PLAYLIST_URL}/{playlist['id']}/add-problem", json={"problemIds": ["nope"]}, headers=headers)
    assert resp.status_code == 404


def test_playlists_are_owner_only(client, app, make_user):
    _, owner = make_user("owner@example.com")
    _, other = make_user("other@example.com")
    problem_id = _problem(client, owner)
    playlist = _playlist(client, owner)
    base = f"{PLAYLIST_URL}/{playlist['id']}"

    assert client.get(base, headers=other).status_code == 403
    assert client.post(f"{base}/add-problem", json={"problemIds": [problem_id]}, headers=other).status_code == 403
    assert client.delete(base, headers=other).status_code == 403
    assert client.get(PLAYLIST_URL, headers=other).json()["playLists"] == []

    missing = client.get(f"{PLAYLIST_URL}/missing", headers=owner)
    assert missing.status_code == 404
    assert missing.json()["message"] == "Playlist not found"

    deleted = client.delete(base, headers=owner)
    assert deleted.status_code == 200
    assert deleted.json()["deletedPlaylist"]["id"] == playlist["id"]
    with app.state.session_factory() as session:
        assert count_rows(session, Playlist) == 0

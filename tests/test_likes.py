"""API tests for /like-target and /get-likes."""
from __future__ import annotations

from models.like import Like


def _like(client, auth, target="cat-photo.png"):
    return client.post("/like-target", json={"target": target}, headers=auth)


def _count(client, auth, target="cat-photo.png"):
    resp = client.get("/get-likes", params={"target": target}, headers=auth)
    assert resp.status_code == 200
    return resp.json()["like_count"]


def test_like_target(client, auth):
    resp = _like(client, auth)
    assert resp.status_code == 204
    assert resp.content == b""


def test_unliked_target_is_zero(client, auth):
    assert _count(client, auth, "never-liked") == 0


def test_three_likes(client, auth):
    """Each like re-encrypts the target, yet all three hit the same counter."""
    for _ in range(3):
        _like(client, auth)
    assert _count(client, auth) == 3


def test_one_row_per_target(client, auth, session):
    for _ in range(3):
        _like(client, auth)
    _like(client, auth, "dog-photo.png")
    assert session.query(Like).count() == 2
    row = session.query(Like).filter(Like.like_count == 3).one()
    assert "cat-photo" not in row.target


def test_likes_are_per_credential(client, auth):
    other = {"Authorization": "someone-else"}
    _like(client, auth)
    _like(client, auth)
    _like(client, other)
    assert _count(client, auth) == 2
    assert _count(client, other) == 1


def test_likes_independent_of_tags(client, auth):
    client.post("/add-tag", json={"target": "cat-photo.png", "tag": "animal"}, headers=auth)
    assert _count(client, auth) == 0


def test_like_missing_target(client, auth):
    resp = client.post("/like-target", json={}, headers=auth)
    assert resp.status_code == 400


def test_like_missing_credential(client):
    resp = client.post("/like-target", json={"target": "cat-photo.png"})
    assert resp.status_code == 401


def test_like_wrong_method(client, auth):
    resp = client.get("/like-target", headers=auth)
    assert resp.status_code == 405


def test_get_likes_missing_target(client, auth):
    resp = client.get("/get-likes", headers=auth)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Missing target"


def test_get_likes_missing_credential(client):
    resp = client.get("/get-likes", params={"target": "cat-photo.png"})
    assert resp.status_code == 401

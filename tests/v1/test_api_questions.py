"""Tests for question listing, submission and deletion endpoints."""

import pytest
from fastapi import status

from town_hall.core.settings import settings
from town_hall.models import Question
from town_hall.services.direction import VoteDirection
from town_hall.services.votes import cast_vote


@pytest.fixture()
def submission_enabled(monkeypatch):
    monkeypatch.setattr(settings, "question_submission_enabled", True)


def test_list_anonymous_caller(client, make_question) -> None:
    make_question("first", score=1)
    make_question("second", score=4, anonymous=True, author_id="user-bob")

    response = client.get("/v1/list")

    assert response.status_code == status.HTTP_200_OK
    entries = response.json()["questions"]
    assert [entry["content"] for entry in entries] == ["second", "first"]
    assert entries[0]["authorName"] is None
    assert entries[0]["anonymous"] is True
    assert entries[1]["authorName"] == "alice@example.com"
    assert all(entry["myVote"] == "none" for entry in entries)
    assert all(entry["myQuestion"] is False for entry in entries)
    assert set(entries[0]) == {
        "id", "anonymous", "content", "authorName", "timestamp", "score", "myVote", "myQuestion",
    }


def test_list_signed_in_caller(client, db_session, auth_token, make_question) -> None:
    mine = make_question("mine", author_id="user-alice")
    theirs = make_question("theirs", author_id="user-bob")
    cast_vote(db_session, theirs.id, "user-alice", VoteDirection.UP)
    cast_vote(db_session, mine.id, "user-bob", VoteDirection.DOWN)

    response = client.get("/v1/list", headers=auth_token)

    entries = {entry["id"]: entry for entry in response.json()["questions"]}
    assert entries[mine.id]["myQuestion"] is True
    assert entries[mine.id]["myVote"] == "none"
    assert entries[mine.id]["score"] == -1
    assert entries[theirs.id]["myQuestion"] is False
    assert entries[theirs.id]["myVote"] == "up"
    assert entries[theirs.id]["score"] == 1


def test_list_empty(client) -> None:
    response = client.get("/v1/list")
    assert response.json() == {"questions": []}


def test_submit_disabled_by_default(client, db_session, auth_token) -> None:
    response = client.post(
        "/v1/submit", json={"content": "Hello?", "anonymous": False}, headers=auth_token
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json() == {"detail": "Forbidden"}
    assert db_session.query(Question).count() == 0


def test_submit_disabled_even_without_login(client) -> None:
    response = client.post("/v1/submit", json={"content": "Hello?"})
    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.usefixtures("submission_enabled")
def test_submit_when_enabled(client, auth_token) -> None:
    response = client.post(
        "/v1/submit", json={"content": "Hello?", "anonymous": False}, headers=auth_token
    )

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["content"] == "Hello?"
    assert body["authorName"] == "alice@example.com"
    assert body["score"] == 0
    assert isinstance(body["id"], int)


@pytest.mark.usefixtures("submission_enabled")
def test_submit_anonymous(client, db_session, auth_token) -> None:
    response = client.post(
        "/v1/submit", json={"content": "Secret?", "anonymous": True}, headers=auth_token
    )

    body = response.json()
    assert body["authorName"] is None
    stored = db_session.get(Question, body["id"])
    assert stored.author_id == "user-alice"


@pytest.mark.usefixtures("submission_enabled")
def test_submit_requires_login_when_enabled(client) -> None:
    response = client.post("/v1/submit", json={"content": "Hello?"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_delete_own_question(client, db_session, auth_token, test_question) -> None:
    question_id = test_question.id
    cast_vote(db_session, question_id, "user-bob", VoteDirection.UP)

    response = client.delete(f"/v1/question/{question_id}", headers=auth_token)

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {}
    assert db_session.get(Question, question_id) is None


def test_delete_other_users_question(client, db_session, other_auth_token, test_question) -> None:
    response = client.delete(f"/v1/question/{test_question.id}", headers=other_auth_token)

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert db_session.get(Question, test_question.id) is not None


def test_delete_requires_authentication(client, test_question) -> None:
    response = client.delete(f"/v1/question/{test_question.id}")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_delete_malformed_id(client, auth_token) -> None:
    response = client.delete("/v1/question/12x", headers=auth_token)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_delete_missing_question(client, auth_token) -> None:
    response = client.delete("/v1/question/31337", headers=auth_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_question_route_rejects_get(client, auth_token, test_question) -> None:
    response = client.get(f"/v1/question/{test_question.id}", headers=auth_token)
    assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED

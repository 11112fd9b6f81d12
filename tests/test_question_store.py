"""Tests for question submission, listing and deletion."""

from datetime import timedelta

import pytest
from sqlalchemy import func, select

from town_hall.db.time import as_utc, utcnow
from town_hall.models import Question, VoteEntry
from town_hall.services import questions
from town_hall.services.direction import VoteDirection
from town_hall.services.errors import Forbidden, NoSuchQuestion
from town_hall.services.scoring import recompute_all
from town_hall.services.votes import cast_vote


def _vote_count(db_session, question_id: int) -> int:
    return db_session.scalar(
        select(func.count()).select_from(VoteEntry).where(VoteEntry.question_id == question_id)
    )


def test_submit_stores_author(db_session) -> None:
    question = questions.submit(
        db_session,
        content="When is the next offsite?",
        author_id="user-a",
        author_name="a@example.com",
        anonymous=False,
    )

    assert question.id is not None
    assert question.score == 0
    assert question.author_name == "a@example.com"
    assert question.author_id == "user-a"


def test_submit_anonymous_drops_name_keeps_id(db_session) -> None:
    question = questions.submit(
        db_session,
        content="Why?",
        author_id="user-a",
        author_name="a@example.com",
        anonymous=True,
    )

    assert question.anonymous is True
    assert question.author_name is None
    assert question.author_id == "user-a"


def test_list_ranked_orders_by_score(db_session, make_question) -> None:
    low = make_question("low", score=-2)
    high = make_question("high", score=5)
    mid_a = make_question("mid a", score=1)
    mid_b = make_question("mid b", score=1)

    ranked = questions.list_ranked(db_session)

    assert [q.id for q in ranked] == [high.id, mid_a.id, mid_b.id, low.id]


def test_list_recent_filters_by_window(db_session, make_question) -> None:
    now = utcnow()
    make_question("three days ago", timestamp=now - timedelta(days=3))
    yesterday = make_question("23 hours ago", timestamp=now - timedelta(hours=23))
    fresh = make_question("just now", timestamp=now - timedelta(minutes=1))

    recent = questions.list_recent(db_session, timedelta(hours=24), now)

    assert [q.id for q in recent] == [yesterday.id, fresh.id]
    assert all(as_utc(q.timestamp) >= now - timedelta(hours=24) for q in recent)


def test_delete_own_question_removes_votes(db_session, make_question) -> None:
    doomed = make_question("doomed", author_id="user-a")
    kept = make_question("kept", author_id="user-b")
    for voter in ("user-a", "user-b", "user-c"):
        cast_vote(db_session, doomed.id, voter, VoteDirection.UP)
    cast_vote(db_session, kept.id, "user-c", VoteDirection.DOWN)

    questions.delete(db_session, doomed.id, "user-a")

    assert db_session.get(Question, doomed.id) is None
    assert _vote_count(db_session, doomed.id) == 0
    assert _vote_count(db_session, kept.id) == 1

    # Remaining questions recount unaffected.
    assert recompute_all(db_session) == 1
    assert kept.score == -1


def test_delete_someone_elses_question_is_forbidden(db_session, make_question) -> None:
    question = make_question(author_id="user-a")
    cast_vote(db_session, question.id, "user-b", VoteDirection.UP)

    with pytest.raises(Forbidden):
        questions.delete(db_session, question.id, "user-b")

    assert db_session.get(Question, question.id) is not None
    assert _vote_count(db_session, question.id) == 1


def test_delete_missing_question(db_session) -> None:
    with pytest.raises(NoSuchQuestion):
        questions.delete(db_session, 424242, "user-a")

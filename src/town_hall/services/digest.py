"""Daily digest of newly posted questions.

Composition is pure: :func:`compose_digest` takes the selected questions and
a timestamp and returns both renderings, or ``None`` when there is nothing to
send. :func:`send_digest` wires selection, subscribers and the mail transport
together.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from town_hall.core.settings import settings
from town_hall.db.time import as_utc, utcnow
from town_hall.models import DigestSubscription, Question
from town_hall.repositories.question_repo import QuestionRepository
from town_hall.services.errors import BackendFailure
from town_hall.services.mail import MailMessage, MailTransport
from town_hall.services.questions import list_recent

logger = logging.getLogger(__name__)

_env = Environment(
    loader=PackageLoader("town_hall", "templates"),
    autoescape=select_autoescape(enabled_extensions=("html", "html.j2"), default=False),
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)


@dataclass(frozen=True)
class DigestItem:
    """The fields of a question shown in a digest."""

    content: str
    posted: str
    score: int

    @classmethod
    def from_question(cls, question: Question) -> DigestItem:
        return cls(
            content=question.content,
            posted=as_utc(question.timestamp).strftime("%Y-%m-%d %H:%M UTC"),
            score=question.score,
        )


@dataclass(frozen=True)
class Digest:
    """A rendered digest ready for dispatch."""

    subject: str
    plain_text: str
    rich_text: str


def digest_subject(now: datetime) -> str:
    """Return the subject line, e.g. ``Town Hall Digest Mon Jan  2``."""
    return f"{settings.app_name} Digest {now:%a %b} {now.day:2d}"


def compose_digest(questions: Sequence[Question], now: datetime) -> Digest | None:
    """Render the plain text and HTML bodies for ``questions``.

    Both bodies are rendered from the same list of items, so they always
    include the same questions in the same order.

    Returns:
        The digest, or ``None`` when ``questions`` is empty and there is
        nothing to send.
    """
    if not questions:
        return None

    items = tuple(DigestItem.from_question(question) for question in questions)
    context = {
        "items": items,
        "site_url": settings.site_url,
        "window_hours": settings.digest_window_hours,
    }
    return Digest(
        subject=digest_subject(now),
        plain_text=_env.get_template("digest.txt.j2").render(context),
        rich_text=_env.get_template("digest.html.j2").render(context),
    )


def resolve_subscribers(session: Session) -> list[str]:
    """Return the address of every user with the digest enabled."""
    try:
        return QuestionRepository(session).enabled_subscription_addresses()
    except SQLAlchemyError as err:
        raise BackendFailure("error getting users with digest enabled") from err


def set_subscription(session: Session, user_id: str, address: str, enabled: bool) -> None:
    """Create or update the user's digest subscription."""
    repo = QuestionRepository(session)
    try:
        subscription = repo.get_subscription(user_id)
        if subscription is None:
            session.add(DigestSubscription(user_id=user_id, address=address, enabled=enabled))
        else:
            subscription.address = address
            subscription.enabled = enabled
        session.commit()
    except SQLAlchemyError as err:
        session.rollback()
        raise BackendFailure("error putting digest state into the database") from err


def send_digest(
    session: Session,
    transport: MailTransport,
    now: datetime | None = None,
) -> bool:
    """Send the digest of recent questions to every subscriber.

    Returns:
        True if a message was handed to the transport, False when there were
        no new questions or no subscribers.

    Raises:
        BackendFailure: If storage or the transport fails.
    """
    now = now or utcnow()
    questions = list_recent(session, timedelta(hours=settings.digest_window_hours), now)
    digest = compose_digest(questions, now)
    if digest is None:
        logger.debug("no new questions to send")
        return False

    addresses = resolve_subscribers(session)
    if not addresses:
        logger.debug("no digest subscribers")
        return False

    transport.send(
        MailMessage(
            sender=settings.digest_sender,
            subject=digest.subject,
            body=digest.plain_text,
            html_body=digest.rich_text,
            bcc=tuple(addresses),
        )
    )
    logger.info("Sent digest of %d questions to %d subscribers", len(questions), len(addresses))
    return True

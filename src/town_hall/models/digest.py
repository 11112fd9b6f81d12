"""Digest subscription state per user."""

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from town_hall.db.session import Base


class DigestSubscription(Base):
    """Whether a user wants the daily digest, and where to send it.

    Rows are upserted on every toggle and never deleted.
    """

    __tablename__ = "digest_subscription"

    user_id: Mapped[str] = mapped_column(Text, primary_key=True)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    enabled: Mapped[bool] = mapped_column(default=False, nullable=False)

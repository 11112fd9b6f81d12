"""Vote direction type."""

from __future__ import annotations

from enum import Enum

from town_hall.services.errors import InvalidDirection


class VoteDirection(str, Enum):
    """A user's current vote on a question."""

    NONE = "none"
    UP = "up"
    DOWN = "down"

    @classmethod
    def parse(cls, token: str) -> VoteDirection:
        """Return the direction for a canonical token.

        Raises:
            InvalidDirection: If ``token`` is not exactly ``none``, ``up`` or ``down``.
        """
        try:
            return cls(token)
        except ValueError as err:
            raise InvalidDirection(f"not a valid vote direction: {token!r}") from err

    @property
    def credit(self) -> int:
        """Contribution of this direction to a question's score."""
        return _CREDITS[self]


_CREDITS = {
    VoteDirection.NONE: 0,
    VoteDirection.UP: 1,
    VoteDirection.DOWN: -1,
}

"""
Display name assignment for joining sessions.

Names are composed from two fixed word lists ("Amber Sky"). Random
compositions are tried a bounded number of times, then a free combination
is drawn from the remaining ones. A collision is accepted only once every
combination is taken.

Dependencies: random, re
System role: Human-readable identity for anonymous users
"""

import logging
import random
import re

from chatrelay.core.session_registry import SessionRegistry

logger = logging.getLogger(__name__)

ADJECTIVES = (
    "Amber", "Azure", "Bright", "Calm", "Coral", "Crimson", "Dusky", "Emerald",
    "Gentle", "Golden", "Hazel", "Ivory", "Jade", "Lunar", "Misty", "Noble",
    "Olive", "Quiet", "Rosy", "Silver", "Solar", "Swift", "Velvet", "Wild",
)

NOUNS = (
    "Sky", "River", "Meadow", "Harbor", "Falcon", "Willow", "Canyon", "Ember",
    "Breeze", "Comet", "Forest", "Glade", "Island", "Lagoon", "Maple", "Orchid",
    "Pebble", "Prairie", "Raven", "Summit", "Thunder", "Valley", "Wave", "Zephyr",
)

# Client-side defaults such as "user_k3j9x2", "Guest 42" or "Anonymous"
PLACEHOLDER_NAME = re.compile(r"^(?:user|guest|anonymous)(?:[\s_-]+\w*|\d*)$", re.IGNORECASE)


def is_placeholder_name(name: str | None) -> bool:
    """Whether a requested name is missing or a generated placeholder."""
    if name is None:
        return True
    stripped = name.strip()
    return not stripped or PLACEHOLDER_NAME.match(stripped) is not None


class IdentityAssigner:
    """
    Issues display names that do not collide with active sessions.

    Args:
        registry: Registry whose active names must be avoided
        max_attempts: Random compositions tried before scanning for a free one
        rng: Random source (anything with ``choice``), injectable for tests
    """

    def __init__(
        self,
        registry: SessionRegistry,
        max_attempts: int = 10,
        rng: random.Random | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._registry = registry
        self._max_attempts = max_attempts
        self._rng = rng or random.Random()

    @property
    def combinations(self) -> int:
        return len(ADJECTIVES) * len(NOUNS)

    def generate(self) -> str:
        return f"{self._rng.choice(ADJECTIVES)} {self._rng.choice(NOUNS)}"

    def assign(self, requested_name: str | None = None, user_id: str | None = None) -> str:
        """
        Choose a display name for a joining session.

        A requested name is kept when it is not a placeholder and no other
        active user holds it (the joining user's own previous session does
        not count as a collision).

        Args:
            requested_name: Name the client asked for, if any
            user_id: Joining user, excluded from the collision check

        Returns:
            str: Assigned display name
        """
        taken = self._registry.active_names(exclude_user_id=user_id)

        if not is_placeholder_name(requested_name):
            name = requested_name.strip()
            if name.casefold() not in taken:
                return name
            logger.debug(
                "Requested name collides with an active session",
                extra={"user_id": user_id, "requested_name": name},
            )

        for _ in range(self._max_attempts):
            candidate = self.generate()
            if candidate.casefold() not in taken:
                return candidate

        free = [
            f"{adjective} {noun}"
            for adjective in ADJECTIVES
            for noun in NOUNS
            if f"{adjective} {noun}".casefold() not in taken
        ]
        if free:
            return self._rng.choice(free)

        logger.warning(
            "Every name combination is taken, accepting colliding name",
            extra={"user_id": user_id, "display_name": candidate, "combinations": self.combinations},
        )
        return candidate

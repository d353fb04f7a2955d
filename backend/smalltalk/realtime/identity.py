from __future__ import annotations

import random
from typing import Sequence

DEFAULT_PREFIXES: tuple[str, ...] = ("User", "Guest", "Visitor", "Friend", "Member")
SUFFIX_MIN = 1000
SUFFIX_MAX = 9999


class IdentityAssignor:
    """Generates display names like ``Guest4821``.

    Names are not checked for uniqueness; two members of the same room may
    share one.
    """

    def __init__(self, prefixes: Sequence[str] = DEFAULT_PREFIXES, rng: random.Random | None = None) -> None:
        if not prefixes:
            raise ValueError("At least one identity prefix is required")
        self._prefixes = tuple(prefixes)
        self._rng = rng or random.Random()

    def generate(self) -> str:
        prefix = self._rng.choice(self._prefixes)
        number = self._rng.randint(SUFFIX_MIN, SUFFIX_MAX)
        return f"{prefix}{number}"

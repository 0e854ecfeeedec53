"""English pluralization used to locate container keys."""

from __future__ import annotations

from collections.abc import Callable
from functools import lru_cache

import inflect

Pluralizer = Callable[[str], str]

_engine = inflect.engine()


@lru_cache(maxsize=256)
def pluralize(noun: str) -> str:
    """Return the plural of ``noun`` (``VApp`` -> ``VApps``, ``Query`` -> ``Queries``).

    Type names are capitalized, which inflect takes for proper nouns, so the
    noun is pluralized with a lowercase first letter that is restored after.
    """
    if not noun:
        return noun
    plural = str(_engine.plural_noun(noun[0].lower() + noun[1:]))
    return noun[0] + plural[1:]

"""Name similarity used to reconcile entities across providers."""

from __future__ import annotations

import unicodedata
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable


def simplify_name(name: str) -> str:
    """Reduce a name to lowercase letters and digits without diacritics.

    Case, accents, punctuation and whitespace are all dropped, so ``"J.A.N.E.
    Döe"`` and ``"jane-doe"`` simplify to the same value.
    """

    decomposed = unicodedata.normalize("NFKD", name)
    text = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    text = text.casefold()
    return "".join(ch for ch in text if ch.isalnum())


def similar_names(a: str, b: str) -> bool:
    """Check whether the simplified versions of the given names are identical."""

    return simplify_name(a) == simplify_name(b)


def match_by_similar_name[T](
    item: T,
    candidates: Iterable[T],
    name_of: Callable[[T], str | None],
) -> T | None:
    """Return the first candidate whose name is similar to the name of ``item``."""

    name = name_of(item)
    if not name:
        return None
    simplified = simplify_name(name)
    for candidate in candidates:
        candidate_name = name_of(candidate)
        if candidate_name and simplify_name(candidate_name) == simplified:
            return candidate
    return None

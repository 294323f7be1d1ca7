"""Fuzzy relevance ranking for list-view search boxes (Levenshtein based)."""

from typing import Any, Callable, Iterable, List, Optional, TypeVar

from config.defaults import (
    FUZZY_SCALE, FUZZY_THRESHOLD, NO_MATCH, SCORE_EXACT, SCORE_PREFIX, SCORE_SUBSTRING,
    SCORE_WORD_START,
)

T = TypeVar("T")


def levenshtein(source: Optional[str], target: Optional[str]) -> int:
    """Minimum single-character insertions, deletions or substitutions (case-sensitive)."""
    source = source or ""
    target = target or ""
    if not source:
        return len(target)
    if not target:
        return len(source)

    previous = list(range(len(target) + 1))
    for i, s_char in enumerate(source, start=1):
        current = [i] + [0] * len(target)
        for j, t_char in enumerate(target, start=1):
            cost = 0 if s_char == t_char else 1
            current[j] = min(
                current[j - 1] + 1,       # insertion
                previous[j] + 1,          # deletion
                previous[j - 1] + cost,   # substitution
            )
        previous = current
    return previous[-1]


def normalized_similarity(source: Optional[str], target: Optional[str]) -> float:
    """Case-insensitive similarity in [0, 1]; 1.0 for identical (or both empty)."""
    source = (source or "").lower()
    target = (target or "").lower()
    if not source and not target:
        return 1.0
    if not source or not target:
        return 0.0
    return 1.0 - levenshtein(source, target) / max(len(source), len(target))


def contains_substring(source: Optional[str], target: Optional[str]) -> bool:
    """True if `source` occurs in `target`, ignoring case. Empty source is always contained."""
    if not source:
        return True
    if not target:
        return False
    return source.lower() in target.lower()


def score(query: Optional[str], candidate: Optional[str], fuzzy_threshold: float = FUZZY_THRESHOLD) -> int:
    """Relevance of `candidate` for `query`; NO_MATCH (-1) when it should be hidden.

    Exact > prefix > word start > substring > fuzzy, and fuzzy matches rank
    by normalized edit distance against the whole text or its best word.
    """
    query = (query or "").strip().lower()
    if not query:
        return SCORE_EXACT
    text = (candidate or "").lower()
    if not text:
        return NO_MATCH

    if text == query:
        return SCORE_EXACT
    if text.startswith(query):
        return SCORE_PREFIX

    words = text.split()
    if any(w.startswith(query) for w in words):
        return SCORE_WORD_START
    if query in text:
        return SCORE_SUBSTRING

    best = max([normalized_similarity(query, text)] + [normalized_similarity(query, w) for w in words])
    if best >= fuzzy_threshold:
        return int(best * FUZZY_SCALE)
    return NO_MATCH


def best_score(query: Optional[str], fields: Iterable[Any]) -> int:
    """Maximum score across a record's searchable fields."""
    scores = [score(query, None if f is None else str(f)) for f in fields]
    return max(scores, default=NO_MATCH)


def rank(
    items: Iterable[T],
    query: Optional[str],
    fields: Callable[[T], Iterable[Any]],
    default_key: Callable[[T], Any],
    reverse_default: bool = False,
) -> List[T]:
    """Filter and order items for a search box.

    With an empty query everything is kept and sorted by the view's default
    key. Otherwise items whose best field score is negative are dropped and
    the rest sorted by score (highest first), ties by the default key.
    """
    ordered = sorted(items, key=default_key, reverse=reverse_default)
    if not (query or "").strip():
        return ordered
    scored = [(best_score(query, fields(item)), item) for item in ordered]
    kept = [(s, item) for s, item in scored if s >= 0]
    # Stable sort keeps the default ordering among equal scores
    kept.sort(key=lambda pair: pair[0], reverse=True)
    return [item for _, item in kept]

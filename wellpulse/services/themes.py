"""Keyword theme extraction over check-in answers."""
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from wellpulse.core.constants import THEME_VOCABULARY


def themes_in_answer(answer: Mapping[str, Any], vocabulary: Sequence[str] = THEME_VOCABULARY) -> List[str]:
    """Vocabulary terms present in an answer's question text plus its note."""
    text = f"{answer.get('question') or ''} {answer.get('description') or ''}".lower()
    return [term for term in vocabulary if term in text]


def count_themes(
    answers: Iterable[Mapping[str, Any]],
    vocabulary: Sequence[str] = THEME_VOCABULARY,
) -> Dict[str, int]:
    """Count, per term, how many answers mention it."""
    counts: Dict[str, int] = {}
    for answer in answers:
        for term in themes_in_answer(answer, vocabulary):
            counts[term] = counts.get(term, 0) + 1
    return counts


def top_themes(
    counts: Mapping[str, int],
    limit: int = 3,
    vocabulary: Sequence[str] = THEME_VOCABULARY,
) -> List[Dict[str, Any]]:
    """Most frequent terms first; ties keep vocabulary order."""
    ranked = [term for term in vocabulary if counts.get(term)]
    ranked.sort(key=lambda term: -counts[term])  # list.sort is stable
    return [{"topic": term, "count": counts[term]} for term in ranked[:limit]]

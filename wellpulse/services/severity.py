"""Severity classification of check-in answers.

Matching is plain case-insensitive substring search, so "no" also matches
inside words such as "not" or "know". The precedence order below is the
product rule; do not tighten it without a product decision.
"""
from typing import Any, Iterable, Mapping

from wellpulse.core.constants import AMBER, GREEN, RED


def classify(option: str, is_positive: bool = True) -> str:
    """Map one chosen option to ``red``, ``amber`` or ``green``.

    Precedence:
        1. "neutral" / "prefer not"  -> amber
        2. "yes"                     -> green on a positive question, else red
        3. "no"                      -> red on a positive question, else green
        4. anything else             -> amber
    """
    text = str(option or "").lower()

    if "neutral" in text or "prefer not" in text:
        return AMBER
    if "yes" in text:
        return GREEN if is_positive else RED
    if "no" in text:
        return RED if is_positive else GREEN
    return AMBER


def _polarity(answer: Mapping[str, Any]) -> bool:
    value = answer.get("is_positive")
    return True if value is None else bool(value)


def response_severity(answers: Iterable[Mapping[str, Any]]) -> str:
    """Overall severity of one response: any red wins, then any green, else amber."""
    severity = AMBER
    for answer in answers or []:
        level = classify(answer.get("option"), _polarity(answer))
        if level == RED:
            return RED
        if level == GREEN:
            severity = GREEN
    return severity

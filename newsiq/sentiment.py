"""Keyword-rule sentiment for headlines.

Each pattern group counts every word-boundary match in the text; the side
with strictly more matches wins, anything else is neutral.
"""

import re
from typing import Optional, Tuple

POSITIVE = "positive"
NEGATIVE = "negative"
NEUTRAL = "neutral"
SENTIMENTS = (POSITIVE, NEGATIVE, NEUTRAL)


def _group(words: str) -> "re.Pattern[str]":
    return re.compile(rf"\b(?:{words})\b", re.IGNORECASE)


POSITIVE_PATTERNS = (
    _group("good|great|excellent|positive|success|win|won|growth|profit|achievement|record|breakthrough"),
    _group("improve|better|boost|rise|gain|surge|increase|up|high|peak|best"),
    _group("happy|joy|celebrate|celebration|congratulation|award|honor|praise"),
    _group("breakthrough|innovation|advance|progress|solution|resolve|recover"),
)

NEGATIVE_PATTERNS = (
    _group("bad|poor|negative|failure|loss|lost|decline|fall|down|low|worse|worst"),
    _group("crisis|problem|issue|error|mistake|fault|flaw|defect|bug|crash|fail"),
    _group("sad|angry|protest|strike|violence|attack|kill|death|murder|accident"),
    _group("scam|fraud|corruption|bribe|cheat|steal|theft|robbery|arrest|jail"),
    _group("disease|virus|pandemic|epidemic|infection|sick|illness|hospital"),
)


def _count(patterns, text: str) -> int:
    return sum(len(p.findall(text)) for p in patterns)


def score(text: Optional[str]) -> Tuple[int, int]:
    """Return (positive, negative) match counts."""
    if not text:
        return 0, 0
    return _count(POSITIVE_PATTERNS, text), _count(NEGATIVE_PATTERNS, text)


def classify(text: Optional[str]) -> str:
    if not text:
        return NEUTRAL
    pos, neg = score(text)
    if pos > neg:
        return POSITIVE
    if neg > pos:
        return NEGATIVE
    return NEUTRAL

"""Fuzzy matching primitive.

Matches if all query characters appear in order (not necessarily consecutive).
Higher score = better match. The query is split on whitespace and every token
must match; token scores are summed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

_WORD_BOUNDARY_RE = re.compile(r"[\s\-_./:\\]")
_ALPHA_NUM_RE = re.compile(r"^(?P<letters>[^\W\d_]+)(?P<digits>[0-9]+)$")
_NUM_ALPHA_RE = re.compile(r"^(?P<digits>[0-9]+)(?P<letters>[^\W\d_]+)$")
_PATH_SEPARATORS = "/\\"

SCORE_MATCH = 16
BONUS_BOUNDARY = 8
BONUS_PATH_BOUNDARY = 10
BONUS_CAMEL = 6
BONUS_CONSECUTIVE = 4
BONUS_FINAL_SEGMENT = 2
BONUS_FIRST_CHAR_MULTIPLIER = 2
PENALTY_GAP_START = 3
PENALTY_GAP_EXTENSION = 1
PENALTY_LEADING = 0.1
PENALTY_SWAPPED = 5


class CaseMatching(str, Enum):
    """How letter case is compared between query and text."""

    RESPECT = "respect"
    IGNORE = "ignore"
    SMART = "smart"

    def is_case_sensitive(self, query: str) -> bool:
        if self is CaseMatching.RESPECT:
            return True
        if self is CaseMatching.IGNORE:
            return False
        return any(ch.isupper() for ch in query)


@dataclass(frozen=True)
class FuzzyMatch:
    matches: bool
    score: float = 0
    positions: tuple[int, ...] = ()


NO_MATCH = FuzzyMatch(matches=False)


class Scorer(Protocol):
    """Signature shared by all scoring functions the picker can use."""

    def __call__(
        self,
        query: str,
        text: str,
        case_matching: CaseMatching,
        match_paths: bool,
    ) -> FuzzyMatch: ...


def fuzzy_match(
    query: str,
    text: str,
    case_matching: CaseMatching = CaseMatching.SMART,
    match_paths: bool = False,
) -> FuzzyMatch:
    """Score *text* against *query*.

    Returns a match with the summed score and the sorted character indices
    of *text* that matched, or ``NO_MATCH``. A query with no tokens matches
    everything with score 0.
    """
    tokens = query.split()
    if not tokens:
        return FuzzyMatch(matches=True, score=0)

    sensitive = CaseMatching(case_matching).is_case_sensitive(query)
    haystack = list(text) if sensitive else [ch.lower() for ch in text]

    total: float = 0
    positions: set[int] = set()
    for token in tokens:
        found = _match_token(token, text, haystack, sensitive, match_paths)
        if found is None:
            return NO_MATCH
        score, token_positions = found
        total += score
        positions.update(token_positions)

    return FuzzyMatch(matches=True, score=total, positions=tuple(sorted(positions)))


def _match_token(
    token: str,
    text: str,
    haystack: list[str],
    sensitive: bool,
    match_paths: bool,
) -> tuple[float, list[int]] | None:
    positions = _locate(_needle(token, sensitive), haystack)
    if positions is not None:
        return _score(positions, text, match_paths), positions

    swapped = _swap_alpha_numeric(token)
    if not swapped:
        return None

    positions = _locate(_needle(swapped, sensitive), haystack)
    if positions is None:
        return None
    return _score(positions, text, match_paths) - PENALTY_SWAPPED, positions


def _needle(token: str, sensitive: bool) -> list[str]:
    return list(token) if sensitive else [ch.lower() for ch in token]


def _swap_alpha_numeric(token: str) -> str:
    alpha_numeric = _ALPHA_NUM_RE.match(token)
    if alpha_numeric:
        return alpha_numeric.group("digits") + alpha_numeric.group("letters")
    numeric_alpha = _NUM_ALPHA_RE.match(token)
    if numeric_alpha:
        return numeric_alpha.group("letters") + numeric_alpha.group("digits")
    return ""


def _locate(needle: list[str], haystack: list[str]) -> list[int] | None:
    """Find match positions for *needle* in *haystack*.

    A forward scan finds where the leftmost match ends, a backward scan from
    there finds the tightest start, and the returned positions are the
    leftmost match inside that window.
    """
    n = len(needle)
    if n > len(haystack):
        return None

    end = -1
    qi = 0
    for i, ch in enumerate(haystack):
        if ch == needle[qi]:
            qi += 1
            if qi == n:
                end = i
                break
    if end < 0:
        return None

    start = end
    qi = n - 1
    for i in range(end, -1, -1):
        if haystack[i] == needle[qi]:
            qi -= 1
            if qi < 0:
                start = i
                break

    positions: list[int] = []
    qi = 0
    for i in range(start, end + 1):
        if qi < n and haystack[i] == needle[qi]:
            positions.append(i)
            qi += 1
    return positions


def _boundary_bonus(text: str, i: int, match_paths: bool) -> int:
    if i == 0:
        return BONUS_BOUNDARY
    prev, ch = text[i - 1], text[i]
    if match_paths and prev in _PATH_SEPARATORS:
        return BONUS_PATH_BOUNDARY
    if _WORD_BOUNDARY_RE.match(prev):
        return BONUS_BOUNDARY
    if prev.islower() and ch.isupper():
        return BONUS_CAMEL
    if (prev.isalpha() and ch.isdigit()) or (prev.isdigit() and ch.isalpha()):
        return BONUS_CAMEL
    return 0


def _final_segment_start(text: str) -> int:
    trimmed = text.rstrip(_PATH_SEPARATORS)
    return max(trimmed.rfind(sep) for sep in _PATH_SEPARATORS) + 1


def _score(positions: list[int], text: str, match_paths: bool) -> float:
    segment_start = _final_segment_start(text) if match_paths else None

    score: float = 0
    prev = -1
    consecutive = 0
    for k, i in enumerate(positions):
        score += SCORE_MATCH

        bonus = _boundary_bonus(text, i, match_paths)
        if k == 0:
            bonus *= BONUS_FIRST_CHAR_MULTIPLIER
        score += bonus

        if prev >= 0:
            if i == prev + 1:
                consecutive += 1
                score += consecutive * BONUS_CONSECUTIVE
            else:
                consecutive = 0
                gap = i - prev - 1
                score -= PENALTY_GAP_START + (gap - 1) * PENALTY_GAP_EXTENSION

        if segment_start is not None and i >= segment_start:
            score += BONUS_FINAL_SEGMENT
        prev = i

    return score - positions[0] * PENALTY_LEADING

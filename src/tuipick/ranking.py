"""Rank picker entries against a query."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from tuipick.config import PickerConfig
from tuipick.entries import Entry
from tuipick.fuzzy import Scorer, fuzzy_match

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchResult:
    """One entry that survived filtering.

    ``score`` is ``None`` when the query was empty and nothing was scored.
    """

    entry_index: int
    score: float | None = None
    positions: frozenset[int] = field(default_factory=frozenset)


def rerank(
    query: str,
    entries: Sequence[Entry],
    config: PickerConfig,
    scorer: Scorer = fuzzy_match,
) -> list[MatchResult]:
    """Filter and sort *entries* by match quality (best matches first).

    Equal scores keep insertion order. An empty query returns every entry,
    unscored, in insertion order.
    """
    if not query:
        return [MatchResult(entry_index=i) for i in range(len(entries))]

    results: list[MatchResult] = []
    for index, entry in enumerate(entries):
        match = scorer(query, entry.text, config.case_matching, config.match_paths)
        if match.matches:
            results.append(
                MatchResult(
                    entry_index=index,
                    score=match.score,
                    positions=frozenset(match.positions),
                )
            )

    results.sort(key=lambda r: (-r.score, r.entry_index))  # type: ignore[operator]
    logger.debug("query %r matched %d of %d entries", query, len(results), len(entries))
    return results

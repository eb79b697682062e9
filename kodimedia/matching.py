"""Fuzzy matching of spoken or typed queries against library listings."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from rapidfuzz import fuzz, process, utils

from .const import FUZZY_MATCH_THRESHOLD


def fuzzy_resolve[T: Mapping[str, Any]](
    query: str,
    candidates: Sequence[T],
    match_field: str,
    threshold: float = FUZZY_MATCH_THRESHOLD,
) -> T | None:
    """Return the candidate whose ``match_field`` best matches the query.

    Query and labels are lowercased, stripped of punctuation and trimmed
    before scoring with rapidfuzz's weighted ratio (0-100). The weighted
    ratio also scores partial alignments, so a shortened title such as
    ``star wars`` still finds ``Star Wars: Episode IV - A New Hope``. A
    candidate is accepted only when its score exceeds ``threshold``. On
    equal scores the earliest candidate wins, so the result only depends on
    the inputs.

    Candidates whose label is missing or normalizes to nothing never match,
    and neither does a query that normalizes to nothing.

    Args:
        query: Free-text search string.
        candidates: Listing entries, e.g. ``{"movieid": 12, "label": "Up"}``.
        match_field: Key holding the label to compare against.
        threshold: Score a candidate has to exceed.

    Returns:
        The best candidate, or None when nothing exceeds the threshold.
    """
    processed_query = utils.default_process(query)
    if not processed_query:
        return None

    labels: dict[int, str] = {}
    for index, candidate in enumerate(candidates):
        label = utils.default_process(str(candidate.get(match_field) or ""))
        if label:
            labels[index] = label
    if not labels:
        return None

    match = process.extractOne(
        processed_query,
        labels,
        scorer=fuzz.WRatio,
        processor=None,
        score_cutoff=threshold,
    )
    if match is None:
        return None
    _, score, index = match
    if score <= threshold:
        return None
    return candidates[index]


__all__ = ["fuzzy_resolve"]

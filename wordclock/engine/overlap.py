"""Pairwise letter-sharing opportunities between tokens."""

from __future__ import annotations

from typing import Any, Dict, List, Sequence, Tuple

from ..core.constants import OverlapKind
from ..core.models import OverlapCandidate, Token
from ..utils.logger import get_logger

LOGGER = get_logger(__name__)


def chain_length(head: str, tail: str) -> int:
    """Longest L with ``head[-L:] == tail[:L]`` and L shorter than both words."""

    for length in range(min(len(head), len(tail)) - 1, 0, -1):
        if head.endswith(tail[:length]):
            return length
    return 0


def occurrences(haystack: str, needle: str) -> List[int]:
    positions = []
    start = haystack.find(needle)
    while start != -1:
        positions.append(start)
        start = haystack.find(needle, start + 1)
    return positions


def pair_candidates(anchor: Token, token: Token, allow_cross: bool = False) -> List[OverlapCandidate]:
    """Every way ``token`` can share letters with a placed ``anchor``."""

    if anchor.id == token.id:
        return []
    found: List[OverlapCandidate] = []

    def add(kind: OverlapKind, shared: int, **extra: int) -> None:
        found.append(
            OverlapCandidate(token_id=token.id, anchor_id=anchor.id, kind=kind, shared=shared, **extra)
        )

    for start in occurrences(anchor.text, token.text):
        add(OverlapKind.INSIDE, token.length, offset=start)
    for start in occurrences(token.text, anchor.text):
        add(OverlapKind.AROUND, anchor.length, offset=-start)

    after = chain_length(anchor.text, token.text)
    if after:
        add(OverlapKind.CHAIN_AFTER, after, offset=anchor.length - after)
    before = chain_length(token.text, anchor.text)
    if before:
        add(OverlapKind.CHAIN_BEFORE, before, offset=before - token.length)

    if allow_cross and anchor.length > 1 and token.length > 1:
        for token_index, letter in enumerate(token.text):
            for anchor_index, anchor_letter in enumerate(anchor.text):
                if letter == anchor_letter:
                    add(
                        OverlapKind.CROSS,
                        1,
                        token_index=token_index,
                        anchor_index=anchor_index,
                    )
    return found


class OverlapIndex:
    """Ranked overlap candidates for every token, computed once per build."""

    def __init__(self, candidates: Dict[int, Tuple[OverlapCandidate, ...]], allow_cross: bool) -> None:
        self._candidates = candidates
        self.allow_cross = allow_cross

    @classmethod
    def build(cls, tokens: Sequence[Token], allow_cross: bool = False) -> "OverlapIndex":
        per_token: Dict[int, List[OverlapCandidate]] = {token.id: [] for token in tokens}
        for token in tokens:
            for anchor in tokens:
                if anchor.id != token.id:
                    per_token[token.id].extend(pair_candidates(anchor, token, allow_cross))

        ranked = {
            token_id: tuple(sorted(found, key=OverlapCandidate.rank_key))
            for token_id, found in per_token.items()
        }
        total = sum(len(found) for found in ranked.values())
        LOGGER.info(
            "Overlap index: %d tokens, %d candidates (cross=%s)",
            len(tokens),
            total,
            allow_cross,
        )
        return cls(ranked, allow_cross)

    def candidates_for(self, token_id: int) -> Tuple[OverlapCandidate, ...]:
        return self._candidates.get(token_id, ())

    def __len__(self) -> int:
        return sum(len(found) for found in self._candidates.values())

    def to_jsonable(self) -> Dict[str, Any]:
        """Overlap graph edges, one per same-axis candidate.

        Crossings are summarized as a single edge per pair, since their
        letter-by-letter list is only useful to the placer.
        """

        edges: List[Dict[str, Any]] = []
        for token_id in sorted(self._candidates):
            crossed = set()
            for candidate in self._candidates[token_id]:
                if candidate.kind is OverlapKind.CROSS:
                    if candidate.anchor_id in crossed:
                        continue
                    crossed.add(candidate.anchor_id)
                edges.append(
                    {
                        "anchor": candidate.anchor_id,
                        "token": candidate.token_id,
                        "kind": candidate.kind.value,
                        "shared": candidate.shared,
                        "offset": candidate.offset,
                    }
                )
        return {"allow_cross": self.allow_cross, "edges": edges}

"""Before/after relations that keep every phrase readable.

A phrase's words must light up in row-major reading order: the first cell
of each word comes after the last cell of the word before it. Each pair of
consecutive words becomes one edge ``earlier -> later``. Edges that would
close a cycle across phrases (``"A B"`` next to ``"B A"``, or a repeated word
around another one) cannot be honoured by single placements and are dropped.
"""

from __future__ import annotations

import heapq
from typing import Callable, Iterable, List, Mapping, Sequence, Set, Tuple

from ..core.models import Coord, Placement, Token
from ..data.tokenizer import TokenTable
from ..utils.logger import get_logger

LOGGER = get_logger(__name__)


class ReadingOrder:
    """Acyclic precedence between tokens derived from phrase word order."""

    def __init__(self, token_count: int) -> None:
        self._after: List[Set[int]] = [set() for _ in range(token_count)]
        self._before: List[Set[int]] = [set() for _ in range(token_count)]
        self.dropped: List[Tuple[int, int]] = []

    @classmethod
    def from_table(cls, table: TokenTable) -> "ReadingOrder":
        order = cls(len(table.tokens))
        for phrase in table.phrases:
            for earlier, later in zip(phrase.token_ids, phrase.token_ids[1:]):
                if earlier == later or later in order._after[earlier]:
                    continue
                if order.reaches(later, earlier):
                    LOGGER.warning(
                        "Phrase %d: %s before %s contradicts another phrase; not enforced",
                        phrase.id,
                        table.token(earlier).text,
                        table.token(later).text,
                    )
                    order.dropped.append((earlier, later))
                    continue
                order._after[earlier].add(later)
                order._before[later].add(earlier)
        LOGGER.info(
            "Reading order: %d edges, %d dropped",
            len(order.edges()),
            len(order.dropped),
        )
        return order

    def predecessors(self, token_id: int) -> Set[int]:
        return self._before[token_id]

    def successors(self, token_id: int) -> Set[int]:
        return self._after[token_id]

    def edges(self) -> List[Tuple[int, int]]:
        return [
            (earlier, later)
            for earlier, followers in enumerate(self._after)
            for later in sorted(followers)
        ]

    def reaches(self, start: int, goal: int) -> bool:
        """Whether ``goal`` must already come after ``start``."""

        stack = [start]
        seen = {start}
        while stack:
            current = stack.pop()
            if current == goal:
                return True
            for follower in self._after[current]:
                if follower not in seen:
                    seen.add(follower)
                    stack.append(follower)
        return False

    def allows(self, token_id: int, cells: Sequence[Coord], placements: Mapping[int, Placement]) -> bool:
        """Whether ``cells`` keep ``token_id`` between its placed neighbours."""

        first, last = min(cells), max(cells)
        for earlier in self._before[token_id]:
            placed = placements.get(earlier)
            if placed is not None and max(placed.cells) >= first:
                return False
        for later in self._after[token_id]:
            placed = placements.get(later)
            if placed is not None and min(placed.cells) <= last:
                return False
        return True

    def visit_order(self, tokens: Iterable[Token], priority: Callable[[Token], tuple]) -> List[Token]:
        """Tokens by ``priority``, each only once all of its predecessors are out."""

        by_id = {token.id: token for token in tokens}
        pending = {token_id: len(self._before[token_id]) for token_id in by_id}
        ready = [(priority(token), token_id) for token_id, token in by_id.items() if not pending[token_id]]
        heapq.heapify(ready)

        ordered: List[Token] = []
        while ready:
            _, token_id = heapq.heappop(ready)
            ordered.append(by_id[token_id])
            for follower in self._after[token_id]:
                pending[follower] -= 1
                if not pending[follower]:
                    heapq.heappush(ready, (priority(by_id[follower]), follower))
        return ordered

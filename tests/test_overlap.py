import unittest

from wordclock.core.constants import OverlapKind
from wordclock.core.models import Token
from wordclock.engine.overlap import OverlapIndex, chain_length, occurrences, pair_candidates


def _tokens(*texts):
    return [Token(id=index, text=text) for index, text in enumerate(texts)]


class ChainTests(unittest.TestCase):
    def test_chain_length_is_maximal_and_partial(self) -> None:
        self.assertEqual(chain_length("TWENTY", "TYPE"), 2)
        self.assertEqual(chain_length("TEN", "NINE"), 1)
        self.assertEqual(chain_length("ONE", "TWO"), 0)
        # Full containment is not a chain
        self.assertEqual(chain_length("TENT", "ENT"), 0)

    def test_occurrences_overlap(self) -> None:
        self.assertEqual(occurrences("AAAA", "AA"), [0, 1, 2])


class PairCandidateTests(unittest.TestCase):
    def test_contained_token_sits_inside_anchor(self) -> None:
        ten, tent = _tokens("TEN", "TENT")
        found = pair_candidates(anchor=tent, token=ten)
        inside = [c for c in found if c.kind is OverlapKind.INSIDE]
        self.assertEqual(len(inside), 1)
        self.assertEqual((inside[0].offset, inside[0].shared), (0, 3))

    def test_anchor_inside_token_and_chain_before(self) -> None:
        ten, tent = _tokens("TEN", "TENT")
        found = {c.kind: c for c in pair_candidates(anchor=ten, token=tent)}
        self.assertEqual((found[OverlapKind.AROUND].offset, found[OverlapKind.AROUND].shared), (0, 3))
        # TENT's last T overlaps TEN's first T
        self.assertEqual(found[OverlapKind.CHAIN_BEFORE].offset, -3)
        self.assertEqual(found[OverlapKind.CHAIN_BEFORE].shared, 1)

    def test_crossings_only_when_enabled(self) -> None:
        house, oak = _tokens("HOUSE", "OAK")
        self.assertEqual(pair_candidates(house, oak), [])
        crossings = pair_candidates(house, oak, allow_cross=True)
        self.assertEqual(len(crossings), 1)
        self.assertEqual(crossings[0].kind, OverlapKind.CROSS)
        self.assertEqual((crossings[0].token_index, crossings[0].anchor_index), (0, 1))

    def test_single_letters_never_cross(self) -> None:
        a, cat = _tokens("A", "CAT")
        kinds = {c.kind for c in pair_candidates(cat, a, allow_cross=True)}
        self.assertEqual(kinds, {OverlapKind.INSIDE})


class OverlapIndexTests(unittest.TestCase):
    def test_candidates_ranked_by_shared_then_anchor(self) -> None:
        index = OverlapIndex.build(_tokens("TEN", "NINE", "TENT"))
        ranked = [(c.anchor_id, c.kind, c.shared) for c in index.candidates_for(0)]
        self.assertEqual(
            ranked,
            [
                (2, OverlapKind.INSIDE, 3),
                (1, OverlapKind.CHAIN_BEFORE, 1),
                (2, OverlapKind.CHAIN_AFTER, 1),
            ],
        )

    def test_no_self_candidates_and_positive_sharing(self) -> None:
        tokens = _tokens("IT", "IS", "TWENTY", "TEN", "TO", "TWO", "ONE")
        index = OverlapIndex.build(tokens, allow_cross=True)
        for token in tokens:
            for candidate in index.candidates_for(token.id):
                self.assertNotEqual(candidate.anchor_id, token.id)
                self.assertGreater(candidate.shared, 0)
        self.assertEqual(len(index), sum(len(index.candidates_for(t.id)) for t in tokens))

    def test_graph_export_collapses_crossings(self) -> None:
        index = OverlapIndex.build(_tokens("HOUSE", "SHOE"), allow_cross=True)
        edges = index.to_jsonable()["edges"]
        crosses = [e for e in edges if e["kind"] == "CROSS"]
        self.assertEqual(len({(e["anchor"], e["token"]) for e in crosses}), len(crosses))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()

import unittest

from wordclock.core.exceptions import ArtifactError, EmptyPhrase
from wordclock.core.models import PhraseRecord
from wordclock.data.normalization import clean_word
from wordclock.data.tokenizer import TokenTable, records_from_jsonable, split_words, tokenize


class NormalizationTests(unittest.TestCase):
    def test_clean_word_folds_case_and_diacritics(self) -> None:
        self.assertEqual(clean_word("São"), "SAO")
        self.assertEqual(clean_word("Straße"), "STRASSE")
        self.assertEqual(clean_word("vingt-cinq"), "VINGTCINQ")
        self.assertEqual(clean_word("o'clock,"), "OCLOCK")

    def test_split_words_drops_punctuation_only_chunks(self) -> None:
        self.assertEqual(split_words("  It is -- ten,  past ONE! "), ["IT", "IS", "TEN", "PAST", "ONE"])


class TokenizeTests(unittest.TestCase):
    def test_identical_words_share_one_token(self) -> None:
        table = tokenize(["Ten past one", "ten to TWO!"])
        self.assertEqual([t.text for t in table.tokens], ["TEN", "PAST", "ONE", "TO", "TWO"])
        ten = table.find("Ten")
        self.assertEqual(ten.id, 0)
        self.assertEqual(ten.references, ((0, 0), (1, 0)))
        self.assertEqual(ten.phrase_count, 2)
        self.assertEqual(table.phrase(1).token_ids, (0, 3, 4))
        self.assertEqual(table.phrase_text(1), "TEN TO TWO")
        self.assertEqual(table.phrase(1).text, "ten to TWO!")

    def test_repeated_word_in_one_phrase(self) -> None:
        table = tokenize(["ten ten"])
        self.assertEqual(len(table.tokens), 1)
        self.assertEqual(table.tokens[0].references, ((0, 0), (0, 1)))
        self.assertEqual(table.tokens[0].phrase_count, 1)

    def test_empty_phrase_is_rejected(self) -> None:
        with self.assertRaises(EmptyPhrase) as ctx:
            tokenize(["one", "  ...  "])
        self.assertEqual(ctx.exception.phrase_index, 1)

    def test_empty_corpus_is_rejected(self) -> None:
        with self.assertRaises(EmptyPhrase):
            tokenize([])

    def test_co_occurring_tokens(self) -> None:
        table = tokenize(["TEN TWENTY", "TWENTY ONE", "FIVE"])
        twenty = table.find("TWENTY").id
        self.assertEqual(table.co_occurring(twenty), {table.find("TEN").id, table.find("ONE").id})
        self.assertEqual(table.co_occurring(table.find("FIVE").id), frozenset())

    def test_phrase_tags_are_kept(self) -> None:
        table = tokenize([PhraseRecord(text="half past two", tags={"language": "English"})])
        self.assertEqual(table.phrase(0).tags, (("language", "English"),))
        self.assertEqual(table.to_jsonable()["phrases"][0]["tags"], {"language": "English"})


class TokenTableJsonTests(unittest.TestCase):
    def test_table_survives_json_form(self) -> None:
        table = tokenize(["it is ten past one", "it is one"])
        self.assertEqual(TokenTable.from_jsonable(table.to_jsonable()), table)

    def test_inconsistent_references_are_rejected(self) -> None:
        payload = tokenize(["ten past one"]).to_jsonable()
        payload["tokens"][0]["references"] = []
        with self.assertRaises(ArtifactError):
            TokenTable.from_jsonable(payload)

    def test_reference_to_another_words_position_is_rejected(self) -> None:
        payload = tokenize(["ten past one"]).to_jsonable()
        payload["tokens"][0]["references"].append([0, 2])
        with self.assertRaises(ArtifactError):
            TokenTable.from_jsonable(payload)

    def test_reference_to_unknown_phrase_is_rejected(self) -> None:
        payload = tokenize(["ten past one"]).to_jsonable()
        payload["tokens"][1]["references"].append([4, 0])
        with self.assertRaises(ArtifactError):
            TokenTable.from_jsonable(payload)

    def test_missing_keys_are_rejected(self) -> None:
        with self.assertRaises(ArtifactError):
            TokenTable.from_jsonable({"tokens": []})

    def test_phrase_corpus_shapes(self) -> None:
        records = records_from_jsonable(
            {
                "phrases": [
                    "it is one",
                    {"text": "il est une heure", "language": "French", "minutes": 0},
                    {"texts": ["E", "UMA", "HORA"]},
                ]
            }
        )
        self.assertEqual([r.text for r in records], ["it is one", "il est une heure", "E UMA HORA"])
        self.assertEqual(records[1].tags, {"language": "French", "minutes": "0"})
        with self.assertRaises(ArtifactError):
            records_from_jsonable({"items": []})
        with self.assertRaises(ArtifactError):
            records_from_jsonable([42])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()

"""Split phrases into shared word tokens.

Every distinct normalized word becomes one :class:`Token`; phrases keep the
ordered ids of their words and each token remembers which phrase positions
reference it. Records are stored in lists indexed by their integer ids.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, List, Sequence, Set, Tuple, Union

from ..core.exceptions import ArtifactError, EmptyPhrase
from ..core.models import Phrase, PhraseRecord, Token
from ..utils.logger import get_logger
from .normalization import clean_word

LOGGER = get_logger(__name__)

PhraseInput = Union[str, PhraseRecord]


def split_words(text: str) -> List[str]:
    """Return the normalized words of ``text``, punctuation dropped."""

    words = []
    for chunk in text.split():
        word = clean_word(chunk)
        if word:
            words.append(word)
    return words


@dataclass(frozen=True)
class TokenTable:
    """Token identities plus the phrase → token-sequence mapping."""

    tokens: Tuple[Token, ...]
    phrases: Tuple[Phrase, ...]

    def token(self, token_id: int) -> Token:
        return self.tokens[token_id]

    def phrase(self, phrase_id: int) -> Phrase:
        return self.phrases[phrase_id]

    def phrase_tokens(self, phrase_id: int) -> List[Token]:
        return [self.tokens[token_id] for token_id in self.phrases[phrase_id].token_ids]

    def phrase_text(self, phrase_id: int) -> str:
        """Normalized phrase text, words separated by single spaces."""

        return " ".join(token.text for token in self.phrase_tokens(phrase_id))

    def find(self, text: str) -> Token:
        normalized = clean_word(text)
        for token in self.tokens:
            if token.text == normalized:
                return token
        raise KeyError(text)

    def co_occurring(self, token_id: int) -> FrozenSet[int]:
        """Ids of the other tokens sharing at least one phrase with ``token_id``."""

        others: Set[int] = set()
        for phrase_id in self.tokens[token_id].phrase_ids:
            others.update(self.phrases[phrase_id].token_ids)
        others.discard(token_id)
        return frozenset(others)

    @property
    def total_letters(self) -> int:
        return sum(token.length for token in self.tokens)

    # ------------------------------------------------------------------
    # Serialization helpers
    # ------------------------------------------------------------------
    def to_jsonable(self) -> Dict[str, Any]:
        return {
            "tokens": [
                {
                    "id": token.id,
                    "text": token.text,
                    "references": [[phrase_id, position] for phrase_id, position in token.references],
                }
                for token in self.tokens
            ],
            "phrases": [
                {
                    "id": phrase.id,
                    "text": phrase.text,
                    "tags": dict(phrase.tags),
                    "tokens": list(phrase.token_ids),
                }
                for phrase in self.phrases
            ],
        }

    @classmethod
    def from_jsonable(cls, payload: Dict[str, Any]) -> "TokenTable":
        """Rebuild a table written by :meth:`to_jsonable`.

        Ids must be dense and in order, and every phrase reference must agree
        with the token's own reference list.
        """

        try:
            raw_tokens = payload["tokens"]
            raw_phrases = payload["phrases"]
            tokens = tuple(
                Token(
                    id=int(item["id"]),
                    text=str(item["text"]),
                    references=tuple((int(p), int(i)) for p, i in item["references"]),
                )
                for item in raw_tokens
            )
            phrases = tuple(
                Phrase(
                    id=int(item["id"]),
                    text=str(item["text"]),
                    token_ids=tuple(int(t) for t in item["tokens"]),
                    tags=tuple(sorted((str(k), str(v)) for k, v in (item.get("tags") or {}).items())),
                )
                for item in raw_phrases
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ArtifactError(f"Malformed token table: {exc}") from exc

        for index, token in enumerate(tokens):
            if token.id != index:
                raise ArtifactError(f"Token ids must be dense, found {token.id} at {index}")
            if not token.text or clean_word(token.text) != token.text:
                raise ArtifactError(f"Token {token.id} has non-normalized text {token.text!r}")
        for index, phrase in enumerate(phrases):
            if phrase.id != index:
                raise ArtifactError(f"Phrase ids must be dense, found {phrase.id} at {index}")
            if not phrase.token_ids:
                raise EmptyPhrase(f"Phrase {index} has no tokens", phrase_index=index)
            for position, token_id in enumerate(phrase.token_ids):
                if not 0 <= token_id < len(tokens):
                    raise ArtifactError(f"Phrase {index} references unknown token {token_id}")
                if (index, position) not in tokens[token_id].references:
                    raise ArtifactError(
                        f"Token {token_id} is missing reference ({index}, {position})"
                    )
        for token in tokens:
            if len(set(token.references)) != len(token.references):
                raise ArtifactError(f"Token {token.id} repeats a reference")
            for phrase_id, position in token.references:
                if not 0 <= phrase_id < len(phrases):
                    raise ArtifactError(f"Token {token.id} references unknown phrase {phrase_id}")
                token_ids = phrases[phrase_id].token_ids
                if not 0 <= position < len(token_ids) or token_ids[position] != token.id:
                    raise ArtifactError(
                        f"Token {token.id} claims ({phrase_id}, {position}) but the phrase disagrees"
                    )
        return cls(tokens=tokens, phrases=phrases)


def tokenize(phrases: Sequence[PhraseInput]) -> TokenTable:
    """Tokenize the ordered phrase corpus into a :class:`TokenTable`."""

    records = [_as_record(item) for item in phrases]
    if not records:
        raise EmptyPhrase("Phrase corpus is empty")

    ids_by_text: Dict[str, int] = {}
    texts: List[str] = []
    references: List[List[Tuple[int, int]]] = []
    built_phrases: List[Phrase] = []

    for phrase_id, record in enumerate(records):
        words = split_words(record.text)
        if not words:
            raise EmptyPhrase(
                f"Phrase {phrase_id} ({record.text!r}) contains no words",
                phrase_index=phrase_id,
            )
        token_ids = []
        for position, word in enumerate(words):
            token_id = ids_by_text.get(word)
            if token_id is None:
                token_id = len(texts)
                ids_by_text[word] = token_id
                texts.append(word)
                references.append([])
            references[token_id].append((phrase_id, position))
            token_ids.append(token_id)
        built_phrases.append(
            Phrase(
                id=phrase_id,
                text=record.text,
                token_ids=tuple(token_ids),
                tags=tuple(sorted(record.tags.items())),
            )
        )

    tokens = tuple(
        Token(id=token_id, text=text, references=tuple(references[token_id]))
        for token_id, text in enumerate(texts)
    )
    LOGGER.info("Tokenized %d phrases into %d distinct tokens", len(built_phrases), len(tokens))
    return TokenTable(tokens=tokens, phrases=tuple(built_phrases))


def _as_record(item: PhraseInput) -> PhraseRecord:
    if isinstance(item, PhraseRecord):
        return item
    return PhraseRecord(text=str(item))


def records_from_jsonable(payload: Any) -> List[PhraseRecord]:
    """Read a phrase corpus in any of the accepted JSON shapes.

    Accepts a bare list or ``{"phrases": [...]}``; items may be strings,
    ``{"text": ...}`` objects (remaining scalar keys become tags) or
    ``{"texts": [...]}`` word lists.
    """

    items: Iterable[Any]
    if isinstance(payload, dict):
        if "phrases" not in payload:
            raise ArtifactError("Phrase corpus object must contain a 'phrases' list")
        items = payload["phrases"]
    else:
        items = payload
    if not isinstance(items, list):
        raise ArtifactError("Phrase corpus must be a list")

    records = []
    for index, item in enumerate(items):
        if isinstance(item, str):
            records.append(PhraseRecord(text=item))
        elif isinstance(item, dict) and "text" in item:
            tags = {
                str(key): str(value)
                for key, value in item.items()
                if key != "text" and isinstance(value, (str, int, float, bool))
            }
            records.append(PhraseRecord(text=str(item["text"]), tags=tags))
        elif isinstance(item, dict) and isinstance(item.get("texts"), list):
            records.append(PhraseRecord(text=" ".join(str(word) for word in item["texts"])))
        else:
            raise ArtifactError(f"Unsupported phrase entry at index {index}: {item!r}")
    return records

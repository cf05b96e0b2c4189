"""JSON artifacts exchanged between pipeline stages.

Documents are written with sorted keys and fixed indentation so the same
corpus always produces byte-identical files. Every file goes to a temporary
sibling first and is renamed into place, so a failed run never leaves a
partial artifact behind.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Mapping

from ..core.exceptions import ArtifactError
from ..core.models import PhraseRecord
from ..data.tokenizer import TokenTable, records_from_jsonable
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


def dumps(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n"


class ArtifactStore:
    """Read stage inputs and persist stage outputs as JSON documents."""

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def load_phrases(self, path: Path | str) -> List[PhraseRecord]:
        """Read a phrase corpus written by the phrase generator."""
        return records_from_jsonable(self._read(Path(path)))

    def load_token_table(self, path: Path | str) -> TokenTable:
        """Read a token table written by the ``tokenize`` stage."""
        payload = self._read(Path(path))
        if not isinstance(payload, dict):
            raise ArtifactError(f"{path}: token table must be a JSON object")
        return TokenTable.from_jsonable(payload)

    def save(self, path: Path | str, payload: Any) -> Path:
        """Atomically write one artifact and return its path."""
        return self.save_all({Path(path): payload})[0]

    def save_all(self, documents: Mapping[Path, Any]) -> List[Path]:
        """Serialize every document first, then write them all.

        Serialization errors surface before anything touches the disk.
        """
        rendered: Dict[Path, str] = {Path(path): dumps(payload) for path, payload in documents.items()}
        written = []
        for path, text in rendered.items():
            self._write_atomic(path, text)
            LOGGER.info("Artifact saved: %s", path)
            written.append(path)
        return written

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _read(path: Path) -> Any:
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise ArtifactError(f"Artifact not found: {path}") from exc
        except json.JSONDecodeError as exc:
            raise ArtifactError(f"{path}: invalid JSON ({exc})") from exc

    @staticmethod
    def _write_atomic(path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

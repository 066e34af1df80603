# lexchat/infrastructure/document_loader.py

import re
from pathlib import Path
from typing import List


MIN_PASSAGE_LENGTH = 30

_SENTENCE_TERMINATORS = re.compile(r"[.!?]+")


def split_passages(text: str, min_length: int = MIN_PASSAGE_LENGTH) -> List[str]:
    """
    Split text on runs of sentence terminators and keep the trimmed pieces
    that are at least `min_length` characters long, in document order.
    """
    passages = []
    for piece in _SENTENCE_TERMINATORS.split(text):
        piece = piece.strip()
        if len(piece) >= min_length:
            passages.append(piece)
    return passages


class DocumentLoader:
    """
    Reads plain-text documents for the CLI.

    Binary formats (PDF, Word, scanned images) are extracted upstream;
    this loader only accepts text it can decode directly.
    """

    SUPPORTED_EXTENSIONS = {".txt", ".md"}

    def load_file(self, file_path: Path) -> str:
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"Document not found: {file_path}")
        if file_path.suffix.lower() not in self.SUPPORTED_EXTENSIONS:
            raise ValueError(
                f"Unsupported file type: '{file_path.suffix}'. "
                f"Supported: {', '.join(sorted(self.SUPPORTED_EXTENSIONS))}"
            )

        text = file_path.read_text(encoding="utf-8", errors="ignore")
        print(f"[DocumentLoader] Loaded {len(text)} characters from {file_path.name}")
        return self._clean_text(text)

    @staticmethod
    def _clean_text(text: str) -> str:
        # Tabs and NULs come from sloppy exports; sentence punctuation is kept.
        text = text.replace("\x00", "").replace("\t", " ")
        return re.sub(r"[ ]{2,}", " ", text).strip()

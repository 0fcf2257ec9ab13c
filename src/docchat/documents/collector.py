"""Session-scoped document collector.

Hidden design decisions:
- How files are turned into text (plain decode vs. PDF extraction)
- How manual text entries are named
- How attached documents are joined into one context string
"""

import mimetypes
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from loguru import logger
from pypdf import PdfReader

from .models import DocumentItem

CONTEXT_SEPARATOR = "\n\n"


def build_context(documents: Iterable[DocumentItem]) -> str | None:
    """Join document contents into a single context string.

    Returns:
        Non-empty contents joined by a blank line, or None if there are none
    """
    parts = [doc.content for doc in documents if doc.content]
    if not parts:
        return None
    return CONTEXT_SEPARATOR.join(parts)


def _read_pdf(path: Path) -> str:
    reader = PdfReader(path)
    pages = []
    for page in reader.pages:
        text = page.extract_text() or ""
        if text.strip():
            pages.append(text.strip())
    return "\n\n".join(pages)


class DocumentCollector:
    """Ordered, in-memory list of documents for the active conversation."""

    def __init__(self, documents: Iterable[DocumentItem] | None = None):
        self._documents: list[DocumentItem] = list(documents or [])

    def __len__(self) -> int:
        return len(self._documents)

    def add(self, item: DocumentItem) -> DocumentItem:
        """Attach a document."""
        self._documents.append(item)
        logger.debug("Attached document {} ({} chars)", item.name, len(item.content))
        return item

    def add_text(self, text: str, name: str | None = None) -> DocumentItem | None:
        """Attach manually entered text.

        Blank text is ignored and None is returned.
        """
        if not text.strip():
            return None
        if name is None:
            name = f"Manual text ({datetime.now().strftime('%H:%M:%S')})"
        return self.add(DocumentItem(name=name, type="text/plain", content=text))

    def add_file(self, path: str | Path) -> DocumentItem:
        """Read a file from disk and attach its text.

        PDF files go through pypdf; anything else is decoded as UTF-8
        with undecodable bytes replaced.

        Raises:
            FileNotFoundError: If the path does not exist
        """
        file_path = Path(path)
        if not file_path.is_file():
            raise FileNotFoundError(f"No such file: {file_path}")

        mime_type, _ = mimetypes.guess_type(file_path.name)
        if file_path.suffix.lower() == ".pdf":
            content = _read_pdf(file_path)
            mime_type = "application/pdf"
        else:
            content = file_path.read_text(encoding="utf-8", errors="replace")

        return self.add(DocumentItem(
            name=file_path.name,
            type=mime_type or "application/octet-stream",
            content=content,
        ))

    def remove(self, index: int) -> DocumentItem:
        """Detach the document at ``index``.

        Raises:
            IndexError: If index is out of range
        """
        if not 0 <= index < len(self._documents):
            raise IndexError(f"No document at position {index}")
        return self._documents.pop(index)

    def list(self) -> list[DocumentItem]:
        """Return the attached documents in attachment order."""
        return list(self._documents)

    def replace(self, documents: Iterable[DocumentItem]) -> None:
        """Swap the whole document set (used when loading a saved conversation)."""
        self._documents = list(documents)

    def clear(self) -> None:
        self._documents.clear()

    def context(self) -> str | None:
        """Context string for the attached documents."""
        return build_context(self._documents)

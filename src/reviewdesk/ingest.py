"""Turn uploaded files and fetched pages into plain document text.

Every annotation range indexes into the text produced here, so the output
is normalised once: newlines become ``\\n`` and trailing whitespace at the
end of the document is dropped.
"""

from __future__ import annotations

import io
import logging
import re
import zipfile
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Literal

import docx
import httpx
import pymupdf
from selectolax.lexbor import LexborHTMLParser

logger = logging.getLogger(__name__)

FileKind = Literal["text", "html", "pdf", "docx"]

_EXTENSIONS: dict[str, FileKind] = {
    ".txt": "text",
    ".md": "text",
    ".html": "html",
    ".htm": "html",
    ".pdf": "pdf",
    ".docx": "docx",
}

CONTENT_TYPES: dict[FileKind, str] = {
    "text": "text/plain",
    "html": "text/html",
    "pdf": "application/pdf",
    "docx": (
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    ),
}

ACCEPTED_EXTENSIONS = ",".join(_EXTENSIONS)

# Tags whose contents never reach the reader
_STRIP_TAGS = ("script", "style", "noscript", "template", "head")

_BLOCK_SELECTOR = "p, div, li, h1, h2, h3, h4, h5, h6, blockquote, tr, pre"

_BLANK_RUN = re.compile(r"\n{3,}")

FETCH_TIMEOUT = 20.0


class UnsupportedDocumentError(ValueError):
    """Raised when an upload or URL cannot be turned into document text."""


@dataclass(frozen=True)
class IngestedDocument:
    """Plain text extracted from a source, plus how it was read."""

    content: str
    kind: FileKind
    content_type: str


def normalise_text(text: str) -> str:
    """Normalise newlines to ``\\n``, drop NUL and trim trailing whitespace."""
    text = text.replace("\r\n", "\n").replace("\r", "\n").replace("\x00", "")
    return _BLANK_RUN.sub("\n\n", text).rstrip()


def detect_kind(filename: str) -> FileKind:
    """Map a filename to its FileKind by extension.

    Raises:
        UnsupportedDocumentError: For extensions outside ACCEPTED_EXTENSIONS.
    """
    suffix = PurePosixPath(filename).suffix.lower()
    kind = _EXTENSIONS.get(suffix)
    if kind is None:
        msg = (
            f"Unsupported file type {suffix or filename!r}; "
            f"use {ACCEPTED_EXTENSIONS}"
        )
        raise UnsupportedDocumentError(msg)
    return kind


def _decode(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def html_to_text(markup: str) -> str:
    """Extract readable text from HTML, one line per block element."""
    tree = LexborHTMLParser(markup)
    tree.strip_tags(list(_STRIP_TAGS))
    for br in tree.css("br"):
        br.replace_with("\n")
    for block in tree.css(_BLOCK_SELECTOR):
        block.insert_after("\n")
    root = tree.body or tree.root
    if root is None:
        return ""
    return root.text(deep=True, separator="")


def pdf_to_text(data: bytes) -> str:
    """Extract text from every page of a PDF."""
    try:
        with pymupdf.open(stream=data, filetype="pdf") as pdf:
            pages = [page.get_text() for page in pdf]
    except (pymupdf.FileDataError, RuntimeError) as e:
        raise UnsupportedDocumentError(f"Could not read PDF: {e}") from e
    return "\n".join(pages)


def docx_to_text(data: bytes) -> str:
    """Extract paragraph text from a Word document."""
    try:
        document = docx.Document(io.BytesIO(data))
    except (zipfile.BadZipFile, KeyError, ValueError) as e:
        raise UnsupportedDocumentError(f"Could not read Word document: {e}") from e
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def ingest_bytes(filename: str, data: bytes) -> IngestedDocument:
    """Extract normalised document text from an uploaded file.

    Args:
        filename: Original filename, used to pick the reader.
        data: Raw file contents.

    Returns:
        The extracted text with its detected kind.

    Raises:
        UnsupportedDocumentError: If the type is unsupported, the file is
            unreadable, or it contains no text.
    """
    kind = detect_kind(filename)
    if kind == "pdf":
        raw = pdf_to_text(data)
    elif kind == "docx":
        raw = docx_to_text(data)
    elif kind == "html":
        raw = html_to_text(_decode(data))
    else:
        raw = _decode(data)

    content = normalise_text(raw)
    if not content.strip():
        raise UnsupportedDocumentError(f"{filename} contains no readable text")

    logger.info(
        "Ingested %s: kind=%s, %d bytes -> %d chars",
        filename,
        kind,
        len(data),
        len(content),
    )
    return IngestedDocument(
        content=content, kind=kind, content_type=CONTENT_TYPES[kind]
    )


def _kind_for_response(url: str, content_type: str) -> FileKind:
    media_type = content_type.split(";")[0].strip().lower()
    for kind, known in CONTENT_TYPES.items():
        if media_type == known:
            return kind
    if media_type.startswith("text/"):
        return "text"
    return detect_kind(httpx.URL(url).path or "index.html")


async def fetch_url(
    url: str, *, client: httpx.AsyncClient | None = None
) -> IngestedDocument:
    """Download ``url`` and extract its text.

    Raises:
        UnsupportedDocumentError: For non-HTTP URLs, failed requests, or
            content that cannot be read.
    """
    parsed = httpx.URL(url)
    if parsed.scheme not in ("http", "https"):
        msg = f"Only http(s) URLs can be fetched, got {url!r}"
        raise UnsupportedDocumentError(msg)

    try:
        if client is None:
            async with httpx.AsyncClient(
                timeout=FETCH_TIMEOUT, follow_redirects=True
            ) as owned:
                response = await owned.get(url)
        else:
            response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise UnsupportedDocumentError(f"Could not fetch {url}: {e}") from e

    kind = _kind_for_response(url, response.headers.get("content-type", ""))
    name = PurePosixPath(parsed.path).name or "index"
    if _EXTENSIONS.get(PurePosixPath(name).suffix.lower()) != kind:
        name += next(ext for ext, k in _EXTENSIONS.items() if k == kind)
    return ingest_bytes(name, response.content)

"""Lookup tables over vault documents."""

from collections.abc import Iterable

from vaultgraph.core.models import Document
from vaultgraph.core.parser import filename_key


def build_object_index(documents: Iterable[Document]) -> dict[str, Document]:
    """Map identifiers to documents.

    Every document is registered under its id, and under its filename
    (without ``.md``) when that slot is still free. Ids always take
    priority over filename entries; on duplicate ids the first document
    wins.
    """
    documents = list(documents)
    index: dict[str, Document] = {}

    for doc in documents:
        index.setdefault(doc.id, doc)

    for doc in documents:
        key = filename_key(doc.relative_path)
        if key:
            index.setdefault(key, doc)

    return index


def build_citation_key_index(documents: Iterable[Document]) -> dict[str, Document]:
    """Map citation keys to their ``bibtex_entry`` documents.

    When several entries share a key, the first one wins.
    """
    index: dict[str, Document] = {}
    for doc in documents:
        key = doc.citation_key
        if key is not None:
            index.setdefault(key, doc)
    return index

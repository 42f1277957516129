"""Cross-reference resolution between vault documents.

Outgoing links are parsed from each document body; backlinks are the
inverse relation, collected from every other document. Wikilinks match a
document by id or by filename, citations match ``bibtex_entry`` documents
by their ``citation_key``.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from vaultgraph.core.index import build_citation_key_index, build_object_index
from vaultgraph.core.models import (
    Backlink,
    CrossRefs,
    Document,
    Link,
    LinkType,
    ResolvedLink,
    ResolvedTarget,
)
from vaultgraph.core.parser import filename_key, parse_citations, parse_wiki_links

logger = logging.getLogger(__name__)


@dataclass
class _ParsedDocument:
    """A document with its body parsed once."""

    document: Document
    wikilinks: list[Link]
    citations: list[Link]

    @classmethod
    def parse(cls, document: Document) -> "_ParsedDocument":
        return cls(
            document=document,
            wikilinks=parse_wiki_links(document.body),
            citations=parse_citations(document.body),
        )

    @property
    def outgoing_links(self) -> list[Link]:
        return self.wikilinks + self.citations


def _backlink(source: Document, link: Link) -> Backlink:
    return Backlink(
        source_id=source.id,
        source_title=source.title,
        source_path=source.relative_path,
        context=link.context,
        link_type=link.link_type,
    )


def _collect_backlinks(
    target: Document, sources: Sequence[_ParsedDocument]
) -> list[Backlink]:
    """Gather backlinks to ``target`` in source iteration order.

    Wikilink backlinks come first, then citation backlinks. Sources sharing
    the target's id are skipped.
    """
    names = {target.id}
    key = filename_key(target.relative_path)
    if key:
        names.add(key)

    backlinks = []
    for source in sources:
        if source.document.id == target.id:
            continue
        for link in source.wikilinks:
            if link.target_id in names:
                backlinks.append(_backlink(source.document, link))

    citation_key = target.citation_key
    if citation_key is not None:
        for source in sources:
            if source.document.id == target.id:
                continue
            for citation in source.citations:
                if citation.target_id == citation_key:
                    backlinks.append(_backlink(source.document, citation))

    return backlinks


def get_object_cross_refs(
    document: Document, documents: Sequence[Document]
) -> CrossRefs:
    """Compute cross-references for a single document.

    Args:
        document: The document to inspect.
        documents: Every document in the vault (may include ``document``).

    Returns:
        Outgoing links of ``document`` and backlinks from all others.
    """
    parsed = _ParsedDocument.parse(document)
    sources = [
        _ParsedDocument.parse(other)
        for other in documents
        if other.id != document.id
    ]
    return CrossRefs(
        id=document.id,
        outgoing_links=parsed.outgoing_links,
        backlinks=_collect_backlinks(document, sources),
    )


def compute_all_cross_refs(documents: Sequence[Document]) -> dict[str, CrossRefs]:
    """Compute cross-references for every document at once.

    Each body is parsed a single time. The result is keyed by document id
    in document order; if two documents share an id, the first one is
    reported.
    """
    parsed = [_ParsedDocument.parse(doc) for doc in documents]

    result: dict[str, CrossRefs] = {}
    for entry in parsed:
        doc = entry.document
        if doc.id in result:
            continue
        result[doc.id] = CrossRefs(
            id=doc.id,
            outgoing_links=entry.outgoing_links,
            backlinks=_collect_backlinks(doc, parsed),
        )

    logger.debug(
        "Computed cross-refs for %d documents (%d backlinks)",
        len(result),
        sum(len(refs.backlinks) for refs in result.values()),
    )
    return result


def resolve_outgoing_links(
    cross_refs: CrossRefs, documents: Sequence[Document]
) -> list[ResolvedLink]:
    """Attach the target document summary to each outgoing link.

    Citations resolve against ``bibtex_entry`` citation keys, wikilinks
    against ids and filenames. Unresolved links get ``resolved=None``.
    """
    object_index = build_object_index(documents)
    citation_index = build_citation_key_index(documents)

    resolved_links = []
    for link in cross_refs.outgoing_links:
        if link.link_type == LinkType.CITATION:
            target = citation_index.get(link.target_id)
        else:
            target = object_index.get(link.target_id)

        resolved = None
        if target is not None:
            resolved = ResolvedTarget(
                id=target.id,
                title=target.title,
                path=target.relative_path,
                type=target.type,
            )
        resolved_links.append(
            ResolvedLink(**link.model_dump(), resolved=resolved)
        )

    return resolved_links

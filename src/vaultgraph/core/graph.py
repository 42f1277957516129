"""Graph views over the vault for visualization.

Two independent graphs are built here: the object graph, whose edges are
resolved wikilinks between documents, and the project dependency graph,
whose edges come from the ``includes`` lists of project profiles.
"""

import logging
from collections import Counter
from collections.abc import Sequence

from vaultgraph.core.index import build_object_index
from vaultgraph.core.models import (
    Document,
    GraphEdge,
    GraphNode,
    ObjectGraph,
    ProjectGraph,
    ProjectGraphNode,
    VaultConfig,
)
from vaultgraph.core.parser import parse_wiki_links

logger = logging.getLogger(__name__)


def build_object_graph(documents: Sequence[Document]) -> ObjectGraph:
    """Build the document graph.

    Args:
        documents: Every document in the vault.

    Returns:
        One node per document and one edge per distinct
        (source, resolved target) pair. Unresolved links are dropped.
    """
    index = build_object_index(documents)
    nodes: list[GraphNode] = []
    edges: list[GraphEdge] = []
    seen_edges: set[str] = set()

    for doc in documents:
        links = parse_wiki_links(doc.body)
        nodes.append(
            GraphNode(
                id=doc.id,
                title=doc.title or doc.id,
                type=doc.type,
                project=doc.project,
                path=doc.relative_path,
                link_count=len(links),
            )
        )

        for link in links:
            target = index.get(link.target_id)
            if target is None:
                continue
            edge_key = f"{doc.id}->{target.id}"
            if edge_key in seen_edges:
                continue
            seen_edges.add(edge_key)
            edges.append(GraphEdge(source=doc.id, target=target.id))

    logger.debug("Object graph: %d nodes, %d edges", len(nodes), len(edges))
    return ObjectGraph(nodes=nodes, edges=edges)


def build_project_dependency_graph(
    config: VaultConfig | None, documents: Sequence[Document]
) -> ProjectGraph:
    """Build the project graph from profile ``includes`` declarations.

    Nodes follow declaration order. An include naming an undeclared
    profile adds no edge. Cycles and self-includes are kept as declared.
    """
    profiles = (config.project_profiles if config else None) or []
    object_counts = Counter(doc.project for doc in documents)
    declared = {profile.name for profile in profiles}

    nodes = [
        ProjectGraphNode(
            id=profile.name,
            title=profile.name,
            object_count=object_counts[profile.name],
        )
        for profile in profiles
    ]

    edges = []
    for profile in profiles:
        for included in profile.includes or []:
            if included in declared:
                edges.append(
                    GraphEdge(source=profile.name, target=included, directed=True)
                )

    logger.debug("Project graph: %d nodes, %d edges", len(nodes), len(edges))
    return ProjectGraph(nodes=nodes, edges=edges)

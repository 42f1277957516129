"""VaultGraph FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query

from vaultgraph.config import settings
from vaultgraph.core.crossref import get_object_cross_refs, resolve_outgoing_links
from vaultgraph.core.graph import build_object_graph, build_project_dependency_graph
from vaultgraph.core.storage import VaultStorage

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: configure logging."""
    logging.basicConfig(level=settings.log_level.upper())
    logger.info("Serving vault at %s", settings.vault_dir)
    yield


# Initialize app
app = FastAPI(
    title=settings.app_title,
    debug=settings.debug,
    lifespan=lifespan,
)

# Initialize storage
storage = VaultStorage(settings.vault_dir, config_file=settings.config_file)


# ========== Objects ==========


@app.get("/api/objects")
async def api_objects():
    """List all documents in the vault."""
    documents = await storage.list_documents()
    return [
        {
            "id": doc.id,
            "title": doc.title or doc.id,
            "type": doc.type,
            "project": doc.project,
            "path": doc.relative_path,
        }
        for doc in documents
    ]


@app.get("/api/crossrefs/{object_path:path}")
async def api_crossrefs(object_path: str):
    """Return outgoing links and backlinks for one document."""
    documents = await storage.list_documents()
    document = storage.find_document(object_path, documents)
    if document is None:
        raise HTTPException(status_code=404, detail="Object not found")

    cross_refs = get_object_cross_refs(document, documents)
    resolved = resolve_outgoing_links(cross_refs, documents)

    data = cross_refs.model_dump(by_alias=True, exclude_none=True, mode="json")
    data["outgoingLinks"] = []
    for link in resolved:
        entry = link.model_dump(by_alias=True, exclude_none=True, mode="json")
        # Unresolved links still report "resolved": null
        entry.setdefault("resolved", None)
        data["outgoingLinks"].append(entry)
    return data


# ========== Graph visualization ==========


@app.get("/api/graph")
async def api_graph(graph_type: str = Query("objects", alias="type")):
    """Return the object graph or the project dependency graph as JSON."""
    if graph_type == "objects":
        documents = await storage.list_documents()
        graph = build_object_graph(documents)
    elif graph_type == "project-deps":
        config = await storage.load_config()
        documents = await storage.list_documents(config)
        graph = build_project_dependency_graph(config, documents)
    else:
        raise HTTPException(status_code=400, detail=f"Unknown graph type: {graph_type}")

    return graph.model_dump(by_alias=True, exclude_none=True, mode="json")

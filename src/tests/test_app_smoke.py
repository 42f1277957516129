"""End-to-end smoke tests for the VaultGraph API.

Starts the app against a temporary vault and exercises the object
listing, cross-reference and graph routes.
"""

import importlib
import os

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


@pytest.fixture()
def vault_app(tmp_path):
    """Create a fresh app instance pointing at a temp vault.

    Reloads config and main modules so the app picks up the temp
    vault_dir. Yields the FastAPI app object.
    """
    files = {
        "vaultgraph.yaml": (
            "projectProfiles:\n"
            "  - name: main\n"
            "    includes: [shared, missing]\n"
            "  - name: shared\n"
        ),
        "main/intro.md": (
            "---\ntype: note\ntitle: Intro\n---\n"
            "Start with [[basics|The Basics]], see [[nowhere]] and [@smith2024].\n"
        ),
        "shared/basics.md": "---\ntype: note\n---\nBack to [[intro]].\n",
        "refs/smith.md": (
            "---\ntype: bibtex_entry\ncitation_key: smith2024\ntitle: Smith\n---\n"
        ),
    }
    for name, content in files.items():
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    os.environ["VAULTGRAPH_VAULT_DIR"] = str(tmp_path)

    import vaultgraph.config
    importlib.reload(vaultgraph.config)
    import vaultgraph.main
    importlib.reload(vaultgraph.main)

    yield vaultgraph.main.app

    # Cleanup env
    os.environ.pop("VAULTGRAPH_VAULT_DIR", None)


@pytest_asyncio.fixture()
async def client(vault_app):
    """Async HTTP client wired to the app (no lifespan)."""
    transport = ASGITransport(app=vault_app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


# ============================================================
# Object listing
# ============================================================


class TestObjects:
    @pytest.mark.asyncio
    async def test_lists_documents(self, client):
        resp = await client.get("/api/objects")
        assert resp.status_code == 200
        objects = {o["id"]: o for o in resp.json()}
        assert set(objects) == {"intro", "basics", "smith"}
        assert objects["intro"]["project"] == "main"
        assert objects["intro"]["path"] == "main/intro.md"
        assert objects["basics"]["title"] == "basics"


# ============================================================
# Cross-references
# ============================================================


class TestCrossRefs:
    @pytest.mark.asyncio
    async def test_crossrefs_by_path(self, client):
        resp = await client.get("/api/crossrefs/main/intro.md")
        assert resp.status_code == 200
        data = resp.json()
        assert data["id"] == "intro"

        links = data["outgoingLinks"]
        assert [link["targetId"] for link in links] == [
            "basics",
            "nowhere",
            "smith2024",
        ]
        assert links[0]["displayText"] == "The Basics"
        assert links[0]["linkType"] == "wikilink"
        assert links[0]["resolved"]["path"] == "shared/basics.md"
        assert links[1]["resolved"] is None
        assert "displayText" not in links[1]
        assert "displayText" not in links[2]
        assert links[2]["linkType"] == "citation"
        assert links[2]["resolved"]["title"] == "Smith"

        assert [b["sourceId"] for b in data["backlinks"]] == ["basics"]
        assert data["backlinks"][0]["sourcePath"] == "shared/basics.md"

    @pytest.mark.asyncio
    async def test_crossrefs_by_id(self, client):
        resp = await client.get("/api/crossrefs/smith")
        assert resp.status_code == 200
        backlinks = resp.json()["backlinks"]
        assert len(backlinks) == 1
        assert backlinks[0]["sourceId"] == "intro"
        assert backlinks[0]["sourceTitle"] == "Intro"
        assert backlinks[0]["linkType"] == "citation"

    @pytest.mark.asyncio
    async def test_unknown_object(self, client):
        resp = await client.get("/api/crossrefs/does/not/exist.md")
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Object not found"


# ============================================================
# Graphs
# ============================================================


class TestGraph:
    @pytest.mark.asyncio
    async def test_object_graph_is_default(self, client):
        resp = await client.get("/api/graph")
        assert resp.status_code == 200
        data = resp.json()
        nodes = {n["id"]: n for n in data["nodes"]}
        assert nodes["intro"]["linkCount"] == 2
        assert nodes["smith"]["title"] == "Smith"
        edges = {(e["source"], e["target"]) for e in data["edges"]}
        assert edges == {("intro", "basics"), ("basics", "intro")}

    @pytest.mark.asyncio
    async def test_project_graph(self, client):
        resp = await client.get("/api/graph", params={"type": "project-deps"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["type"] == "project-deps"
        assert data["nodes"] == [
            {"id": "main", "title": "main", "objectCount": 1},
            {"id": "shared", "title": "shared", "objectCount": 1},
        ]
        assert data["edges"] == [
            {"source": "main", "target": "shared", "directed": True}
        ]

    @pytest.mark.asyncio
    async def test_unknown_graph_type(self, client):
        resp = await client.get("/api/graph", params={"type": "tag-cooccurrence"})
        assert resp.status_code == 400
        assert "Unknown graph type" in resp.json()["detail"]

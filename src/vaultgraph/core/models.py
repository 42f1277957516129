"""Data models for VaultGraph."""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class LinkType(str, Enum):
    """Kind of reference between two documents."""

    WIKILINK = "wikilink"
    CITATION = "citation"


class _CamelModel(BaseModel):
    """Base for models serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Document(_CamelModel):
    """A vault object as produced by the loader."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: str
    title: str | None = None
    project: str = ""
    relative_path: str
    body: str = ""
    frontmatter: dict[str, Any] = Field(default_factory=dict)

    @property
    def citation_key(self) -> str | None:
        """Citation key of a bibliographic entry, if it has a usable one."""
        if self.type != "bibtex_entry":
            return None
        key = self.frontmatter.get("citation_key")
        if isinstance(key, str) and key:
            return key
        return None


class Link(_CamelModel):
    """A wikilink or citation found in a document body."""

    target_id: str
    display_text: str | None = None
    context: str | None = None
    link_type: LinkType


class Backlink(_CamelModel):
    """A reference to a document from another document."""

    source_id: str
    source_title: str | None = None
    source_path: str
    context: str | None = None
    link_type: LinkType


class CrossRefs(_CamelModel):
    """Outgoing links and backlinks of one document."""

    id: str
    outgoing_links: list[Link] = Field(default_factory=list)
    backlinks: list[Backlink] = Field(default_factory=list)


class ResolvedTarget(BaseModel):
    """Summary of the document a link points at."""

    id: str
    title: str | None = None
    path: str
    type: str


class ResolvedLink(Link):
    """Outgoing link paired with the document it resolves to."""

    resolved: ResolvedTarget | None = None


class GraphNode(_CamelModel):
    id: str
    title: str
    type: str
    project: str
    path: str
    link_count: int = 0


class GraphEdge(BaseModel):
    source: str
    target: str
    weight: float | None = None
    directed: bool | None = None


class ObjectGraph(BaseModel):
    """Whole-vault graph of documents and resolved wikilinks."""

    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)


class ProjectProfile(BaseModel):
    """Declared project with the profiles it includes."""

    model_config = ConfigDict(extra="allow")

    name: str
    includes: list[str] | None = None


class VaultConfig(_CamelModel):
    """Vault-level configuration read from the config file."""

    model_config = ConfigDict(extra="allow")

    project_profiles: list[ProjectProfile] | None = None
    default_project: str = "default"


class ProjectGraphNode(_CamelModel):
    id: str
    title: str
    object_count: int = 0


class ProjectGraph(BaseModel):
    """Dependency graph over project profiles."""

    type: Literal["project-deps"] = "project-deps"
    nodes: list[ProjectGraphNode] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)

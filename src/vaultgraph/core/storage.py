"""Read-only loading of vault documents and configuration."""

import logging
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from vaultgraph.core.models import Document, VaultConfig

logger = logging.getLogger(__name__)


class VaultStorage:
    """File-based vault reader.

    Documents are Markdown files with YAML frontmatter anywhere under
    ``base_path``. Hidden files and directories are ignored. Documents
    without a ``type`` in their frontmatter are skipped.
    """

    FRONTMATTER_PATTERN = re.compile(
        r"^---\s*\n(.*?)\n---\s*\n",
        re.DOTALL,
    )

    def __init__(self, base_path: Path, config_file: str = "vaultgraph.yaml"):
        self.base_path = base_path
        self.config_file = config_file

    def _relative_path(self, path: Path) -> str:
        return path.relative_to(self.base_path).as_posix()

    def _parse_frontmatter(self, content: str) -> tuple[dict[str, Any], str]:
        """Parse YAML frontmatter from content.

        Returns (frontmatter, content_without_frontmatter).
        """
        match = self.FRONTMATTER_PATTERN.match(content)
        if match:
            try:
                data = yaml.safe_load(match.group(1)) or {}
            except yaml.YAMLError:
                return {}, content
            if isinstance(data, dict):
                return data, content[match.end() :]
        return {}, content

    def _iter_markdown_files(self) -> list[Path]:
        if not self.base_path.is_dir():
            return []
        files = []
        for path in self.base_path.rglob("*.md"):
            rel_parts = path.relative_to(self.base_path).parts
            if any(part.startswith(".") for part in rel_parts):
                continue
            files.append(path)
        return sorted(files, key=self._relative_path)

    def _to_document(
        self, path: Path, raw: str, config: VaultConfig
    ) -> Document | None:
        """Build a document from a file's raw content."""
        relative_path = self._relative_path(path)
        frontmatter, body = self._parse_frontmatter(raw)

        doc_type = frontmatter.get("type")
        if not isinstance(doc_type, str) or not doc_type:
            logger.warning("Skipping %s: missing type in frontmatter", relative_path)
            return None

        slug = frontmatter.get("slug")
        doc_id = slug if isinstance(slug, str) and slug else path.stem
        title = frontmatter.get("title")

        declared = {p.name for p in config.project_profiles or []}
        first_dir = relative_path.split("/")[0] if "/" in relative_path else ""
        project = first_dir if first_dir in declared else config.default_project

        return Document(
            id=doc_id,
            type=doc_type,
            title=title if isinstance(title, str) else None,
            project=project,
            relative_path=relative_path,
            body=body,
            frontmatter=frontmatter,
        )

    async def load_config(self) -> VaultConfig:
        """Load the vault config file. Missing or invalid files yield defaults."""
        path = self.base_path / self.config_file
        if not path.exists():
            return VaultConfig()

        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
            return VaultConfig.model_validate(data)
        except (yaml.YAMLError, ValidationError):
            logger.exception("Invalid vault config %s", path)
            return VaultConfig()

    async def list_documents(self, config: VaultConfig | None = None) -> list[Document]:
        """Load every document in the vault, ordered by relative path."""
        if config is None:
            config = await self.load_config()

        documents = []
        for path in self._iter_markdown_files():
            try:
                raw = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Failed to read %s: %s", path, e)
                continue
            doc = self._to_document(path, raw, config)
            if doc is not None:
                documents.append(doc)

        logger.debug("Loaded %d documents from %s", len(documents), self.base_path)
        return documents

    def find_document(
        self, object_path: str, documents: list[Document]
    ) -> Document | None:
        """Find a document by relative path or id."""
        for doc in documents:
            if doc.relative_path == object_path or doc.id == object_path:
                return doc
        return None
